"""
Profile-side API routes: teams, interests, experience, blocks, sign-in
attempts, profile visits, social links, follows and time spent
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.crud import MUTATIONS, add_crud_routes
from app.core.database import get_db
from app.core.errors import BadRequestError
from app.core.logging_config import LoggingConfig
from app.core.security import CurrentUser, require_token
from app.schemas.user import (AttemptLogCreate, AttemptLogResponse,
                              BlockCreate, BlockResponse,
                              ExperienceEducationCreate,
                              ExperienceEducationResponse,
                              ExperienceEducationUpdate, FollowCreate,
                              FollowResponse, InterestCreate, InterestResponse,
                              SocialMediaCreate, SocialMediaResponse,
                              SocialMediaUpdate, TeamCreate, TeamResponse,
                              TeamUpdate, TeamUserCreate, TeamUserResponse,
                              TimeSpentRequest, TimeSpentResponse,
                              ToggleFollowResponse, UserSummary,
                              VisitorProfileProjectCreate,
                              VisitorProfileProjectResponse)
from app.services.profile_service import (AttemptLogService, BlockService,
                                          ExperienceEducationService,
                                          InterestService,
                                          VisitorProfileProjectService)
from app.services.social_service import FollowService, SocialMediaService
from app.services.team_service import TeamService, TeamUserService
from app.services.view_service import UserActivityService

logger = LoggingConfig.get_logger(__name__)

team_router = APIRouter(prefix="/api/v1/team", tags=["team"])
team_user_router = APIRouter(prefix="/api/v1/team-users", tags=["team-users"])
interest_router = APIRouter(prefix="/api/v1/interests", tags=["interests"])
experience_router = APIRouter(prefix="/api/v1/experience-education", tags=["experience-education"])
block_router = APIRouter(prefix="/api/v1/block", tags=["block"])
attempt_log_router = APIRouter(prefix="/api/v1/attempt-log", tags=["attempt-log"])
visitor_router = APIRouter(prefix="/api/v1/visitor-profile-project", tags=["visitor-profile-project"])
social_media_router = APIRouter(prefix="/api/v1/social-media", tags=["social-media"])
follow_router = APIRouter(prefix="/api/v1/follow", tags=["follow"])
activity_router = APIRouter(prefix="/api/v1/user-activity", tags=["user-activity"])


@team_user_router.get("/team/{team_id}", response_model=List[TeamUserResponse])
async def members_of_team(team_id: UUID, db: Session = Depends(get_db)):
    return TeamUserService(db).find_by_team(team_id)


@interest_router.get("/user/{user_id}", response_model=List[InterestResponse])
async def interests_of_user(user_id: UUID, db: Session = Depends(get_db)):
    return InterestService(db).find_by_user(user_id)


@experience_router.get("/user/{user_id}", response_model=List[ExperienceEducationResponse])
async def experience_of_user(user_id: UUID, db: Session = Depends(get_db)):
    return ExperienceEducationService(db).find_by_user(user_id)


@attempt_log_router.get("/user/{user_id}/failed", response_model=List[AttemptLogResponse])
async def failed_attempts(user_id: UUID, db: Session = Depends(get_db)):
    return AttemptLogService(db).find_failed_by_user(user_id)


@social_media_router.get("/user/{user_id}", response_model=List[SocialMediaResponse])
async def social_media_of_user(user_id: UUID, db: Session = Depends(get_db)):
    return SocialMediaService(db).find_by_user(user_id)


add_crud_routes(team_router, TeamService, TeamResponse, TeamCreate, TeamUpdate, protected=MUTATIONS)
add_crud_routes(team_user_router, TeamUserService, TeamUserResponse, TeamUserCreate,
                routes=("create", "list", "get", "delete"))
add_crud_routes(interest_router, InterestService, InterestResponse, InterestCreate,
                routes=("create", "list", "get", "delete"))
add_crud_routes(experience_router, ExperienceEducationService, ExperienceEducationResponse,
                ExperienceEducationCreate, ExperienceEducationUpdate, protected=MUTATIONS)
add_crud_routes(block_router, BlockService, BlockResponse, BlockCreate,
                routes=("create", "list", "get", "delete"), protected=MUTATIONS)
add_crud_routes(attempt_log_router, AttemptLogService, AttemptLogResponse, AttemptLogCreate,
                routes=("create", "list", "paginate", "get", "delete"))
add_crud_routes(visitor_router, VisitorProfileProjectService, VisitorProfileProjectResponse,
                VisitorProfileProjectCreate, routes=("create", "list", "paginate", "get", "delete"),
                protected=MUTATIONS)
add_crud_routes(social_media_router, SocialMediaService, SocialMediaResponse,
                SocialMediaCreate, SocialMediaUpdate, routes=("create", "list", "get", "update", "delete"),
                protected=MUTATIONS)


# Follows

@follow_router.post("", response_model=FollowResponse, status_code=status.HTTP_201_CREATED)
async def follow_user(
    body: FollowCreate,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return FollowService(db).create_follow(current_user.id, body.following_id)


@follow_router.post("/toggle", response_model=ToggleFollowResponse)
async def toggle_follow(
    body: FollowCreate,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return FollowService(db).toggle_follow(current_user.id, body.following_id)


@follow_router.delete("/{id}", response_model=FollowResponse)
async def unfollow(
    id: UUID,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return FollowService(db).remove_follow(id, current_user.id)


@follow_router.get("/user/{user_id}/following", response_model=List[UserSummary])
async def following(user_id: UUID, db: Session = Depends(get_db)):
    return FollowService(db).get_following(user_id)


@follow_router.get("/user/{user_id}/followers", response_model=List[UserSummary])
async def followers(user_id: UUID, db: Session = Depends(get_db)):
    return FollowService(db).get_followers(user_id)


# Time spent

@activity_router.post("/{user_id}/time-spent", response_model=TimeSpentResponse)
async def record_time_spent(user_id: UUID, body: TimeSpentRequest, db: Session = Depends(get_db)):
    """Add minutes, or seconds rounded to minutes, to the user's total"""
    service = UserActivityService(db)
    if body.minutes is not None:
        total = service.record_time_spent(user_id, body.minutes)
    elif body.seconds is not None:
        total = service.record_time_spent_in_seconds(user_id, body.seconds)
    else:
        raise BadRequestError("Either minutes or seconds is required")
    return {"user_id": user_id, "time_spent": total}


@activity_router.get("/{user_id}/time-spent", response_model=TimeSpentResponse)
async def get_time_spent(user_id: UUID, db: Session = Depends(get_db)):
    return {"user_id": user_id, "time_spent": UserActivityService(db).get_time_spent(user_id)}


routers = (
    team_router,
    team_user_router,
    interest_router,
    experience_router,
    block_router,
    attempt_log_router,
    visitor_router,
    social_media_router,
    follow_router,
    activity_router,
)
