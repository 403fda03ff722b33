"""
Comments, likes, video views and counter maintenance
"""
from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.crud import add_crud_routes
from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.core.security import CurrentUser, require_comment_owner, require_token
from app.schemas.content import (CommentCreate, CommentResponse, CommentStats,
                                 CommentThread, CommentUpdate, LikeActivity,
                                 LikeCount, LikeCreate, LikeResponse,
                                 ToggleLikeResponse, VideoViewStats,
                                 ViewCreate, ViewResponse)
from app.services.comment_service import CommentService
from app.services.counter_service import CounterService, CounterTarget
from app.services.like_service import LikeService
from app.services.view_service import ViewService

logger = LoggingConfig.get_logger(__name__)

comment_router = APIRouter(prefix="/api/v1/comment", tags=["comment"])
like_router = APIRouter(prefix="/api/v1/like", tags=["like"])
view_router = APIRouter(prefix="/api/v1/view", tags=["view"])
counter_router = APIRouter(prefix="/api/v1/counters", tags=["counters"])


# Comments

@comment_router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(body: CommentCreate, db: Session = Depends(get_db)):
    return CommentService(db).create(body.model_dump())


@comment_router.get("/project/{project_id}", response_model=List[CommentThread])
async def comments_of_project(project_id: UUID, db: Session = Depends(get_db)):
    return CommentService(db).find_by_project(project_id)


@comment_router.get("/project/{project_id}/stats", response_model=CommentStats)
async def comment_stats_of_project(project_id: UUID, db: Session = Depends(get_db)):
    return CommentService(db).get_project_comment_stats(project_id)


@comment_router.get("/post/{post_id}", response_model=List[CommentThread])
async def comments_of_post(post_id: UUID, db: Session = Depends(get_db)):
    return CommentService(db).find_by_post(post_id)


@comment_router.get("/post/{post_id}/stats", response_model=CommentStats)
async def comment_stats_of_post(post_id: UUID, db: Session = Depends(get_db)):
    return CommentService(db).get_post_comment_stats(post_id)


@comment_router.get("/{id}/replies", response_model=List[CommentResponse])
async def replies(id: UUID, db: Session = Depends(get_db)):
    return CommentService(db).find_replies(id)


@comment_router.patch("/{id}", response_model=CommentResponse)
async def update_comment(
    id: UUID,
    body: CommentUpdate,
    current_user: CurrentUser = Depends(require_comment_owner),
    db: Session = Depends(get_db),
):
    return CommentService(db).update(id, body.model_dump())


@comment_router.delete("/{id}", response_model=CommentResponse)
async def delete_comment(
    id: UUID,
    current_user: CurrentUser = Depends(require_comment_owner),
    db: Session = Depends(get_db),
):
    return CommentService(db).remove(id)


add_crud_routes(comment_router, CommentService, CommentResponse, routes=("list", "search", "paginate", "get"))


# Likes

@like_router.post("", response_model=LikeResponse, status_code=status.HTTP_201_CREATED)
async def create_like(body: LikeCreate, db: Session = Depends(get_db)):
    return LikeService(db).create(body.model_dump())


@like_router.post("/toggle", response_model=ToggleLikeResponse)
async def toggle_like(body: LikeCreate, db: Session = Depends(get_db)):
    return LikeService(db).toggle_like(body.model_dump())


@like_router.get("/check")
async def has_user_liked(
    user_id: UUID,
    project_id: Optional[UUID] = None,
    post_id: Optional[UUID] = None,
    comment_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
):
    target = {"project_id": project_id, "post_id": post_id, "comment_id": comment_id}
    return {"liked": LikeService(db).has_user_liked(user_id, target)}


@like_router.get("/count/project/{project_id}", response_model=LikeCount)
async def count_project_likes(project_id: UUID, db: Session = Depends(get_db)):
    return {"count": LikeService(db).count_project_likes(project_id)}


@like_router.get("/count/post/{post_id}", response_model=LikeCount)
async def count_post_likes(post_id: UUID, db: Session = Depends(get_db)):
    return {"count": LikeService(db).count_post_likes(post_id)}


@like_router.get("/count/comment/{comment_id}", response_model=LikeCount)
async def count_comment_likes(comment_id: UUID, db: Session = Depends(get_db)):
    return {"count": LikeService(db).count_comment_likes(comment_id)}


@like_router.get("/user/{user_id}/activity", response_model=LikeActivity)
async def like_activity(user_id: UUID, db: Session = Depends(get_db)):
    return LikeService(db).get_user_like_activity(user_id)


add_crud_routes(like_router, LikeService, LikeResponse, routes=("list", "paginate", "get", "delete"))


# Views

@view_router.post("", response_model=ViewResponse)
async def record_view(body: ViewCreate, db: Session = Depends(get_db)):
    """Create the user's view of a video or add to its watch time"""
    return ViewService(db).record_view(body.user_id, body.video_id, body.timespent)


@view_router.get("/video/{video_id}", response_model=List[ViewResponse])
async def views_of_video(video_id: UUID, db: Session = Depends(get_db)):
    return ViewService(db).find_by_video(video_id)


@view_router.get("/video/{video_id}/stats", response_model=VideoViewStats)
async def view_stats(video_id: UUID, db: Session = Depends(get_db)):
    return ViewService(db).get_video_view_stats(video_id)


@view_router.get("/user/{user_id}", response_model=List[ViewResponse])
async def views_of_user(user_id: UUID, db: Session = Depends(get_db)):
    return ViewService(db).find_by_user(user_id)


add_crud_routes(view_router, ViewService, ViewResponse, routes=("list", "get", "delete"))


# Counters

@counter_router.post("/recalculate/all", response_model=Dict[str, int])
async def recalculate_all(
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    """Rebuild the counters of every project, post and comment"""
    logger.warning(f"Full counter recalculation requested by {current_user.id}")
    return CounterService(db).recalculate_all()


@counter_router.post("/recalculate/{target}/{id}", response_model=Dict[str, int])
async def recalculate(
    target: CounterTarget,
    id: UUID,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    """Reset the stored counters of one entity from COUNT queries"""
    logger.info(f"Counter recalculation for {target.value} {id} requested by {current_user.id}")
    return CounterService(db).recalculate_counters(target, id)


routers = (comment_router, like_router, view_router, counter_router)
