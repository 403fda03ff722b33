"""
Posts, shares, post media and project videos
"""
from typing import List, Optional
from uuid import UUID

from fastapi import (APIRouter, Depends, File, Form, UploadFile,
                     status)
from sqlalchemy.orm import Session

from app.api.crud import MUTATIONS, add_crud_routes
from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.core.security import CurrentUser, require_post_owner, require_token
from app.models.post import MediaType
from app.schemas.content import (MediaIntegrity, PostCreate,
                                 PostMediaResponse, PostResponse,
                                 PostSharedCreate, PostSharedResponse,
                                 PostUpdate, VideoCreate, VideoResponse,
                                 VideoUpdate)
from app.services.post_media_service import PostMediaService
from app.services.post_service import (PostService, PostSharedService,
                                       VideoService)

logger = LoggingConfig.get_logger(__name__)

post_router = APIRouter(prefix="/api/v1/posts", tags=["posts"])
post_shared_router = APIRouter(prefix="/api/v1/post-shared", tags=["post-shared"])
post_media_router = APIRouter(prefix="/api/v1/post-media", tags=["post-media"])
video_router = APIRouter(prefix="/api/v1/project-videos", tags=["project-videos"])


# Posts

@post_router.get("/public", response_model=List[PostResponse])
async def public_posts(db: Session = Depends(get_db)):
    return PostService(db).find_public_posts()


@post_router.get("/user/{user_id}", response_model=List[PostResponse])
async def posts_of_user(user_id: UUID, db: Session = Depends(get_db)):
    return PostService(db).find_by_user(user_id)


@post_router.patch("/{id}", response_model=PostResponse)
async def update_post(
    id: UUID,
    body: PostUpdate,
    current_user: CurrentUser = Depends(require_post_owner),
    db: Session = Depends(get_db),
):
    return PostService(db).update(id, body.model_dump(exclude_unset=True))


@post_router.delete("/{id}", response_model=PostResponse)
async def delete_post(
    id: UUID,
    current_user: CurrentUser = Depends(require_post_owner),
    db: Session = Depends(get_db),
):
    return PostService(db).remove(id)


add_crud_routes(post_router, PostService, PostResponse, PostCreate,
                routes=("create", "list", "search", "paginate", "get"), protected=("create",))


# Shares

@post_shared_router.get("/post/{post_id}", response_model=List[PostSharedResponse])
async def shares_of_post(post_id: UUID, db: Session = Depends(get_db)):
    return PostSharedService(db).find_by_post(post_id)


add_crud_routes(post_shared_router, PostSharedService, PostSharedResponse, PostSharedCreate,
                routes=("create", "list", "get", "delete"))


# Post media

@post_media_router.post("/upload/{post_id}", response_model=PostMediaResponse, status_code=status.HTTP_201_CREATED)
async def upload_post_media(
    post_id: UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """Store an image or video for a post; the MIME type picks the directory"""
    return PostMediaService(db).upload_and_create(post_id, file)


@post_media_router.get("/post/{post_id}", response_model=List[PostMediaResponse])
async def media_of_post(post_id: UUID, db: Session = Depends(get_db)):
    return PostMediaService(db).find_by_post(post_id)


@post_media_router.get("/post/{post_id}/count")
async def count_media_of_post(post_id: UUID, db: Session = Depends(get_db)):
    return {"count": PostMediaService(db).count_by_post(post_id)}


@post_media_router.get("/post/{post_id}/integrity", response_model=MediaIntegrity)
async def media_integrity(post_id: UUID, db: Session = Depends(get_db)):
    return PostMediaService(db).check_file_integrity(post_id)


@post_media_router.get("/type/{media_type}", response_model=List[PostMediaResponse])
async def media_by_type(media_type: MediaType, db: Session = Depends(get_db)):
    return PostMediaService(db).find_by_type(media_type)


@post_media_router.delete("/{id}", response_model=PostMediaResponse)
async def delete_post_media(id: UUID, db: Session = Depends(get_db)):
    """Delete the row and its file"""
    return PostMediaService(db).remove_with_file(id)


add_crud_routes(post_media_router, PostMediaService, PostMediaResponse, routes=("list", "get"))


# Project videos

@video_router.post("/upload", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def upload_video(
    project_id: UUID = Form(...),
    title: str = Form(..., min_length=1, max_length=255),
    description: Optional[str] = Form(None),
    duration: Optional[float] = Form(None, ge=0),
    video: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    data = {"project_id": project_id, "title": title, "description": description, "duration": duration}
    return VideoService(db).upload_video(video, data)


@video_router.get("/project/{project_id}", response_model=List[VideoResponse])
async def videos_of_project(project_id: UUID, db: Session = Depends(get_db)):
    return VideoService(db).find_by_project(project_id)


@video_router.get("/project/{project_id}/count")
async def count_videos_of_project(project_id: UUID, db: Session = Depends(get_db)):
    return {"count": VideoService(db).count_by_project(project_id)}


add_crud_routes(video_router, VideoService, VideoResponse, VideoCreate, VideoUpdate, protected=MUTATIONS)

routers = (post_router, post_shared_router, post_media_router, video_router)
