"""
Posts, media, videos, files, comments, likes and views
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import ORMModel, strip_required


class PostCreate(BaseModel):
    user_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=5000)
    is_public: bool = True
    ml_prediction: Optional[str] = Field(None, max_length=255)

    @field_validator("title", "content")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return strip_required(v)


class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1, max_length=5000)
    is_public: Optional[bool] = None
    ml_prediction: Optional[str] = Field(None, max_length=255)


class PostMediaResponse(ORMModel):
    id: UUID
    post_id: UUID
    media_url: str
    media_type: str
    file_name: str
    file_size: int
    mime_type: str
    created_at: datetime


class PostResponse(ORMModel):
    id: UUID
    user_id: UUID
    title: str
    content: str
    is_public: bool
    ml_prediction: Optional[str] = None
    nb_likes: int
    nb_comments: int
    nb_views: int
    nb_shares: int
    created_at: datetime
    updated_at: datetime


class PostSharedCreate(BaseModel):
    post_id: UUID
    user_id: UUID
    description: Optional[str] = Field(None, max_length=500)


class PostSharedResponse(ORMModel):
    id: UUID
    post_id: UUID
    user_id: UUID
    description: Optional[str] = None
    created_at: datetime


class MediaIntegrity(BaseModel):
    valid: bool
    missing: List[Dict[str, Any]]


class VideoCreate(BaseModel):
    project_id: UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    video_url: Optional[str] = Field(None, max_length=500)
    duration: Optional[float] = Field(None, ge=0)
    thumbnail_url: Optional[str] = Field(None, max_length=500)


class VideoUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    duration: Optional[float] = Field(None, ge=0)
    thumbnail_url: Optional[str] = Field(None, max_length=500)


class VideoResponse(ORMModel):
    id: UUID
    project_id: UUID
    title: str
    description: Optional[str] = None
    video_url: str
    duration: Optional[float] = None
    thumbnail_url: Optional[str] = None
    nb_views: int
    created_at: datetime
    updated_at: datetime


class ProjectFileResponse(ORMModel):
    """Stored project document; the disk path is not exposed"""
    id: UUID
    project_id: UUID
    file_name: str
    file_type: str
    file_size: int
    mime_type: str
    created_at: datetime


class ProjectFileStats(BaseModel):
    total_files: int
    files_by_type: Dict[str, int]
    total_size_bytes: int


# Interactions

class CommentCreate(BaseModel):
    user_id: UUID
    content: str = Field(..., min_length=1, max_length=5000)
    project_id: Optional[UUID] = None
    post_id: Optional[UUID] = None
    parent_id: Optional[UUID] = None

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return strip_required(v)


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return strip_required(v)


class CommentResponse(ORMModel):
    id: UUID
    user_id: UUID
    project_id: Optional[UUID] = None
    post_id: Optional[UUID] = None
    parent_id: Optional[UUID] = None
    content: str
    nb_likes: int
    created_at: datetime
    updated_at: datetime


class CommentThread(CommentResponse):
    replies: List[CommentResponse] = []


class CommentStats(BaseModel):
    total_comments: int
    top_level_comments: int
    replies: int


class LikeCreate(BaseModel):
    user_id: UUID
    project_id: Optional[UUID] = None
    post_id: Optional[UUID] = None
    comment_id: Optional[UUID] = None


class LikeResponse(ORMModel):
    id: UUID
    user_id: UUID
    project_id: Optional[UUID] = None
    post_id: Optional[UUID] = None
    comment_id: Optional[UUID] = None
    created_at: datetime


class ToggleLikeResponse(BaseModel):
    liked: bool
    like: Optional[LikeResponse] = None


class LikeCount(BaseModel):
    count: int


class LikeActivity(BaseModel):
    total_likes: int
    project_likes: int
    post_likes: int
    comment_likes: int
    recent_likes: List[LikeResponse]


class ViewCreate(BaseModel):
    user_id: UUID
    video_id: UUID
    timespent: int = Field(0, ge=0)


class ViewResponse(ORMModel):
    id: UUID
    user_id: UUID
    video_id: UUID
    timespent: int
    created_at: datetime
    updated_at: datetime


class VideoViewStats(BaseModel):
    total_views: int
    total_timespent: int
    average_timespent: float
