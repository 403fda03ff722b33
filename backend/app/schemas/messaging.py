"""
Discussion, message and notification schemas
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.models.messaging import DiscussionType, NotificationType
from app.schemas.common import ORMModel, Pagination, strip_required
from app.schemas.user import UserSummary

MAX_MESSAGE_LENGTH = 2000


class DiscussionCreate(BaseModel):
    receiver_id: UUID
    type: DiscussionType = DiscussionType.PRIVATE
    project_id: Optional[UUID] = None


class DiscussionResponse(ORMModel):
    id: UUID
    sender_id: UUID
    receiver_id: UUID
    type: str
    project_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class DiscussionDetail(DiscussionResponse):
    sender: Optional[UserSummary] = None
    receiver: Optional[UserSummary] = None


class MessageCreate(BaseModel):
    discussion_id: UUID
    content: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return strip_required(v)


class MessageUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return strip_required(v)


class MessageResponse(ORMModel):
    id: UUID
    discussion_id: UUID
    sender_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime


class DiscussionWithLastMessage(BaseModel):
    discussion: DiscussionDetail
    last_message: Optional[MessageResponse] = None


class MessagePage(BaseModel):
    messages: List[MessageResponse]
    pagination: Pagination


class NotificationCreate(BaseModel):
    user_id: UUID
    type: NotificationType = NotificationType.OTHER
    title: Optional[str] = Field(None, max_length=255)
    message: str = Field(..., min_length=1)


class NotificationResponse(ORMModel):
    id: UUID
    user_id: UUID
    type: str
    title: Optional[str] = None
    message: str
    is_read: bool
    created_at: datetime


class MarkAllReadResponse(BaseModel):
    updated: int
