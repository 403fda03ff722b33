"""
Notification, discussion and message API routes
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.core.security import CurrentUser, require_token
from app.schemas.messaging import (DiscussionCreate, DiscussionDetail,
                                   DiscussionResponse,
                                   DiscussionWithLastMessage,
                                   MarkAllReadResponse, MessageCreate,
                                   MessagePage, MessageResponse,
                                   MessageUpdate, NotificationCreate,
                                   NotificationResponse)
from app.services.discussion_service import DiscussionService
from app.services.message_service import MessageService
from app.services.notification_service import NotificationService

logger = LoggingConfig.get_logger(__name__)

notification_router = APIRouter(
    prefix="/api/v1/notification", tags=["notification"], dependencies=[Depends(require_token)]
)
discussion_router = APIRouter(prefix="/api/v1/discussion", tags=["discussion"])
message_router = APIRouter(prefix="/api/v1/message", tags=["message"])


# Notifications

@notification_router.post("", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(body: NotificationCreate, db: Session = Depends(get_db)):
    return NotificationService(db).create(body.model_dump())


@notification_router.get("/user/{user_id}", response_model=List[NotificationResponse])
async def notifications_of_user(user_id: UUID, db: Session = Depends(get_db)):
    return NotificationService(db).find_user_notifications(user_id)


@notification_router.get("/user/{user_id}/unread", response_model=List[NotificationResponse])
async def unread_notifications(user_id: UUID, db: Session = Depends(get_db)):
    return NotificationService(db).find_unread_notifications(user_id)


@notification_router.put("/user/{user_id}/mark-all-read", response_model=MarkAllReadResponse)
async def mark_all_read(user_id: UUID, db: Session = Depends(get_db)):
    return NotificationService(db).mark_all_as_read(user_id)


@notification_router.put("/{id}/mark-read", response_model=NotificationResponse)
async def mark_read(id: UUID, db: Session = Depends(get_db)):
    return NotificationService(db).mark_as_read(id)


@notification_router.delete("/{id}", response_model=NotificationResponse)
async def delete_notification(id: UUID, db: Session = Depends(get_db)):
    return NotificationService(db).remove(id)


# Discussions; the caller always comes from the token

@discussion_router.post("", response_model=DiscussionResponse, status_code=status.HTTP_201_CREATED)
async def create_discussion(
    body: DiscussionCreate,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return DiscussionService(db).create_discussion(current_user.id, body.model_dump())


@discussion_router.get("/my-discussions", response_model=List[DiscussionWithLastMessage])
async def my_discussions(
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return DiscussionService(db).get_user_discussions(current_user.id)


@discussion_router.get("/search", response_model=List[DiscussionDetail])
async def search_discussions(
    q: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return DiscussionService(db).search_discussions(current_user.id, q)


@discussion_router.get("/project/{project_id}", response_model=List[DiscussionResponse])
async def project_discussions(
    project_id: UUID,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return DiscussionService(db).get_project_discussions(project_id)


@discussion_router.get("/{id}", response_model=DiscussionDetail)
async def get_discussion(
    id: UUID,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return DiscussionService(db).get_discussion_by_id(id, current_user.id)


@discussion_router.delete("/{id}", response_model=DiscussionResponse)
async def delete_discussion(
    id: UUID,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return DiscussionService(db).delete_discussion(id, current_user.id)


# Messages

@message_router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    body: MessageCreate,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return MessageService(db).send_message(current_user.id, body.model_dump())


@message_router.get("/discussion/{id}", response_model=MessagePage)
async def discussion_messages(
    id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return MessageService(db).get_discussion_messages(id, current_user.id, page, limit)


@message_router.get("/discussion/{id}/search", response_model=List[MessageResponse])
async def search_messages(
    id: UUID,
    q: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return MessageService(db).search_messages(id, current_user.id, q)


@message_router.get("/recent", response_model=List[MessageResponse])
async def recent_messages(
    limit: int = Query(20, ge=1, le=100),
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return MessageService(db).get_user_recent_messages(current_user.id, limit)


@message_router.get("/{id}", response_model=MessageResponse)
async def get_message(
    id: UUID,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return MessageService(db).get_message_by_id(id, current_user.id)


@message_router.patch("/{id}", response_model=MessageResponse)
async def update_message(
    id: UUID,
    body: MessageUpdate,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return MessageService(db).update_message(id, current_user.id, body.content)


@message_router.delete("/{id}", response_model=MessageResponse)
async def delete_message(
    id: UUID,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return MessageService(db).delete_message(id, current_user.id)


routers = (notification_router, discussion_router, message_router)
