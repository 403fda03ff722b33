"""
Messages inside discussions
"""
import math
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from app.core.database import atomic
from app.core.errors import BadRequestError, ForbiddenError, NotFoundError
from app.core.logging_config import LoggingConfig
from app.models.messaging import (Discussion, Message, Notification,
                                  NotificationType)
from app.models.user import User
from app.services.base_crud import BaseCrudService

logger = LoggingConfig.get_logger(__name__)

MAX_MESSAGE_LENGTH = 2000


class MessageService(BaseCrudService[Message]):
    """Service for discussion messages"""

    model = Message
    resource_name = "Message"
    user_field = "sender_id"

    def _discussion_for(self, discussion_id: UUID, user_id: UUID) -> Discussion:
        discussion = self.db.get(Discussion, discussion_id)
        if discussion is None:
            raise NotFoundError(f"Discussion with ID {discussion_id} not found")
        if not discussion.has_participant(user_id):
            raise ForbiddenError("You are not a participant of this discussion")
        return discussion

    def _check_content(self, content: str) -> str:
        content = (content or "").strip()
        if not content:
            raise BadRequestError("Message content cannot be empty")
        if len(content) > MAX_MESSAGE_LENGTH:
            raise BadRequestError(f"Message content cannot exceed {MAX_MESSAGE_LENGTH} characters")
        return content

    def send_message(self, sender_id: UUID, data: Dict[str, Any]) -> Message:
        """
        Post a message, bump the discussion and notify the other participant

        Raises:
            NotFoundError: If the discussion does not exist
            ForbiddenError: If the sender is not a participant
        """
        discussion = self._discussion_for(data["discussion_id"], sender_id)
        content = self._check_content(data["content"])
        sender = self.db.get(User, sender_id)

        with atomic(self.db, "message.send"):
            message = Message(discussion_id=discussion.id, sender_id=sender_id, content=content)
            self.db.add(message)
            discussion.updated_at = datetime.utcnow()
            self.db.add(Notification(
                user_id=discussion.other_participant(sender_id),
                type=NotificationType.NEW_MESSAGE.value,
                title="New message",
                message=f"New message from {sender.name if sender else 'a user'}",
            ))

        self.db.refresh(message)
        logger.info(f"Message {message.id} sent in discussion {discussion.id}")
        return message

    def get_discussion_messages(
        self,
        discussion_id: UUID,
        user_id: UUID,
        page: int = 1,
        limit: int = 50,
    ) -> Dict[str, Any]:
        """
        Messages of a discussion, oldest first

        Returns:
            Dict with ``messages`` and ``pagination``
        """
        if page < 1 or limit < 1:
            raise BadRequestError("page and limit must be >= 1")
        self._discussion_for(discussion_id, user_id)

        query = self.db.query(Message).filter(Message.discussion_id == discussion_id)
        total = query.count()
        messages = (
            query.order_by(Message.created_at.asc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {
            "messages": messages,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": math.ceil(total / limit) if total else 0,
            },
        }

    def get_message_by_id(self, id: UUID, user_id: UUID) -> Message:
        message = self.find_one(id)
        self._discussion_for(message.discussion_id, user_id)
        return message

    def _own_message(self, id: UUID, user_id: UUID) -> Message:
        message = self.find_one(id)
        if message.sender_id != user_id:
            raise ForbiddenError("You can only modify your own messages")
        return message

    def update_message(self, id: UUID, user_id: UUID, content: str) -> Message:
        self._own_message(id, user_id)
        return self.update(id, {"content": self._check_content(content)})

    def delete_message(self, id: UUID, user_id: UUID) -> Message:
        self._own_message(id, user_id)
        return self.remove(id)

    def search_messages(self, discussion_id: UUID, user_id: UUID, q: Optional[str]) -> List[Message]:
        self._discussion_for(discussion_id, user_id)
        query = self.db.query(Message).filter(Message.discussion_id == discussion_id)
        if q and q.strip():
            query = query.filter(Message.content.ilike(f"%{q.strip()}%"))
        return query.order_by(Message.created_at.asc()).all()

    def get_user_recent_messages(self, user_id: UUID, limit: int = 20) -> List[Message]:
        """Latest messages across all discussions the user takes part in"""
        return (
            self.db.query(Message)
            .join(Discussion, Message.discussion_id == Discussion.id)
            .filter((Discussion.sender_id == user_id) | (Discussion.receiver_id == user_id))
            .order_by(Message.created_at.desc())
            .limit(limit)
            .all()
        )
