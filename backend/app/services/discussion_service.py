"""
Discussions between two users, optionally about a project
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.orm import joinedload

from app.core.errors import (BadRequestError, ConflictError, ForbiddenError,
                             NotFoundError)
from app.core.logging_config import LoggingConfig
from app.models.messaging import Discussion, DiscussionType, Message
from app.models.project import Project
from app.models.user import User
from app.services.base_crud import BaseCrudService, clean_values

logger = LoggingConfig.get_logger(__name__)


class DiscussionService(BaseCrudService[Discussion]):
    """Service for discussions"""

    model = Discussion
    resource_name = "Discussion"
    user_field = "sender_id"

    def _participant_filter(self, user_id: UUID):
        return or_(Discussion.sender_id == user_id, Discussion.receiver_id == user_id)

    def _last_message(self, discussion_id: UUID) -> Optional[Message]:
        return (
            self.db.query(Message)
            .filter(Message.discussion_id == discussion_id)
            .order_by(Message.created_at.desc())
            .first()
        )

    def create_discussion(self, sender_id: UUID, data: Dict[str, Any]) -> Discussion:
        """
        Open a discussion with another user

        Raises:
            BadRequestError: If the sender targets themselves
            NotFoundError: If the receiver or project does not exist
            ConflictError: If the same two users already have this discussion
        """
        data = clean_values(data)
        receiver_id = data["receiver_id"]
        discussion_type = DiscussionType(data.get("type") or DiscussionType.PRIVATE)
        project_id = data.get("project_id")

        if receiver_id == sender_id:
            raise BadRequestError("You cannot start a discussion with yourself")
        if self.db.get(User, receiver_id) is None:
            raise NotFoundError(f"Receiver with ID {receiver_id} not found")
        if discussion_type == DiscussionType.PROJECT:
            if project_id is None or self.db.get(Project, project_id) is None:
                raise NotFoundError(f"Project with ID {project_id} not found")
        else:
            project_id = None

        existing = (
            self.db.query(Discussion.id)
            .filter(
                or_(
                    and_(Discussion.sender_id == sender_id, Discussion.receiver_id == receiver_id),
                    and_(Discussion.sender_id == receiver_id, Discussion.receiver_id == sender_id),
                ),
                Discussion.type == discussion_type.value,
                Discussion.project_id.is_(None) if project_id is None else Discussion.project_id == project_id,
            )
            .first()
        )
        if existing:
            raise ConflictError("A discussion between these users already exists")

        discussion = self.create({
            "sender_id": sender_id,
            "receiver_id": receiver_id,
            "type": discussion_type,
            "project_id": project_id,
        })
        logger.info(f"Discussion {discussion.id} opened by {sender_id} with {receiver_id}")
        return discussion

    def get_user_discussions(self, user_id: UUID) -> List[Dict[str, Any]]:
        """Discussions of a user, most recently active first, with their last message"""
        discussions = (
            self.db.query(Discussion)
            .options(joinedload(Discussion.sender), joinedload(Discussion.receiver), joinedload(Discussion.project))
            .filter(self._participant_filter(user_id))
            .order_by(Discussion.updated_at.desc())
            .all()
        )
        return [
            {"discussion": discussion, "last_message": self._last_message(discussion.id)}
            for discussion in discussions
        ]

    def get_discussion_by_id(self, id: UUID, user_id: UUID) -> Discussion:
        """
        Raises:
            NotFoundError: If the discussion does not exist
            ForbiddenError: If the caller is not a participant
        """
        discussion = self.find_one(id)
        if not discussion.has_participant(user_id):
            raise ForbiddenError("You are not a participant of this discussion")
        return discussion

    def delete_discussion(self, id: UUID, user_id: UUID) -> Discussion:
        discussion = self.find_one(id)
        if discussion.sender_id != user_id:
            raise ForbiddenError("Only the creator of a discussion can delete it")
        return self.remove(id)

    def get_project_discussions(self, project_id: UUID) -> List[Discussion]:
        return (
            self.db.query(Discussion)
            .filter(Discussion.project_id == project_id)
            .order_by(Discussion.updated_at.desc())
            .all()
        )

    def search_discussions(self, user_id: UUID, q: Optional[str]) -> List[Discussion]:
        """Match the other participant's name or the project title"""
        discussions = [item["discussion"] for item in self.get_user_discussions(user_id)]
        if not q or not q.strip():
            return discussions

        needle = q.strip().lower()
        results = []
        for discussion in discussions:
            other = discussion.receiver if discussion.sender_id == user_id else discussion.sender
            if other is not None and needle in (other.name or "").lower():
                results.append(discussion)
            elif discussion.project is not None and needle in (discussion.project.title or "").lower():
                results.append(discussion)
        return results
