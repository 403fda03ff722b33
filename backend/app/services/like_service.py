"""
Likes on projects, posts and comments
"""
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import atomic
from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.core.logging_config import LoggingConfig
from app.models.interaction import Comment, Like
from app.models.post import Post
from app.models.project import Project
from app.services.base_crud import BaseCrudService, clean_values
from app.services.counter_service import CounterService, CounterTarget

logger = LoggingConfig.get_logger(__name__)

_TARGETS = (
    ("project_id", CounterTarget.PROJECT, Project),
    ("post_id", CounterTarget.POST, Post),
    ("comment_id", CounterTarget.COMMENT, Comment),
)

RECENT_LIKES_LIMIT = 10


class LikeService(BaseCrudService[Like]):
    """Service for likes; nb_likes on the target changes in the same transaction"""

    model = Like
    resource_name = "Like"

    def __init__(self, db: Session):
        super().__init__(db)
        self.counters = CounterService(db)

    @staticmethod
    def resolve_target(data: Dict[str, Any]) -> Tuple[str, CounterTarget, Any, UUID]:
        """
        Raises:
            BadRequestError: If not exactly one target field is set
        """
        present = [(field, target, model) for field, target, model in _TARGETS if data.get(field) is not None]
        if len(present) != 1:
            raise BadRequestError("Exactly one of project_id, post_id or comment_id must be provided")
        field, target, model = present[0]
        return field, target, model, data[field]

    def _find_existing(self, user_id: UUID, field: str, target_id: UUID) -> Optional[Like]:
        return (
            self.db.query(Like)
            .filter(Like.user_id == user_id, getattr(Like, field) == target_id)
            .first()
        )

    def create(self, data: Dict[str, Any]) -> Like:
        """
        Like exactly one item

        Raises:
            BadRequestError: If zero or several targets are given
            NotFoundError: If the target does not exist
            ConflictError: If the user already liked it
        """
        data = clean_values(data)
        field, target, model, target_id = self.resolve_target(data)
        if self.db.get(model, target_id) is None:
            raise NotFoundError(f"{target.value.capitalize()} with ID {target_id} not found")
        if self._find_existing(data["user_id"], field, target_id):
            raise ConflictError("User has already liked this item")

        try:
            with atomic(self.db, "like.create"):
                like = Like(user_id=data["user_id"], **{field: target_id})
                self.db.add(like)
                self.db.flush()
                self.counters.update_like_count(target, target_id, increment=True)
        except IntegrityError:
            raise ConflictError("User has already liked this item")

        self.db.refresh(like)
        logger.info(f"User {data['user_id']} liked {target.value} {target_id}")
        return like

    def remove(self, id: UUID) -> Like:
        with atomic(self.db, "like.remove"):
            like = self.find_one(id)
            field, target, _, target_id = self.resolve_target(
                {"project_id": like.project_id, "post_id": like.post_id, "comment_id": like.comment_id}
            )
            self.db.delete(like)
            self.db.flush()
            self.counters.update_like_count(target, target_id, increment=False)

        logger.info(f"Removed like {id} from {target.value} {target_id}")
        return like

    def toggle_like(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data = clean_values(data)
        field, _, _, target_id = self.resolve_target(data)
        existing = self._find_existing(data["user_id"], field, target_id)
        if existing:
            self.remove(existing.id)
            return {"liked": False, "like": None}
        return {"liked": True, "like": self.create(data)}

    def _count(self, field: str, target_id: UUID) -> int:
        return self.db.query(func.count(Like.id)).filter(getattr(Like, field) == target_id).scalar() or 0

    def count_project_likes(self, project_id: UUID) -> int:
        return self._count("project_id", project_id)

    def count_post_likes(self, post_id: UUID) -> int:
        return self._count("post_id", post_id)

    def count_comment_likes(self, comment_id: UUID) -> int:
        return self._count("comment_id", comment_id)

    def has_user_liked(self, user_id: UUID, data: Dict[str, Any]) -> bool:
        field, _, _, target_id = self.resolve_target(data)
        return self._find_existing(user_id, field, target_id) is not None

    def get_user_like_activity(self, user_id: UUID) -> Dict[str, Any]:
        likes = self.db.query(Like).filter(Like.user_id == user_id).order_by(Like.created_at.desc()).all()
        return {
            "total_likes": len(likes),
            "project_likes": sum(1 for like in likes if like.project_id is not None),
            "post_likes": sum(1 for like in likes if like.post_id is not None),
            "comment_likes": sum(1 for like in likes if like.comment_id is not None),
            "recent_likes": likes[:RECENT_LIKES_LIMIT],
        }
