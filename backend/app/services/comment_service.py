"""
Comments on projects and posts, with threaded replies
"""
from typing import Any, Dict, List, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.core.database import atomic
from app.core.errors import BadRequestError, NotFoundError
from app.core.logging_config import LoggingConfig
from app.models.interaction import Comment
from app.models.post import Post
from app.models.project import Project
from app.services.base_crud import BaseCrudService, clean_values
from app.services.counter_service import CounterService, CounterTarget

logger = LoggingConfig.get_logger(__name__)


class CommentService(BaseCrudService[Comment]):
    """Service for comments; every write keeps the target's nb_comments in step"""

    model = Comment
    resource_name = "Comment"
    search_fields = ("content",)

    def __init__(self, db: Session):
        super().__init__(db)
        self.counters = CounterService(db)

    @staticmethod
    def _target_of(comment_or_data) -> Tuple[CounterTarget, UUID]:
        get = comment_or_data.get if isinstance(comment_or_data, dict) else lambda key: getattr(comment_or_data, key)
        if get("project_id") is not None:
            return CounterTarget.PROJECT, get("project_id")
        return CounterTarget.POST, get("post_id")

    def create(self, data: Dict[str, Any]) -> Comment:
        """
        Comment on a project or a post, optionally as a reply

        Raises:
            BadRequestError: If not exactly one target is set, or the parent
                belongs to another target
            NotFoundError: If the target or parent does not exist
        """
        data = clean_values(data)
        if (data.get("project_id") is None) == (data.get("post_id") is None):
            raise BadRequestError("A comment must target exactly one of project_id or post_id")

        if data.get("project_id") is not None and self.db.get(Project, data["project_id"]) is None:
            raise NotFoundError(f"Project with ID {data['project_id']} not found")
        if data.get("post_id") is not None and self.db.get(Post, data["post_id"]) is None:
            raise NotFoundError(f"Post with ID {data['post_id']} not found")

        if data.get("parent_id") is not None:
            parent = self.db.get(Comment, data["parent_id"])
            if parent is None:
                raise NotFoundError(f"Parent comment with ID {data['parent_id']} not found")
            if (parent.project_id, parent.post_id) != (data.get("project_id"), data.get("post_id")):
                raise BadRequestError("A reply must belong to the same project or post as its parent")

        target, target_id = self._target_of(data)
        with atomic(self.db, "comment.create"):
            comment = Comment(**data)
            self.db.add(comment)
            self.db.flush()
            self.counters.update_comment_count(target, target_id, increment=True)

        self.db.refresh(comment)
        logger.info(f"Comment {comment.id} created on {target.value} {target_id}")
        return comment

    def _thread_size(self, comment: Comment) -> int:
        return 1 + sum(self._thread_size(reply) for reply in comment.replies)

    def remove(self, id: UUID) -> Comment:
        """Delete a comment with its replies and decrement the target counter by the thread size"""
        with atomic(self.db, "comment.remove"):
            comment = self.find_one(id)
            target, target_id = self._target_of(comment)
            removed = self._thread_size(comment)
            self.db.delete(comment)
            self.db.flush()
            self.counters.adjust(target, target_id, "nb_comments", -removed)

        logger.info(f"Deleted comment {id} and {removed - 1} replies")
        return comment

    def _top_level(self, column, target_id: UUID) -> List[Comment]:
        return (
            self.db.query(Comment)
            .options(selectinload(Comment.replies))
            .filter(column == target_id, Comment.parent_id.is_(None))
            .order_by(Comment.created_at.desc())
            .all()
        )

    def find_by_project(self, project_id: UUID) -> List[Comment]:
        return self._top_level(Comment.project_id, project_id)

    def find_by_post(self, post_id: UUID) -> List[Comment]:
        return self._top_level(Comment.post_id, post_id)

    def find_replies(self, comment_id: UUID) -> List[Comment]:
        self.find_one(comment_id)
        return (
            self.db.query(Comment)
            .filter(Comment.parent_id == comment_id)
            .order_by(Comment.created_at.asc())
            .all()
        )

    def _stats(self, column, target_id: UUID) -> Dict[str, int]:
        total = self.db.query(func.count(Comment.id)).filter(column == target_id).scalar() or 0
        top_level = (
            self.db.query(func.count(Comment.id))
            .filter(column == target_id, Comment.parent_id.is_(None))
            .scalar()
            or 0
        )
        return {"total_comments": total, "top_level_comments": top_level, "replies": total - top_level}

    def get_project_comment_stats(self, project_id: UUID) -> Dict[str, int]:
        return self._stats(Comment.project_id, project_id)

    def get_post_comment_stats(self, post_id: UUID) -> Dict[str, int]:
        return self._stats(Comment.post_id, post_id)
