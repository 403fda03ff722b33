"""
Denormalized counter maintenance for users, projects, posts, comments and videos
"""
from enum import Enum
from typing import Dict
from uuid import UUID

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from app.core.errors import BadRequestError, NotFoundError
from app.core.logging_config import LoggingConfig
from app.models.interaction import Comment, Like
from app.models.offer import Connect, Offer
from app.models.post import Post, PostShared, Video
from app.models.project import Project
from app.models.user import User

logger = LoggingConfig.get_logger(__name__)


class CounterTarget(str, Enum):
    """Entities carrying counters"""
    USER = "user"
    PROJECT = "project"
    POST = "post"
    COMMENT = "comment"
    VIDEO = "video"


_TARGET_MODELS = {
    CounterTarget.USER: User,
    CounterTarget.PROJECT: Project,
    CounterTarget.POST: Post,
    CounterTarget.COMMENT: Comment,
    CounterTarget.VIDEO: Video,
}


class CounterService:
    """
    Adjusts counter columns with SQL-side arithmetic.

    Methods only flush; the caller owns the transaction so the counter
    change commits or rolls back together with the row write.
    """

    def __init__(self, db: Session):
        self.db = db

    def adjust(self, target: CounterTarget, entity_id: UUID, field: str, delta: int) -> None:
        """
        Add ``delta`` to ``field`` on one row, never going below zero

        Raises:
            BadRequestError: If the target has no such counter
            NotFoundError: If the row does not exist
        """
        target = CounterTarget(target)
        model = _TARGET_MODELS[target]
        column = getattr(model, field, None)
        if column is None:
            raise BadRequestError(f"{target.value} has no counter '{field}'")

        if delta >= 0:
            new_value = column + delta
        else:
            new_value = case((column + delta > 0, column + delta), else_=0)

        self.db.flush()
        updated = (
            self.db.query(model)
            .filter(model.id == entity_id)
            .update({column: new_value}, synchronize_session=False)
        )
        if not updated:
            raise NotFoundError(f"{target.value.capitalize()} with ID {entity_id} not found")

        instance = self.db.get(model, entity_id)
        if instance is not None:
            self.db.expire(instance, [field])

        logger.debug(f"Adjusted {target.value}.{field} on {entity_id} by {delta}")

    def _step(self, target: CounterTarget, entity_id: UUID, field: str, increment: bool) -> None:
        self.adjust(target, entity_id, field, 1 if increment else -1)

    def update_like_count(self, target: CounterTarget, entity_id: UUID, increment: bool) -> None:
        if CounterTarget(target) not in (CounterTarget.PROJECT, CounterTarget.POST, CounterTarget.COMMENT):
            raise BadRequestError(f"Likes are not counted on {target}")
        self._step(target, entity_id, "nb_likes", increment)

    def update_comment_count(self, target: CounterTarget, entity_id: UUID, increment: bool) -> None:
        if CounterTarget(target) not in (CounterTarget.PROJECT, CounterTarget.POST):
            raise BadRequestError(f"Comments are not counted on {target}")
        self._step(target, entity_id, "nb_comments", increment)

    def update_view_count(self, target: CounterTarget, entity_id: UUID, increment: bool) -> None:
        if CounterTarget(target) not in (CounterTarget.PROJECT, CounterTarget.POST, CounterTarget.VIDEO):
            raise BadRequestError(f"Views are not counted on {target}")
        self._step(target, entity_id, "nb_views", increment)

    def update_share_count(self, post_id: UUID, increment: bool) -> None:
        self._step(CounterTarget.POST, post_id, "nb_shares", increment)

    def update_connect_count(self, project_id: UUID, increment: bool) -> None:
        self._step(CounterTarget.PROJECT, project_id, "nb_connects", increment)

    def recalculate_counters(self, target: CounterTarget, entity_id: UUID) -> Dict[str, int]:
        """
        Reset counters from COUNT queries and commit

        Returns:
            The recomputed counter values
        """
        target = CounterTarget(target)
        model = _TARGET_MODELS[target]
        instance = self.db.get(model, entity_id)
        if instance is None:
            raise NotFoundError(f"{target.value.capitalize()} with ID {entity_id} not found")

        def count(model_cls, column) -> int:
            return self.db.query(func.count(model_cls.id)).filter(column == entity_id).scalar() or 0

        if target == CounterTarget.PROJECT:
            values = {
                "nb_likes": count(Like, Like.project_id),
                "nb_comments": count(Comment, Comment.project_id),
                "nb_connects": count(Connect, Connect.project_id),
                "nb_offers": count(Offer, Offer.project_id),
            }
        elif target == CounterTarget.POST:
            values = {
                "nb_likes": count(Like, Like.post_id),
                "nb_comments": count(Comment, Comment.post_id),
                "nb_shares": count(PostShared, PostShared.post_id),
            }
        elif target == CounterTarget.COMMENT:
            values = {"nb_likes": count(Like, Like.comment_id)}
        elif target == CounterTarget.USER:
            values = {
                "nb_offer": count(Offer, Offer.user_id),
                "nb_connects": count(Connect, Connect.user_id),
                "nb_posts": count(Post, Post.user_id),
            }
        else:
            raise BadRequestError(f"Counters of {target.value} cannot be recalculated")

        for field, value in values.items():
            setattr(instance, field, value)
        self.db.commit()

        logger.info(f"Recalculated counters for {target.value} {entity_id}: {values}")
        return values

    def recalculate_all(self) -> Dict[str, int]:
        """Recalculate every project, post and comment"""
        processed = {"projects": 0, "posts": 0, "comments": 0}
        for target, key in (
            (CounterTarget.PROJECT, "projects"),
            (CounterTarget.POST, "posts"),
            (CounterTarget.COMMENT, "comments"),
        ):
            model = _TARGET_MODELS[target]
            for (entity_id,) in self.db.query(model.id).all():
                self.recalculate_counters(target, entity_id)
                processed[key] += 1
        return processed
