"""
Social graph: social media links and follows
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.errors import ConflictError, ForbiddenError, NotFoundError
from app.core.logging_config import LoggingConfig
from app.models.messaging import NotificationType
from app.models.profile import Follow, SocialMedia
from app.models.user import User
from app.services.base_crud import BaseCrudService, clean_values
from app.services.notification_service import NotificationService

logger = LoggingConfig.get_logger(__name__)


class SocialMediaService(BaseCrudService[SocialMedia]):
    """One link per (user, platform)"""

    model = SocialMedia
    resource_name = "SocialMedia"
    search_fields = ("platform", "url")

    def _existing(self, user_id: UUID, platform: str) -> Optional[SocialMedia]:
        return (
            self.db.query(SocialMedia)
            .filter(SocialMedia.user_id == user_id, SocialMedia.platform == platform)
            .first()
        )

    def create(self, data: Dict[str, Any]) -> SocialMedia:
        """
        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the user already has a link on this platform
        """
        data = clean_values(data)
        if self.db.get(User, data["user_id"]) is None:
            raise NotFoundError(f"User with ID {data['user_id']} not found")
        if self._existing(data["user_id"], data["platform"]):
            raise ConflictError(f"User already has a {data['platform']} social media link")
        return super().create(data)

    def update(self, id: UUID, data: Dict[str, Any]) -> SocialMedia:
        data = clean_values(data)
        current = self.find_one(id)
        platform = data.get("platform")
        if platform and platform != current.platform and self._existing(current.user_id, platform):
            raise ConflictError(f"User already has a {platform} social media link")
        return super().update(id, data)

    def find_by_user(self, user_id: UUID) -> List[SocialMedia]:
        return (
            self.db.query(SocialMedia)
            .filter(SocialMedia.user_id == user_id)
            .order_by(SocialMedia.platform.asc())
            .all()
        )


class FollowService(BaseCrudService[Follow]):
    """Who follows whom"""

    model = Follow
    resource_name = "Follow"
    user_field = "follower_id"

    def __init__(self, db: Session):
        super().__init__(db)
        self.notifications = NotificationService(db)

    def _find_pair(self, follower_id: UUID, following_id: UUID) -> Optional[Follow]:
        return (
            self.db.query(Follow)
            .filter(Follow.follower_id == follower_id, Follow.following_id == following_id)
            .first()
        )

    def create_follow(self, follower_id: UUID, following_id: UUID) -> Follow:
        """
        Raises:
            ConflictError: If following yourself or already following
            NotFoundError: If either user does not exist
        """
        if follower_id == following_id:
            raise ConflictError("You cannot follow yourself")
        for user_id in (follower_id, following_id):
            if self.db.get(User, user_id) is None:
                raise NotFoundError(f"User with ID {user_id} not found")
        if self._find_pair(follower_id, following_id):
            raise ConflictError("You are already following this user")

        follow = super().create({"follower_id": follower_id, "following_id": following_id})
        follower = self.db.get(User, follower_id)
        self.notifications.notify(
            following_id,
            NotificationType.NEW_FOLLOWER,
            f"{follower.name} started following you",
            title="New follower",
        )
        return follow

    def toggle_follow(self, follower_id: UUID, following_id: UUID) -> Dict[str, Any]:
        existing = self._find_pair(follower_id, following_id)
        if existing:
            self.remove(existing.id)
            return {"is_following": False, "follow": None}
        return {"is_following": True, "follow": self.create_follow(follower_id, following_id)}

    def remove_follow(self, id: UUID, follower_id: Optional[UUID] = None) -> Follow:
        """Delete a follow; when follower_id is given only that follower may do it"""
        follow = self.find_one(id)
        if follower_id is not None and follow.follower_id != follower_id:
            raise ForbiddenError("Only the follower can remove this follow")
        return self.remove(id)

    def is_following(self, follower_id: UUID, following_id: UUID) -> bool:
        return self._find_pair(follower_id, following_id) is not None

    def get_following(self, user_id: UUID) -> List[User]:
        return (
            self.db.query(User)
            .join(Follow, Follow.following_id == User.id)
            .filter(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc())
            .all()
        )

    def get_followers(self, user_id: UUID) -> List[User]:
        return (
            self.db.query(User)
            .join(Follow, Follow.follower_id == User.id)
            .filter(Follow.following_id == user_id)
            .order_by(Follow.created_at.desc())
            .all()
        )
