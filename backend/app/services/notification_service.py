"""
User notifications
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from app.core.logging_config import LoggingConfig
from app.models.messaging import Notification, NotificationType
from app.services.base_crud import BaseCrudService

logger = LoggingConfig.get_logger(__name__)

USER_NOTIFICATIONS_LIMIT = 50
UNREAD_NOTIFICATIONS_LIMIT = 20


class NotificationService(BaseCrudService[Notification]):
    """Service for user notifications"""

    model = Notification
    resource_name = "Notification"
    search_fields = ("title", "message")

    def notify(
        self,
        user_id: UUID,
        notification_type: NotificationType,
        message: str,
        title: Optional[str] = None,
    ) -> Notification:
        return self.create({
            "user_id": user_id,
            "type": NotificationType(notification_type),
            "message": message,
            "title": title,
        })

    def find_user_notifications(self, user_id: UUID) -> List[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .limit(USER_NOTIFICATIONS_LIMIT)
            .all()
        )

    def find_unread_notifications(self, user_id: UUID) -> List[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .order_by(Notification.created_at.desc())
            .limit(UNREAD_NOTIFICATIONS_LIMIT)
            .all()
        )

    def mark_as_read(self, id: UUID) -> Notification:
        return self.update(id, {"is_read": True})

    def mark_all_as_read(self, user_id: UUID) -> Dict[str, Any]:
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"Marked {updated} notifications as read for user {user_id}")
        return {"updated": updated}
