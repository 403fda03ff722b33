"""
Video views and user time tracking
"""
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.database import atomic
from app.core.errors import BadRequestError, NotFoundError
from app.core.logging_config import LoggingConfig
from app.models.post import Video, View
from app.models.user import User
from app.services.base_crud import BaseCrudService
from app.services.counter_service import CounterService, CounterTarget

logger = LoggingConfig.get_logger(__name__)


class ViewService(BaseCrudService[View]):
    """One row per (user, video) accumulating watch time"""

    model = View
    resource_name = "View"

    def __init__(self, db: Session):
        super().__init__(db)
        self.counters = CounterService(db)

    def record_view(self, user_id: UUID, video_id: UUID, timespent: int = 0) -> View:
        """
        Record watch time for a user on a video

        The first view of a user counts once on the video and its project;
        later calls only add ``timespent`` (seconds).

        Raises:
            NotFoundError: If the video does not exist
            BadRequestError: If timespent is negative
        """
        if timespent < 0:
            raise BadRequestError("timespent must be >= 0")
        video = self.db.get(Video, video_id)
        if video is None:
            raise NotFoundError(f"Video with ID {video_id} not found")

        with atomic(self.db, "view.record"):
            view = (
                self.db.query(View)
                .filter(View.user_id == user_id, View.video_id == video_id)
                .first()
            )
            if view is not None:
                view.timespent = (view.timespent or 0) + timespent
            else:
                view = View(user_id=user_id, video_id=video_id, timespent=timespent)
                self.db.add(view)
                self.db.flush()
                self.counters.update_view_count(CounterTarget.VIDEO, video_id, increment=True)
                self.counters.update_view_count(CounterTarget.PROJECT, video.project_id, increment=True)

        self.db.refresh(view)
        return view

    def find_by_video(self, video_id: UUID) -> List[View]:
        return self.find_many_by("video_id", video_id)

    def get_video_view_stats(self, video_id: UUID) -> Dict[str, Any]:
        total_views, total_timespent = (
            self.db.query(func.count(View.id), func.coalesce(func.sum(View.timespent), 0))
            .filter(View.video_id == video_id)
            .one()
        )
        return {
            "total_views": total_views,
            "total_timespent": int(total_timespent),
            "average_timespent": total_timespent / total_views if total_views else 0.0,
        }


class UserActivityService:
    """Accumulates time spent on the platform (minutes) on the user row"""

    def __init__(self, db: Session):
        self.db = db
        self.counters = CounterService(db)

    def record_time_spent(self, user_id: UUID, minutes: int) -> int:
        """
        Add minutes to a user's total; non-positive values are ignored

        Returns:
            The new total in minutes
        """
        if minutes <= 0:
            logger.debug(f"Ignoring non-positive time spent ({minutes}) for user {user_id}")
            return self.get_time_spent(user_id)
        with atomic(self.db, "user_activity.time_spent"):
            self.counters.adjust(CounterTarget.USER, user_id, "time_spent", minutes)
        return self.get_time_spent(user_id)

    def record_time_spent_in_seconds(self, user_id: UUID, seconds: int) -> int:
        return self.record_time_spent(user_id, round(seconds / 60))

    def get_time_spent(self, user_id: UUID) -> int:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User with ID {user_id} not found")
        return user.time_spent
