"""
Background scheduler for token blacklist sweeps
"""
import asyncio
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional

from app.core.config import get_settings
from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.core.metrics import token_cleanup_deleted_total, token_cleanup_runs_total
from app.services.token_blacklist_service import TokenBlacklistService

logger = LoggingConfig.get_logger(__name__)


class TokenCleanupSchedule(str, Enum):
    """Cleanup schedule types"""
    EVERY_6_HOURS = "every_6_hours"  # Sweep at 00:00, 06:00, 12:00, 18:00
    DAILY_MIDNIGHT = "daily_midnight"  # Sweep with stats once per day


class TokenCleanupScheduler:
    """Runs blacklist sweeps on fixed wall-clock slots"""

    def __init__(self):
        settings = get_settings()
        self.running = False
        self.check_interval = settings.token_cleanup_check_seconds
        self._task: Optional[asyncio.Task] = None
        self.last_runs: Dict[TokenCleanupSchedule, Optional[datetime]] = {
            TokenCleanupSchedule.EVERY_6_HOURS: None,
            TokenCleanupSchedule.DAILY_MIDNIGHT: None,
        }
        self.schedules: Dict[TokenCleanupSchedule, Dict[str, Any]] = {
            TokenCleanupSchedule.EVERY_6_HOURS: {
                "enabled": True,
                "interval_hours": settings.token_cleanup_interval_hours,
            },
            TokenCleanupSchedule.DAILY_MIDNIGHT: {
                "enabled": True,
                "hour": settings.token_cleanup_daily_hour,
            },
        }

    async def start(self):
        """Start the cleanup scheduler"""
        if self.running:
            logger.warning("Token cleanup scheduler is already running")
            return

        self.running = True
        logger.info("Starting token cleanup scheduler...")
        self._task = asyncio.create_task(self._scheduler_loop())

    async def stop(self):
        """Stop the cleanup scheduler"""
        self.running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Stopping token cleanup scheduler...")

    async def _scheduler_loop(self):
        while self.running:
            try:
                await self.check_and_run(datetime.utcnow())
                await asyncio.sleep(self.check_interval)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Error in token cleanup scheduler loop: {e}", exc_info=True)
                await asyncio.sleep(self.check_interval)

    def slot_start(self, schedule_type: TokenCleanupSchedule, now: datetime) -> Optional[datetime]:
        """
        Start of the slot ``now`` falls in, or None if the schedule is not due.

        EVERY_6_HOURS is always inside a slot; DAILY_MIDNIGHT only during its
        configured hour.
        """
        schedule = self.schedules[schedule_type]
        if schedule_type == TokenCleanupSchedule.EVERY_6_HOURS:
            interval = schedule["interval_hours"]
            return now.replace(hour=now.hour - now.hour % interval, minute=0, second=0, microsecond=0)
        if now.hour != schedule["hour"]:
            return None
        return now.replace(minute=0, second=0, microsecond=0)

    def is_due(self, schedule_type: TokenCleanupSchedule, now: datetime) -> bool:
        if not self.schedules[schedule_type]["enabled"]:
            return False
        slot = self.slot_start(schedule_type, now)
        if slot is None:
            return False
        last_run = self.last_runs[schedule_type]
        return last_run is None or last_run < slot

    async def check_and_run(self, now: datetime):
        """Run every schedule whose current slot has not been served yet"""
        if self.is_due(TokenCleanupSchedule.EVERY_6_HOURS, now):
            self.last_runs[TokenCleanupSchedule.EVERY_6_HOURS] = now
            await self.run_periodic_cleanup()
        if self.is_due(TokenCleanupSchedule.DAILY_MIDNIGHT, now):
            self.last_runs[TokenCleanupSchedule.DAILY_MIDNIGHT] = now
            await self.run_daily_cleanup()

    async def run_periodic_cleanup(self) -> Optional[int]:
        """Sweep entries past the grace period. Errors are logged, not raised."""
        schedule = TokenCleanupSchedule.EVERY_6_HOURS
        db = next(get_db())
        try:
            logger.info("Starting cleanup of expired tokens...")
            deleted = TokenBlacklistService(db).cleanup_expired_tokens()
            token_cleanup_runs_total.labels(schedule=schedule.value, status="success").inc()
            token_cleanup_deleted_total.labels(schedule=schedule.value).inc(deleted)
            logger.info(f"Cleaned up {deleted} expired tokens")
            return deleted
        except Exception as e:
            token_cleanup_runs_total.labels(schedule=schedule.value, status="error").inc()
            logger.error(f"Failed to cleanup expired tokens: {e}", exc_info=True)
            return None
        finally:
            db.close()

    async def run_daily_cleanup(self) -> Optional[int]:
        """Sweep with before/after stats in the log. Errors are logged, not raised."""
        schedule = TokenCleanupSchedule.DAILY_MIDNIGHT
        db = next(get_db())
        try:
            logger.info("Starting daily token cleanup...")
            service = TokenBlacklistService(db)

            stats = service.get_blacklist_stats()
            logger.info(
                f"Blacklist stats before cleanup - Total: {stats['total']}, "
                f"Expired: {stats['expired']}, Active: {stats['active']}"
            )

            deleted = service.cleanup_expired_tokens()

            new_stats = service.get_blacklist_stats()
            logger.info(f"Daily cleanup completed - Deleted: {deleted}, Remaining: {new_stats['total']}")

            token_cleanup_runs_total.labels(schedule=schedule.value, status="success").inc()
            token_cleanup_deleted_total.labels(schedule=schedule.value).inc(deleted)
            return deleted
        except Exception as e:
            token_cleanup_runs_total.labels(schedule=schedule.value, status="error").inc()
            logger.error(f"Failed during daily token cleanup: {e}", exc_info=True)
            return None
        finally:
            db.close()

    def manual_cleanup(self) -> Dict[str, Any]:
        """Sweep now using the grace period"""
        db = next(get_db())
        try:
            service = TokenBlacklistService(db)
            deleted = service.cleanup_expired_tokens()
            token_cleanup_runs_total.labels(schedule="manual", status="success").inc()
            token_cleanup_deleted_total.labels(schedule="manual").inc(deleted)
            return {"deleted": deleted, "stats": service.get_blacklist_stats()}
        finally:
            db.close()

    def immediate_cleanup(self) -> Dict[str, Any]:
        """Sweep every expired entry now, without the grace period"""
        logger.warning("Immediate cleanup of ALL expired tokens requested")
        db = next(get_db())
        try:
            service = TokenBlacklistService(db)
            deleted = service.cleanup_all_expired_tokens()
            token_cleanup_runs_total.labels(schedule="immediate", status="success").inc()
            token_cleanup_deleted_total.labels(schedule="immediate").inc(deleted)
            logger.info(f"Immediate cleanup deleted {deleted} expired tokens")
            return {
                "deleted": deleted,
                "stats": service.get_blacklist_stats(),
                "warning": "Expired tokens were removed without the audit grace period",
            }
        finally:
            db.close()

    def update_schedule(
        self,
        schedule_type: TokenCleanupSchedule,
        enabled: Optional[bool] = None,
        interval_hours: Optional[int] = None,
        hour: Optional[int] = None,
    ):
        """Update schedule configuration"""
        if schedule_type not in self.schedules:
            raise ValueError(f"Unknown schedule type: {schedule_type}")

        schedule = self.schedules[schedule_type]
        if enabled is not None:
            schedule["enabled"] = enabled
        if interval_hours is not None and "interval_hours" in schedule:
            if not 1 <= interval_hours <= 24:
                raise ValueError("interval_hours must be between 1 and 24")
            schedule["interval_hours"] = interval_hours
        if hour is not None and "hour" in schedule:
            if not 0 <= hour <= 23:
                raise ValueError("hour must be between 0 and 23")
            schedule["hour"] = hour

        logger.info(f"Updated {schedule_type.value} schedule: {schedule}")

    def get_schedule(self, schedule_type: TokenCleanupSchedule) -> Dict[str, Any]:
        """Get schedule configuration and last run"""
        if schedule_type not in self.schedules:
            raise ValueError(f"Unknown schedule type: {schedule_type}")
        schedule = self.schedules[schedule_type].copy()
        schedule["last_run"] = self.last_runs[schedule_type]
        return schedule

    def next_run(self, schedule_type: TokenCleanupSchedule, now: datetime) -> datetime:
        """Start of the next slot after ``now``"""
        schedule = self.schedules[schedule_type]
        if schedule_type == TokenCleanupSchedule.EVERY_6_HOURS:
            return self.slot_start(schedule_type, now) + timedelta(hours=schedule["interval_hours"])
        today = now.replace(hour=schedule["hour"], minute=0, second=0, microsecond=0)
        return today if today > now else today + timedelta(days=1)


# Global scheduler instance
_token_cleanup_scheduler: Optional[TokenCleanupScheduler] = None


def get_token_cleanup_scheduler() -> TokenCleanupScheduler:
    """Get or create token cleanup scheduler instance"""
    global _token_cleanup_scheduler
    if _token_cleanup_scheduler is None:
        _token_cleanup_scheduler = TokenCleanupScheduler()
    return _token_cleanup_scheduler
