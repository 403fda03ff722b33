"""
Unit tests for TokenCleanupScheduler
"""
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest

from app.models.token_blacklist import BlacklistedToken
from app.services.token_blacklist_service import hash_token
from app.services.token_cleanup_scheduler import (TokenCleanupSchedule,
                                                  TokenCleanupScheduler,
                                                  get_token_cleanup_scheduler)


@pytest.fixture
def scheduler():
    """Create TokenCleanupScheduler instance"""
    return TokenCleanupScheduler()


@pytest.fixture
def scheduler_db(db):
    """Route the scheduler's own sessions to the test session"""
    def fake_get_db():
        yield db

    with patch("app.services.token_cleanup_scheduler.get_db", fake_get_db), \
            patch.object(db, "close"):
        yield db


def add_expired(db, name, days_ago):
    db.add(BlacklistedToken(
        token_hash=hash_token(name),
        reason="logout",
        expires_at=datetime.utcnow() - timedelta(days=days_ago),
        blacklisted_at=datetime.utcnow() - timedelta(days=days_ago + 1),
    ))
    db.commit()


def test_scheduler_initialization(scheduler):
    assert scheduler.running is False
    assert TokenCleanupSchedule.EVERY_6_HOURS in scheduler.schedules
    assert TokenCleanupSchedule.DAILY_MIDNIGHT in scheduler.schedules


def test_singleton():
    assert get_token_cleanup_scheduler() is get_token_cleanup_scheduler()


def test_update_schedule(scheduler):
    scheduler.update_schedule(TokenCleanupSchedule.DAILY_MIDNIGHT, hour=3, enabled=False)

    schedule = scheduler.get_schedule(TokenCleanupSchedule.DAILY_MIDNIGHT)
    assert schedule["hour"] == 3
    assert schedule["enabled"] is False
    assert schedule["last_run"] is None


def test_update_schedule_invalid(scheduler):
    with pytest.raises(ValueError):
        scheduler.update_schedule("weekly", hour=5)
    with pytest.raises(ValueError):
        scheduler.update_schedule(TokenCleanupSchedule.DAILY_MIDNIGHT, hour=24)


def test_six_hour_slots_fire_once(scheduler):
    now = datetime(2026, 3, 1, 7, 30)
    assert scheduler.is_due(TokenCleanupSchedule.EVERY_6_HOURS, now)

    scheduler.last_runs[TokenCleanupSchedule.EVERY_6_HOURS] = now
    assert not scheduler.is_due(TokenCleanupSchedule.EVERY_6_HOURS, now + timedelta(hours=4))
    assert scheduler.is_due(TokenCleanupSchedule.EVERY_6_HOURS, datetime(2026, 3, 1, 12, 0, 5))


def test_daily_schedule_only_in_its_hour(scheduler):
    assert scheduler.is_due(TokenCleanupSchedule.DAILY_MIDNIGHT, datetime(2026, 3, 1, 0, 1))
    assert not scheduler.is_due(TokenCleanupSchedule.DAILY_MIDNIGHT, datetime(2026, 3, 1, 1, 0))


def test_next_run(scheduler):
    now = datetime(2026, 3, 1, 7, 30)
    assert scheduler.next_run(TokenCleanupSchedule.EVERY_6_HOURS, now) == datetime(2026, 3, 1, 12, 0)
    assert scheduler.next_run(TokenCleanupSchedule.DAILY_MIDNIGHT, now) == datetime(2026, 3, 2, 0, 0)


@pytest.mark.asyncio
async def test_start_stop(scheduler):
    with patch.object(scheduler, "check_and_run"):
        await scheduler.start()
        assert scheduler.running is True

        await scheduler.stop()
        assert scheduler.running is False


@pytest.mark.asyncio
async def test_periodic_cleanup_deletes_past_grace(scheduler, scheduler_db):
    add_expired(scheduler_db, "ancient", days_ago=60)
    add_expired(scheduler_db, "fresh", days_ago=1)

    deleted = await scheduler.run_periodic_cleanup()

    assert deleted == 1
    assert scheduler_db.query(BlacklistedToken).count() == 1


@pytest.mark.asyncio
async def test_daily_cleanup_logs_and_swallows_errors(scheduler):
    broken = MagicMock()
    broken.query.side_effect = RuntimeError("database is gone")

    def fake_get_db():
        yield broken

    with patch("app.services.token_cleanup_scheduler.get_db", fake_get_db):
        assert await scheduler.run_daily_cleanup() is None
        assert await scheduler.run_periodic_cleanup() is None

    broken.close.assert_called()


@pytest.mark.asyncio
async def test_check_and_run_records_last_run(scheduler):
    now = datetime(2026, 3, 1, 0, 10)

    async def fake_run():
        return 0

    with patch.object(scheduler, "run_periodic_cleanup", side_effect=fake_run) as periodic, \
            patch.object(scheduler, "run_daily_cleanup", side_effect=fake_run) as daily:
        await scheduler.check_and_run(now)
        await scheduler.check_and_run(now + timedelta(minutes=1))

    assert periodic.call_count == 1
    assert daily.call_count == 1
    assert scheduler.last_runs[TokenCleanupSchedule.EVERY_6_HOURS] == now


def test_manual_and_immediate_cleanup(scheduler, scheduler_db):
    add_expired(scheduler_db, "ancient", days_ago=60)
    add_expired(scheduler_db, "fresh", days_ago=1)

    result = scheduler.manual_cleanup()
    assert result["deleted"] == 1
    assert result["stats"]["total"] == 1

    result = scheduler.immediate_cleanup()
    assert result["deleted"] == 1
    assert result["stats"]["total"] == 0
    assert "warning" in result
