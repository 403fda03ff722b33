"""
Token blacklist inspection and cleanup routes
"""
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.core.security import CurrentUser, require_token
from app.services.token_blacklist_service import TokenBlacklistService
from app.services.token_cleanup_scheduler import (TokenCleanupSchedule,
                                                  get_token_cleanup_scheduler)

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/v1/token-management", tags=["token-management"])
admin_router = APIRouter(prefix="/api/v1/admin/tokens", tags=["admin-tokens"])


@router.get("/blacklist/stats")
async def blacklist_stats(
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return TokenBlacklistService(db).get_blacklist_stats()


@router.post("/blacklist/cleanup")
async def blacklist_cleanup(
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    """Delete blacklist entries past expiry plus the grace period"""
    service = TokenBlacklistService(db)
    deleted = service.cleanup_expired_tokens()
    logger.info(f"User {current_user.id} triggered blacklist cleanup, {deleted} removed")
    return {"message": f"Cleaned up {deleted} expired tokens", "deleted": deleted}


# Admin

@admin_router.get("/blacklist/stats")
async def admin_blacklist_stats(
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    scheduler = get_token_cleanup_scheduler()
    return {
        "stats": TokenBlacklistService(db).get_blacklist_stats(),
        "schedules": {
            schedule.value: scheduler.get_schedule(schedule) for schedule in TokenCleanupSchedule
        },
    }


@admin_router.get("/blacklist/history")
async def admin_blacklist_history(
    days: int = Query(7, ge=1, le=90),
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return TokenBlacklistService(db).get_blacklist_history(days)


@admin_router.get("/blacklist/user/{user_id}")
async def admin_blacklist_by_user(
    user_id: UUID,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return TokenBlacklistService(db).get_blacklist_stats_by_user(user_id)


@admin_router.post("/cleanup")
async def admin_cleanup(current_user: CurrentUser = Depends(require_token)):
    logger.info(f"Manual token cleanup requested by {current_user.id}")
    return get_token_cleanup_scheduler().manual_cleanup()


@admin_router.post("/cleanup/test-immediate")
async def admin_immediate_cleanup(current_user: CurrentUser = Depends(require_token)):
    """Remove every expired entry now, skipping the grace period"""
    logger.warning(f"Immediate token cleanup requested by {current_user.id}")
    return get_token_cleanup_scheduler().immediate_cleanup()


@admin_router.get("/blacklist/health")
async def admin_blacklist_health(
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    return TokenBlacklistService(db).check_health()
