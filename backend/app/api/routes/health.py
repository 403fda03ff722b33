"""
Health check endpoints
"""
from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.services.token_blacklist_service import TokenBlacklistService
from app.services.token_cleanup_scheduler import get_token_cleanup_scheduler

logger = LoggingConfig.get_logger(__name__)
router = APIRouter(tags=["health"])

UPLOAD_SUBDIRS = ("ProjectFiles", "postMedia/images", "postMedia/videos", "profileImages", "videos")


def check_upload_directories() -> dict:
    """Report which upload directories exist and are writable"""
    root = Path(get_settings().upload_directory)
    directories = {}
    for relative in UPLOAD_SUBDIRS:
        path = root / relative
        directories[relative] = {
            "exists": path.is_dir(),
            "writable": path.is_dir() and path.stat().st_mode & 0o200 != 0,
        }
    missing = [name for name, info in directories.items() if not info["exists"]]
    if missing:
        return {
            "status": "degraded",
            "message": f"Missing upload directories: {', '.join(missing)}. Run scripts.init_file_storage",
            "directories": directories,
        }
    return {"status": "healthy", "message": "Upload directories present", "directories": directories}


@router.get("/health")
async def health_check():
    """
    Basic health check endpoint

    Returns:
        dict: Health status
    """
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": get_settings().app_name,
    }


@router.get("/health/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """
    Detailed health check with component status

    Returns:
        dict: Database, upload storage and token blacklist status
    """
    settings = get_settings()
    health_status = {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": settings.app_name,
        "environment": settings.app_env,
        "components": {},
    }
    overall_healthy = True

    try:
        db.execute(text("SELECT 1"))
        health_status["components"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful",
        }
    except SQLAlchemyError as e:
        overall_healthy = False
        health_status["components"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}",
            "error": type(e).__name__,
        }

    health_status["components"]["uploads"] = check_upload_directories()

    if overall_healthy:
        try:
            blacklist = TokenBlacklistService(db).check_health()
            health_status["components"]["token_blacklist"] = blacklist
        except SQLAlchemyError as e:
            logger.error(f"Token blacklist health check failed: {e}", exc_info=True)
            health_status["components"]["token_blacklist"] = {
                "status": "error",
                "message": f"Failed to check token blacklist: {str(e)}",
            }

    scheduler = get_token_cleanup_scheduler()
    health_status["components"]["token_cleanup"] = {
        "status": "healthy" if scheduler.running or not settings.token_cleanup_enabled else "degraded",
        "running": scheduler.running,
        "enabled": settings.token_cleanup_enabled,
    }

    if not overall_healthy:
        health_status["status"] = "unhealthy"
    elif any(comp.get("status") in ("degraded", "warning", "critical") for comp in health_status["components"].values()):
        health_status["status"] = "degraded"

    return health_status


@router.get("/health/liveness")
async def liveness_check():
    return {"status": "alive", "timestamp": datetime.utcnow().isoformat()}
