"""
Prometheus metrics endpoint
"""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.core.metrics import get_metrics, get_metrics_content_type
from app.services.token_blacklist_service import TokenBlacklistService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def metrics(db: Session = Depends(get_db)):
    """
    Prometheus metrics in text format

    The blacklist size gauges are refreshed before rendering.
    """
    try:
        TokenBlacklistService(db).get_blacklist_stats()
    except SQLAlchemyError as e:
        logger.warning(f"Could not refresh token blacklist gauges: {e}")

    return Response(content=get_metrics(), media_type=get_metrics_content_type())
