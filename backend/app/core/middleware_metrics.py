"""
Middleware for collecting HTTP request metrics
"""
import re
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging_config import LoggingConfig
from app.core.metrics import (http_errors_total, http_request_duration_seconds,
                              http_requests_total)

logger = LoggingConfig.get_logger(__name__)

_UUID_SEGMENT = re.compile(r"/[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}(?=/|$)")
_SKIPPED_PATHS = ("/metrics", "/health/liveness")


def endpoint_label(path: str) -> str:
    """Collapse ids and uploaded file names so label cardinality stays bounded"""
    if path.startswith("/uploads/"):
        return "/uploads/{file}"
    return _UUID_SEGMENT.sub("/{id}", path)


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to collect HTTP request metrics for Prometheus
    """

    async def dispatch(self, request: Request, call_next):
        if request.url.path in _SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.time()
        error_type = None
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            error_type = type(e).__name__
            raise
        finally:
            duration = time.time() - start_time
            endpoint = endpoint_label(request.url.path)
            labels = {
                "method": request.method,
                "endpoint": endpoint,
                "status_code": str(status_code),
            }
            http_requests_total.labels(**labels).inc()
            http_request_duration_seconds.labels(**labels).observe(duration)
            if status_code >= 400:
                http_errors_total.labels(**labels, error_type=error_type or f"http_{status_code}").inc()

        return response
