"""
Request id and access logging middleware
"""
import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Health checks and scrapes would drown the access log
QUIET_PATHS = ("/health", "/metrics")


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Binds a request id to the log context and logs one line per request"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        path = request.url.path
        quiet = path.startswith(QUIET_PATHS)

        LoggingConfig.set_context(
            request_id=request_id,
            method=request.method,
            path=path,
            client=request.client.host if request.client else None,
        )
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"{request.method} {path} failed",
                extra={"duration_ms": round((time.perf_counter() - started) * 1000)},
            )
            raise
        else:
            duration_ms = round((time.perf_counter() - started) * 1000)
            if not quiet or response.status_code >= 400:
                level = logging_level(response.status_code)
                logger.log(
                    level,
                    f"{request.method} {path} -> {response.status_code}",
                    extra={"status_code": response.status_code, "duration_ms": duration_ms},
                )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            LoggingConfig.clear_context()


def logging_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO
