"""
Domain exceptions raised by services and their HTTP translation
"""
from typing import Any, Optional

from fastapi import HTTPException, status


class ServiceError(Exception):
    """Base class for errors raised by services"""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail if detail is not None else message


class BadRequestError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


def to_http_exception(error: ServiceError) -> HTTPException:
    """Convert a service error into an HTTPException"""
    headers = None
    if isinstance(error, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(status_code=error.status_code, detail=error.detail, headers=headers)
