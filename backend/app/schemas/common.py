"""
Shared schema pieces
"""
import re

from pydantic import BaseModel

PASSWORD_REGEX = re.compile(r"^(?=.*[A-Z])(?=.*[a-z])(?=.*\d)(?=.*[!@#$%^&*])")


def check_password_strength(value: str) -> str:
    if not PASSWORD_REGEX.match(value):
        raise ValueError("Password is too weak")
    return value


def strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


class ORMModel(BaseModel):
    """Base for responses built from SQLAlchemy rows"""

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class InfoMessage(BaseModel):
    message: str
