"""
Password hashing, JWT handling and the bearer-token dependencies
"""
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from uuid import UUID

import bcrypt
from fastapi import Depends, HTTPException, Path, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt
from jose.exceptions import JWTError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.models.interaction import Comment
from app.models.post import Post
from app.models.project import Project
from app.models.user import User
from app.services.token_blacklist_service import TokenBlacklistService

logger = LoggingConfig.get_logger(__name__)

# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a hash"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_token(user: User, token_type: str = ACCESS_TOKEN) -> str:
    """
    Sign a JWT for a user

    Args:
        user: Token subject
        token_type: ``access`` (short lived) or ``refresh``

    Returns:
        Encoded token
    """
    settings = get_settings()
    if token_type == REFRESH_TOKEN:
        lifetime = timedelta(days=settings.refresh_token_expire_days)
    else:
        lifetime = timedelta(hours=settings.access_token_expire_hours)

    # Sub-second iat so a token signed right after a logout-all is still newer than it
    issued_at = time.time()
    payload = {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "image": user.profile_picture,
        "type": token_type,
        "iat": issued_at,
        "exp": int(issued_at + lifetime.total_seconds()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry

    Raises:
        JWTError: If the token is invalid or expired
    """
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


@dataclass
class CurrentUser:
    """Authenticated caller resolved from the bearer token"""
    id: UUID
    token: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def email(self) -> Optional[str]:
        return self.payload.get("email")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def require_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """
    Require a valid, non-revoked bearer token

    Raises:
        HTTPException: 401 when the token is missing, invalid, revoked or
            older than the user's last logout
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Access token is required")

    token = credentials.credentials
    try:
        payload = decode_token(token)
        user_id = UUID(str(payload["id"]))
    except (JWTError, KeyError, ValueError) as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise _unauthorized("Invalid or expired token")

    if payload.get("type") == REFRESH_TOKEN:
        raise _unauthorized("Refresh tokens cannot be used as access tokens")

    if TokenBlacklistService(db).is_token_blacklisted(token):
        raise _unauthorized("Token has been revoked")

    user = db.get(User, user_id)
    if user is None:
        raise _unauthorized("Invalid or expired token")

    if user.last_logout_at is not None:
        issued_at = datetime.utcfromtimestamp(float(payload.get("iat", 0)))
        if issued_at <= user.last_logout_at:
            raise _unauthorized("Token was issued before last logout")

    LoggingConfig.set_context(user_id=str(user_id))
    return CurrentUser(id=user_id, token=token, payload=payload)


def _owner_check(instance, owner_id: UUID, current_user: CurrentUser, resource: str, id: UUID) -> None:
    if instance is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{resource} with ID {id} not found")
    if owner_id != current_user.id:
        logger.warning(f"User {current_user.id} denied access to {resource.lower()} {id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You are not the owner of this {resource.lower()}",
        )


async def require_project_owner(
    id: UUID = Path(...),
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
) -> CurrentUser:
    project = db.get(Project, id)
    _owner_check(project, project.creator_id if project else None, current_user, "Project", id)
    return current_user


async def require_post_owner(
    id: UUID = Path(...),
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
) -> CurrentUser:
    post = db.get(Post, id)
    _owner_check(post, post.user_id if post else None, current_user, "Post", id)
    return current_user


async def require_comment_owner(
    id: UUID = Path(...),
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
) -> CurrentUser:
    comment = db.get(Comment, id)
    _owner_check(comment, comment.user_id if comment else None, current_user, "Comment", id)
    return current_user


async def require_account_owner(
    id: UUID = Path(...),
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """Only the account holder may change or delete their own account"""
    user = db.get(User, id)
    _owner_check(user, user.id if user else None, current_user, "User", id)
    return current_user
