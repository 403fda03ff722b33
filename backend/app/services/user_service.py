"""
User accounts: registration, profile updates and statistics
"""
import math
import re
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.errors import BadRequestError, ConflictError
from app.core.logging_config import LoggingConfig
from app.core.security import hash_password
from app.models.offer import Offer
from app.models.post import Post
from app.models.project import Project
from app.models.user import User
from app.services.auth_service import issue_otp
from app.services.base_crud import BaseCrudService, clean_values
from app.services.email_service import EmailService, EmailTemplate
from app.services.file_storage import LocalFileStorage, profile_image_storage

logger = LoggingConfig.get_logger(__name__)

PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Z])(?=.*[a-z])(?=.*\d)(?=.*[!@#$%^&*])")
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 32
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100

# Fields matched by advanced_search
USER_SEARCH_FIELDS = ("name", "email", "country", "city", "web_site")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_name(name: str) -> str:
    name = (name or "").strip()
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise BadRequestError(f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters")
    return name


def validate_password(password: str) -> str:
    if not PASSWORD_MIN_LENGTH <= len(password or "") <= PASSWORD_MAX_LENGTH:
        raise BadRequestError(
            f"Password must be between {PASSWORD_MIN_LENGTH} and {PASSWORD_MAX_LENGTH} characters"
        )
    if not PASSWORD_PATTERN.match(password):
        raise BadRequestError("Password is too weak")
    return password


class UserService(BaseCrudService[User]):
    """Service for user accounts"""

    model = User
    resource_name = "User"
    search_fields = USER_SEARCH_FIELDS
    user_field = "id"

    def __init__(
        self,
        db: Session,
        email_service: Optional[EmailService] = None,
        image_storage: Optional[LocalFileStorage] = None,
    ):
        super().__init__(db)
        self.email_service = email_service or EmailService()
        self._image_storage = image_storage

    @property
    def image_storage(self) -> LocalFileStorage:
        if self._image_storage is None:
            self._image_storage = profile_image_storage()
        return self._image_storage

    def _ensure_email_available(self, email: str, exclude_id: Optional[UUID] = None) -> None:
        query = self.db.query(User.id).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first() is not None:
            raise ConflictError("User with this email already exists")

    def create_user(self, data: Dict[str, Any]) -> User:
        """
        Register a user and mail a verification OTP

        Args:
            data: Registration fields (name, email, password and optional
                profile fields)

        Raises:
            ConflictError: If the email is already registered
            BadRequestError: If the name or password is invalid
        """
        data = clean_values(data)
        data["email"] = normalize_email(data["email"])
        data["name"] = validate_name(data["name"])
        validate_password(data["password"])

        self._ensure_email_available(data["email"])

        data["password"] = hash_password(data["password"])
        data["is_email_verified"] = False
        user = User(**data)
        self.db.add(user)
        self._commit("create")
        self.db.refresh(user)

        issue_otp(self.db, user, EmailTemplate.VERIFY_ACCOUNT, self.email_service)
        logger.info(f"Registered user {user.id} ({user.email})")
        return user

    def create(self, data: Dict[str, Any]) -> User:
        return self.create_user(data)

    def _with_stats(self, user: User) -> Dict[str, Any]:
        counts = {
            "posts": self.db.query(func.count(Post.id)).filter(Post.user_id == user.id).scalar() or 0,
            "projects": self.db.query(func.count(Project.id)).filter(Project.creator_id == user.id).scalar() or 0,
            "offers": self.db.query(func.count(Offer.id)).filter(Offer.user_id == user.id).scalar() or 0,
        }
        return {"user": user, "counts": counts}

    def find_all_with_stats(self) -> List[Dict[str, Any]]:
        return [self._with_stats(user) for user in self.find_all()]

    def find_one_with_stats(self, id: UUID) -> Dict[str, Any]:
        return self._with_stats(self.find_one(id))

    def find_by_email(self, email: str) -> Optional[User]:
        return self.find_by("email", normalize_email(email))

    def advanced_search(self, q: Optional[str], page: int = 1, limit: int = 10) -> Dict[str, Any]:
        """
        Paged search over name, email, country, city and web site

        Returns:
            Dict with ``users`` and ``pagination`` (page, limit, total,
            total_pages)
        """
        if page < 1 or limit < 1:
            raise BadRequestError("page and limit must be >= 1")

        query = self.db.query(User)
        if q and q.strip():
            pattern = f"%{q.strip()}%"
            query = query.filter(or_(*[getattr(User, field).ilike(pattern) for field in USER_SEARCH_FIELDS]))

        total = query.count()
        users = (
            query.order_by(User.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return {
            "users": users,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": math.ceil(total / limit) if total else 0,
            },
        }

    def update_with_profile_image(self, id: UUID, data: Dict[str, Any], image=None) -> User:
        """
        Update profile fields and optionally replace the profile picture

        A new password is validated and re-hashed; a new email must not be
        taken by another account.
        """
        user = self.find_one(id)
        data = {key: value for key, value in clean_values(data).items() if value is not None}

        if "email" in data:
            data["email"] = normalize_email(data["email"])
            if data["email"] != user.email:
                self._ensure_email_available(data["email"], exclude_id=user.id)
        if "name" in data:
            data["name"] = validate_name(data["name"])
        if "password" in data:
            data["password"] = hash_password(validate_password(data["password"]))

        old_picture = user.profile_picture
        stored = None
        if image is not None:
            stored = self.image_storage.save(image)
            data["profile_picture"] = stored.url

        try:
            updated = self.update(id, data)
        except Exception:
            if stored is not None:
                self.image_storage.delete_file(stored.url)
            raise

        if stored is not None and old_picture:
            self.image_storage.delete_file(old_picture)
        return updated

    def remove_profile_image(self, id: UUID) -> User:
        user = self.find_one(id)
        if not user.profile_picture:
            raise BadRequestError("User has no profile image")
        picture = user.profile_picture
        user.profile_picture = None
        self._commit("update")
        self.image_storage.delete_file(picture)
        self.db.refresh(user)
        logger.info(f"Removed profile image of user {id}")
        return user

    def get_user_stats(self) -> Dict[str, Any]:
        total = self.db.query(func.count(User.id)).scalar() or 0
        verified = self.db.query(func.count(User.id)).filter(User.is_email_verified.is_(True)).scalar() or 0
        complete = self.db.query(func.count(User.id)).filter(User.is_complete_profile.is_(True)).scalar() or 0
        by_role = dict(self.db.query(User.role, func.count(User.id)).group_by(User.role).all())
        return {
            "total_users": total,
            "verified_users": verified,
            "unverified_users": total - verified,
            "complete_profiles": complete,
            "users_by_role": by_role,
        }

    def remove_user(self, id: UUID) -> User:
        user = self.remove(id)
        if user.profile_picture:
            self.image_storage.delete_file(user.profile_picture)
        return user
