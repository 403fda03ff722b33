"""
Authentication service: sign-in, OTP flows and logout
"""
import secrets
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from jose.exceptions import JWTError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import UnauthorizedError
from app.core.logging_config import LoggingConfig
from app.core.security import (ACCESS_TOKEN, REFRESH_TOKEN, create_token,
                               decode_token, hash_password, verify_password)
from app.models.profile import AttemptLog
from app.models.user import User
from app.services.email_service import EmailService, EmailTemplate
from app.services.token_blacklist_service import TokenBlacklistService

logger = LoggingConfig.get_logger(__name__)


class OtpType(str, Enum):
    VERIFY = "verify"
    RESET = "reset"


def generate_otp(length: Optional[int] = None) -> str:
    """Random zero-padded numeric code"""
    length = length or get_settings().otp_length
    return str(secrets.randbelow(10 ** length)).zfill(length)


def issue_otp(db: Session, user: User, template: EmailTemplate, email_service: Optional[EmailService] = None) -> str:
    """
    Store a fresh OTP on the user, commit and mail it

    Returns:
        The OTP code
    """
    settings = get_settings()
    otp_code = generate_otp(settings.otp_length)
    user.otp_code = otp_code
    user.otp_code_expires_at = datetime.utcnow() + timedelta(minutes=settings.otp_expire_minutes)
    db.commit()

    try:
        (email_service or EmailService()).send_otp(user.email, user.name, otp_code, template)
    except OSError as e:
        # The code is stored; the user can ask for a resend
        logger.error(f"Failed to send OTP mail to {user.email}: {e}", exc_info=True)
    return otp_code


class AuthService:
    """Service for user authentication and token lifecycle"""

    def __init__(self, db: Session, email_service: Optional[EmailService] = None):
        self.db = db
        self.email_service = email_service or EmailService()

    def _find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def _record_attempt(self, user: User, success: bool, reason: Optional[str], ip_address: Optional[str]) -> None:
        self.db.add(AttemptLog(user_id=user.id, success=success, reason=reason, ip_address=ip_address))
        self.db.commit()

    def sign_in(self, email: str, password: str, ip_address: Optional[str] = None) -> Dict[str, str]:
        """
        Authenticate by email and password

        Returns:
            Dict with ``token`` and ``refresh_token``

        Raises:
            UnauthorizedError: On bad credentials or an unverified email
        """
        user = self._find_by_email(email)
        if not user:
            logger.warning(f"Sign-in failed: no user with email '{email}'")
            raise UnauthorizedError("Invalid credentials")

        if not verify_password(password, user.password):
            self._record_attempt(user, False, "invalid_password", ip_address)
            logger.warning(f"Sign-in failed: invalid password for user {user.id}")
            raise UnauthorizedError("Invalid credentials")

        if not user.is_email_verified:
            self._record_attempt(user, False, "email_not_verified", ip_address)
            raise UnauthorizedError("User Not Verified check your email for verification")

        self._record_attempt(user, True, None, ip_address)
        logger.info(f"User {user.id} signed in")
        return {
            "token": create_token(user, ACCESS_TOKEN),
            "refresh_token": create_token(user, REFRESH_TOKEN),
        }

    def refresh_token(self, refresh_token: str) -> Dict[str, str]:
        """Exchange a refresh token for a new access token"""
        try:
            payload = decode_token(refresh_token)
            user_id = UUID(str(payload["id"]))
        except (JWTError, KeyError, ValueError):
            raise UnauthorizedError("Invalid refresh token")

        if payload.get("type") != REFRESH_TOKEN:
            raise UnauthorizedError("Invalid refresh token")
        if TokenBlacklistService(self.db).is_token_blacklisted(refresh_token):
            raise UnauthorizedError("Token has been revoked")

        user = self.db.get(User, user_id)
        if not user:
            raise UnauthorizedError("User not found")

        return {"token": create_token(user, ACCESS_TOKEN), "refresh_token": refresh_token}

    def forget_password(self, email: str) -> None:
        user = self._find_by_email(email)
        if not user:
            raise UnauthorizedError("User not found")
        issue_otp(self.db, user, EmailTemplate.RESET_PASSWORD, self.email_service)
        logger.info(f"Password reset OTP issued for user {user.id}")

    def reset_password(self, email: str, new_password: str) -> None:
        user = self._find_by_email(email)
        if not user:
            raise UnauthorizedError("User not found")
        user.password = hash_password(new_password)
        user.otp_code = None
        user.otp_code_expires_at = None
        self.db.commit()
        logger.info(f"Password reset for user {user.id}")

    def verify_otp(self, email: str, otp_code: str, otp_type: OtpType = OtpType.VERIFY) -> Dict[str, str]:
        """
        Check an OTP for email verification or password reset

        Raises:
            UnauthorizedError: If the code is wrong, expired, or the email is
                already verified
        """
        otp_type = OtpType(otp_type)
        user = self._find_by_email(email)
        if not user or not user.otp_code or not secrets.compare_digest(user.otp_code, otp_code):
            raise UnauthorizedError("Invalid OTP")

        if user.otp_code_expires_at and user.otp_code_expires_at < datetime.utcnow():
            raise UnauthorizedError("OTP has expired. Please request a new one.")

        if otp_type == OtpType.VERIFY:
            if user.is_email_verified:
                raise UnauthorizedError("Email is already verified")
            user.is_email_verified = True
            message = "Email verified successfully"
        else:
            message = "OTP verified successfully, proceed with password reset"

        user.otp_code = None
        user.otp_code_expires_at = None
        self.db.commit()
        logger.info(f"OTP ({otp_type.value}) verified for user {user.id}")
        return {"message": message}

    def resend_otp(self, email: str, otp_type: OtpType = OtpType.VERIFY) -> None:
        otp_type = OtpType(otp_type)
        if not email:
            raise UnauthorizedError("Email is required")

        user = self._find_by_email(email)
        if not user:
            raise UnauthorizedError("User not found")
        if otp_type == OtpType.VERIFY and user.is_email_verified:
            raise UnauthorizedError("Email already verified")

        template = EmailTemplate.VERIFY_ACCOUNT if otp_type == OtpType.VERIFY else EmailTemplate.RESET_PASSWORD
        issue_otp(self.db, user, template, self.email_service)

    def logout(self, user_id: UUID, token: str, logout_from_all_devices: bool = False) -> Dict[str, Any]:
        """
        Revoke the presented token, and optionally every earlier token

        Args:
            user_id: Caller
            token: Raw bearer token
            logout_from_all_devices: Also stamp ``last_logout_at``
        """
        blacklist = TokenBlacklistService(self.db)
        blacklist.blacklist_token(token, user_id, "logout_all" if logout_from_all_devices else "logout")
        if logout_from_all_devices:
            blacklist.blacklist_all_user_tokens(user_id)
            message = "Logged out from all devices"
        else:
            message = "Logged out successfully"
        logger.info(f"User {user_id} logged out (all devices: {logout_from_all_devices})")
        return {"message": message, "logout_from_all_devices": logout_from_all_devices}

    def validate_token(self, token: str) -> Dict[str, Any]:
        try:
            payload = decode_token(token)
        except JWTError:
            return {"valid": False, "user_id": None, "email": None, "message": "Invalid or expired token"}

        if TokenBlacklistService(self.db).is_token_blacklisted(token):
            return {"valid": False, "user_id": payload.get("id"), "email": payload.get("email"),
                    "message": "Token has been revoked"}

        return {"valid": True, "user_id": payload.get("id"), "email": payload.get("email"),
                "message": "Token is valid"}
