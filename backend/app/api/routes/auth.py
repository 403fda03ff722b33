"""
Authentication API routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.core.security import CurrentUser, require_token, security
from app.schemas.common import InfoMessage
from app.schemas.user import (EmailRequest, LogoutRequest, RefreshTokenRequest,
                              ResendOtpRequest, ResetPasswordRequest,
                              SignInRequest, TokenPair, ValidateTokenResponse,
                              VerifyOtpRequest)
from app.services.auth_service import AuthService, OtpType

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/sign-in", response_model=TokenPair)
async def sign_in(body: SignInRequest, request: Request, db: Session = Depends(get_db)):
    """Exchange credentials for an access and a refresh token"""
    ip_address = request.client.host if request.client else None
    return AuthService(db).sign_in(body.email, body.password, ip_address)


@router.post("/verify-otp", response_model=InfoMessage)
async def verify_otp(body: VerifyOtpRequest, db: Session = Depends(get_db)):
    return AuthService(db).verify_otp(body.email, body.otp_code, OtpType(body.type))


@router.post("/resend-otp", response_model=InfoMessage)
async def resend_otp(body: ResendOtpRequest, db: Session = Depends(get_db)):
    AuthService(db).resend_otp(body.email, OtpType(body.type))
    return {"message": "OTP sent successfully"}


@router.post("/refresh-token", response_model=TokenPair)
async def refresh_token(body: RefreshTokenRequest, db: Session = Depends(get_db)):
    return AuthService(db).refresh_token(body.refresh_token)


@router.post("/forget-password", response_model=InfoMessage)
async def forget_password(body: EmailRequest, db: Session = Depends(get_db)):
    AuthService(db).forget_password(body.email)
    return {"message": "Password reset code sent to your email"}


@router.post("/reset-password", response_model=InfoMessage)
async def reset_password(body: ResetPasswordRequest, db: Session = Depends(get_db)):
    AuthService(db).reset_password(body.email, body.new_password)
    return {"message": "Password reset successfully"}


@router.post("/logout")
async def logout(
    body: Optional[LogoutRequest] = None,
    current_user: CurrentUser = Depends(require_token),
    db: Session = Depends(get_db),
):
    """Revoke the presented token; optionally every token issued so far"""
    return AuthService(db).logout(current_user.id, current_user.token, bool(body and body.logout_from_all_devices))


@router.get("/validate-token", response_model=ValidateTokenResponse)
async def validate_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
):
    if credentials is None or not credentials.credentials:
        return {"valid": False, "user_id": None, "email": None, "message": "Access token is required"}
    return AuthService(db).validate_token(credentials.credentials)
