"""
User, auth and profile schemas
"""
from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.profile import ExperienceType
from app.models.user import UserRole
from app.schemas.common import (ORMModel, Pagination, check_password_strength,
                                strip_required)


class UserCreate(BaseModel):
    """Registration request"""
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=32)
    role: UserRole = UserRole.USER
    description: Optional[str] = None
    country: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    birthdate: Optional[date] = None
    phone: Optional[str] = Field(None, max_length=50)
    web_site: Optional[str] = Field(None, max_length=255)
    cin: Optional[str] = Field(None, max_length=20)
    passport: Optional[str] = Field(None, max_length=20)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = strip_required(v)
        if len(v) < 2:
            raise ValueError("name must be at least 2 characters")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)


class UserUpdate(BaseModel):
    """Profile update; every field optional"""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=32)
    description: Optional[str] = None
    country: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    birthdate: Optional[date] = None
    phone: Optional[str] = Field(None, max_length=50)
    web_site: Optional[str] = Field(None, max_length=255)
    cin: Optional[str] = Field(None, max_length=20)
    passport: Optional[str] = Field(None, max_length=20)
    is_complete_profile: Optional[bool] = None
    is_phone_verified: Optional[bool] = None

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: Optional[str]) -> Optional[str]:
        return check_password_strength(v) if v is not None else v


class UserResponse(ORMModel):
    """User without credentials or OTP state"""
    id: UUID
    email: str
    name: str
    role: str
    description: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    birthdate: Optional[date] = None
    phone: Optional[str] = None
    web_site: Optional[str] = None
    profile_picture: Optional[str] = None
    is_email_verified: bool
    is_complete_profile: bool
    is_phone_verified: bool
    score: int
    nb_offer: int
    nb_connects: int
    nb_posts: int
    time_spent: int
    created_at: datetime
    updated_at: datetime


class UserSummary(ORMModel):
    id: UUID
    name: str
    email: str
    profile_picture: Optional[str] = None


class UserCounts(BaseModel):
    posts: int
    projects: int
    offers: int


class UserWithStats(BaseModel):
    user: UserResponse
    counts: UserCounts


class UserSearchResponse(BaseModel):
    users: List[UserResponse]
    pagination: Pagination


class UserStats(BaseModel):
    total_users: int
    verified_users: int
    unverified_users: int
    complete_profiles: int
    users_by_role: Dict[str, int]


# Auth

class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenPair(BaseModel):
    token: str
    refresh_token: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class EmailRequest(BaseModel):
    email: EmailStr


class ResendOtpRequest(BaseModel):
    email: EmailStr
    type: str = Field("verify", pattern="^(verify|reset)$")


class VerifyOtpRequest(BaseModel):
    email: EmailStr
    otp_code: str = Field(..., min_length=4, max_length=8)
    type: str = Field("verify", pattern="^(verify|reset)$")


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    new_password: str = Field(..., min_length=8, max_length=32)

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)


class LogoutRequest(BaseModel):
    logout_from_all_devices: bool = False


class ValidateTokenResponse(BaseModel):
    valid: bool
    user_id: Optional[str] = None
    email: Optional[str] = None
    message: str


# Profile records

class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None


class TeamResponse(ORMModel):
    id: UUID
    name: str
    description: Optional[str] = None
    created_at: datetime


class TeamUserCreate(BaseModel):
    team_id: UUID
    user_id: UUID


class TeamUserResponse(ORMModel):
    id: UUID
    team_id: UUID
    user_id: UUID
    created_at: datetime


class SocialMediaCreate(BaseModel):
    user_id: UUID
    platform: str = Field(..., min_length=1, max_length=50)
    url: str = Field(..., min_length=1, max_length=500)


class SocialMediaUpdate(BaseModel):
    platform: Optional[str] = Field(None, min_length=1, max_length=50)
    url: Optional[str] = Field(None, min_length=1, max_length=500)


class SocialMediaResponse(ORMModel):
    id: UUID
    user_id: UUID
    platform: str
    url: str
    created_at: datetime


class ExperienceEducationCreate(BaseModel):
    user_id: UUID
    title: str = Field(..., min_length=1, max_length=255)
    organization: str = Field(..., min_length=1, max_length=255)
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    type_of_experience: ExperienceType = ExperienceType.EXPERIENCE


class ExperienceEducationUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    organization: Optional[str] = Field(None, min_length=1, max_length=255)
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    type_of_experience: Optional[ExperienceType] = None


class ExperienceEducationResponse(ORMModel):
    id: UUID
    user_id: UUID
    title: str
    organization: str
    degree: Optional[str] = None
    field_of_study: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    type_of_experience: str


class FollowCreate(BaseModel):
    following_id: UUID


class FollowResponse(ORMModel):
    id: UUID
    follower_id: UUID
    following_id: UUID
    created_at: datetime


class ToggleFollowResponse(BaseModel):
    is_following: bool
    follow: Optional[FollowResponse] = None


class BlockCreate(BaseModel):
    user_id: UUID
    blocked_user_id: UUID


class BlockResponse(ORMModel):
    id: UUID
    user_id: UUID
    blocked_user_id: UUID
    created_at: datetime


class AttemptLogCreate(BaseModel):
    user_id: UUID
    success: bool = False
    ip_address: Optional[str] = Field(None, max_length=64)
    reason: Optional[str] = Field(None, max_length=255)


class AttemptLogResponse(ORMModel):
    id: UUID
    user_id: UUID
    success: bool
    ip_address: Optional[str] = None
    reason: Optional[str] = None
    created_at: datetime


class InterestCreate(BaseModel):
    user_id: UUID
    sector_id: UUID


class InterestResponse(ORMModel):
    id: UUID
    user_id: UUID
    sector_id: UUID
    created_at: datetime


class VisitorProfileProjectCreate(BaseModel):
    user_id: Optional[UUID] = None
    user_visitor_id: UUID
    project_id: Optional[UUID] = None


class VisitorProfileProjectResponse(ORMModel):
    id: UUID
    user_id: Optional[UUID] = None
    user_visitor_id: UUID
    project_id: Optional[UUID] = None
    created_at: datetime


class TimeSpentRequest(BaseModel):
    minutes: Optional[int] = None
    seconds: Optional[int] = None


class TimeSpentResponse(BaseModel):
    user_id: UUID
    time_spent: int
