"""
User API routes
"""
from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import (APIRouter, Depends, File, Form, Query, UploadFile,
                     status)
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.core.security import CurrentUser, require_account_owner
from app.schemas.user import (UserCreate, UserResponse, UserSearchResponse,
                              UserStats, UserUpdate, UserWithStats)
from app.services.user_service import UserService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/v1/user", tags=["user"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, db: Session = Depends(get_db)):
    """Register a user and mail the verification code"""
    return UserService(db).create_user(body.model_dump())


@router.get("", response_model=List[UserWithStats])
async def list_users(db: Session = Depends(get_db)):
    return UserService(db).find_all_with_stats()


@router.get("/search", response_model=UserSearchResponse)
async def search_users(
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return UserService(db).advanced_search(q, page, limit)


@router.get("/stats/overview", response_model=UserStats)
async def user_stats(db: Session = Depends(get_db)):
    return UserService(db).get_user_stats()


@router.get("/{id}", response_model=UserWithStats)
async def get_user(id: UUID, db: Session = Depends(get_db)):
    return UserService(db).find_one_with_stats(id)


@router.patch("/{id}", response_model=UserResponse)
async def update_user(
    id: UUID,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    country: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    birthdate: Optional[date] = Form(None),
    phone: Optional[str] = Form(None),
    web_site: Optional[str] = Form(None),
    cin: Optional[str] = Form(None),
    passport: Optional[str] = Form(None),
    profile_image: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(require_account_owner),
    db: Session = Depends(get_db),
):
    """Update profile fields (multipart) and optionally replace the profile image"""
    fields = {
        "name": name,
        "email": email,
        "password": password,
        "description": description,
        "country": country,
        "city": city,
        "birthdate": birthdate,
        "phone": phone,
        "web_site": web_site,
        "cin": cin,
        "passport": passport,
    }
    try:
        update = UserUpdate(**{key: value for key, value in fields.items() if value is not None})
    except ValidationError as e:
        raise RequestValidationError(e.errors())

    return UserService(db).update_with_profile_image(id, update.model_dump(exclude_unset=True), profile_image)


@router.delete("/{id}/profile-image", response_model=UserResponse)
async def delete_profile_image(
    id: UUID,
    current_user: CurrentUser = Depends(require_account_owner),
    db: Session = Depends(get_db),
):
    return UserService(db).remove_profile_image(id)


@router.delete("/{id}", response_model=UserResponse)
async def delete_user(
    id: UUID,
    current_user: CurrentUser = Depends(require_account_owner),
    db: Session = Depends(get_db),
):
    logger.info(f"User {id} deleted their account")
    return UserService(db).remove_user(id)
