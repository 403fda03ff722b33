"""
User account model
"""
from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import (Boolean, Column, Date, DateTime, Integer, String,
                        Text, Uuid)
from sqlalchemy.orm import relationship

from app.core.database import Base


class UserRole(str, Enum):
    """User role enumeration"""
    USER = "User"
    ADMIN = "ADMIN"


class User(Base):
    """Platform user: founder, investor or both"""
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)

    description = Column(Text, nullable=True)
    country = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    birthdate = Column(Date, nullable=True)
    phone = Column(String(50), nullable=True)
    web_site = Column(String(255), nullable=True)
    cin = Column(String(20), nullable=True)
    passport = Column(String(20), nullable=True)
    profile_picture = Column(String(500), nullable=True)

    is_email_verified = Column(Boolean, nullable=False, default=False)
    is_complete_profile = Column(Boolean, nullable=False, default=False)
    is_phone_verified = Column(Boolean, nullable=False, default=False)
    score = Column(Integer, nullable=False, default=0)

    otp_code = Column(String(10), nullable=True)
    otp_code_expires_at = Column(DateTime, nullable=True)
    last_logout_at = Column(DateTime, nullable=True)

    # Denormalized counters
    nb_offer = Column(Integer, nullable=False, default=0)
    nb_connects = Column(Integer, nullable=False, default=0)
    nb_posts = Column(Integer, nullable=False, default=0)
    time_spent = Column(Integer, nullable=False, default=0)  # minutes

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    projects = relationship("Project", back_populates="creator", cascade="all, delete-orphan")
    offers = relationship("Offer", back_populates="user", cascade="all, delete-orphan")
    connects = relationship("Connect", back_populates="user", cascade="all, delete-orphan")
    posts = relationship("Post", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
