"""
Posts, their media, shares, and project videos with view tracking
"""
from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import (Boolean, Column, DateTime, Float, ForeignKey, Integer,
                        String, Text, UniqueConstraint, Uuid)
from sqlalchemy.orm import relationship

from app.core.database import Base


class MediaType(str, Enum):
    """Post media type enumeration"""
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


class Post(Base):
    __tablename__ = "posts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    is_public = Column(Boolean, nullable=False, default=True)
    ml_prediction = Column(String(255), nullable=True)

    nb_likes = Column(Integer, nullable=False, default=0)
    nb_comments = Column(Integer, nullable=False, default=0)
    nb_views = Column(Integer, nullable=False, default=0)
    nb_shares = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="posts")
    media = relationship("PostMedia", back_populates="post", cascade="all, delete-orphan")
    shares = relationship("PostShared", back_populates="post", cascade="all, delete-orphan")


class PostMedia(Base):
    """Image or video attached to a post; the file lives under uploads/postMedia"""
    __tablename__ = "post_media"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    post_id = Column(Uuid(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    media_url = Column(String(500), nullable=False)
    media_type = Column(String(10), nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    post = relationship("Post", back_populates="media")


class PostShared(Base):
    __tablename__ = "post_shared"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    post_id = Column(Uuid(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    post = relationship("Post", back_populates="shares")


class Video(Base):
    """Pitch video attached to a project"""
    __tablename__ = "videos"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    video_url = Column(String(500), nullable=False)
    duration = Column(Float, nullable=True)
    thumbnail_url = Column(String(500), nullable=True)
    nb_views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    project = relationship("Project", back_populates="videos")
    views = relationship("View", back_populates="video", cascade="all, delete-orphan")


class View(Base):
    """Accumulated watch time of one user on one video"""
    __tablename__ = "views"
    __table_args__ = (UniqueConstraint("user_id", "video_id", name="uq_view_user_video"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(Uuid(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True)
    timespent = Column(Integer, nullable=False, default=0)  # seconds
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    video = relationship("Video", back_populates="views")
