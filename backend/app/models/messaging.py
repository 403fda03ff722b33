"""
Discussions, messages and notifications
"""
from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import (Boolean, Column, DateTime, ForeignKey, String, Text,
                        Uuid)
from sqlalchemy.orm import relationship

from app.core.database import Base


class DiscussionType(str, Enum):
    PRIVATE = "PRIVATE"
    PROJECT = "PROJECT"


class NotificationType(str, Enum):
    """Notification type enumeration"""
    NEW_LIKE = "NEW_LIKE"
    NEW_COMMENT = "NEW_COMMENT"
    NEW_FOLLOWER = "NEW_FOLLOWER"
    NEW_MESSAGE = "NEW_MESSAGE"
    NEW_OFFER = "NEW_OFFER"
    NEW_CONNECT = "NEW_CONNECT"
    PROJECT_UPDATE = "PROJECT_UPDATE"
    OTHER = "OTHER"


class Discussion(Base):
    """Conversation between two users, optionally about a project"""
    __tablename__ = "discussions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    sender_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(20), nullable=False, default=DiscussionType.PRIVATE.value)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])
    project = relationship("Project")
    messages = relationship(
        "Message",
        back_populates="discussion",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )

    def has_participant(self, user_id) -> bool:
        return user_id in (self.sender_id, self.receiver_id)

    def other_participant(self, user_id):
        return self.receiver_id if user_id == self.sender_id else self.sender_id


class Message(Base):
    __tablename__ = "messages"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    discussion_id = Column(Uuid(as_uuid=True), ForeignKey("discussions.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    discussion = relationship("Discussion", back_populates="messages")
    sender = relationship("User")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(30), nullable=False, default=NotificationType.OTHER.value)
    title = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    user = relationship("User", back_populates="notifications")
