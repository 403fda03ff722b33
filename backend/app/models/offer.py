"""
Investment offers and connection requests on projects
"""
from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import (Column, DateTime, Float, ForeignKey, String, Text,
                        Uuid)
from sqlalchemy.orm import relationship

from app.core.database import Base


class OfferStatus(str, Enum):
    """Offer status enumeration"""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class ConnectStatus(str, Enum):
    """Connection request status enumeration"""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class Offer(Base):
    """Investor offer on a project"""
    __tablename__ = "offers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    equity = Column(Float, nullable=False)
    offer_description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=OfferStatus.PENDING.value, index=True)
    response_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="offers")
    project = relationship("Project", back_populates="offers")

    def __repr__(self):
        return f"<Offer(id={self.id}, project_id={self.project_id}, amount={self.amount}, status={self.status})>"


class Connect(Base):
    """Request from a user to connect with a project"""
    __tablename__ = "connects"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    connect_status = Column(String(20), nullable=False, default=ConnectStatus.PENDING.value, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="connects")
    project = relationship("Project", back_populates="connects")
