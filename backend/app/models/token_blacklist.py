"""
Revoked JWTs, stored by hash until swept
"""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid

from app.core.database import Base


class BlacklistedToken(Base):
    """Blacklisted token model"""
    __tablename__ = "blacklisted_tokens"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    token_hash = Column(String(64), unique=True, nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    reason = Column(String(100), nullable=False, default="logout")
    expires_at = Column(DateTime, nullable=False, index=True)
    blacklisted_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    def is_active(self, now: datetime) -> bool:
        return self.expires_at > now

    def __repr__(self):
        return f"<BlacklistedToken(id={self.id}, user_id={self.user_id}, reason={self.reason}, expires_at={self.expires_at})>"
