"""
Token blacklist: revoked JWTs are stored by sha256 hash until they are swept
"""
import hashlib
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

from jose import jwt
from jose.exceptions import JWTError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.logging_config import LoggingConfig
from app.core.metrics import token_blacklist_size, tokens_blacklisted_total
from app.models.token_blacklist import BlacklistedToken
from app.models.user import User

logger = LoggingConfig.get_logger(__name__)

DEFAULT_BLACKLIST_TTL = timedelta(hours=24)

# Blacklist health thresholds
WARNING_TOTAL = 10000
CRITICAL_TOTAL = 50000


def hash_token(token: str) -> str:
    """sha256 hex digest of a raw token"""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class TokenBlacklistService:
    """Service for revoking tokens and maintaining the blacklist table"""

    def __init__(self, db: Session):
        self.db = db
        self.grace_days = get_settings().token_blacklist_grace_days

    def _token_expiry(self, token: str) -> datetime:
        """Expiry from the token's exp claim, or now + 24h if it cannot be decoded"""
        try:
            claims = jwt.get_unverified_claims(token)
            exp = claims.get("exp")
            if exp is not None:
                return datetime.utcfromtimestamp(int(exp))
        except (JWTError, ValueError, TypeError) as e:
            logger.warning(f"Could not decode token for blacklist, using default expiry: {e}")
        return datetime.utcnow() + DEFAULT_BLACKLIST_TTL

    def blacklist_token(self, token: str, user_id: Optional[UUID] = None, reason: str = "logout") -> BlacklistedToken:
        """
        Add a token to the blacklist

        Blacklisting the same token twice keeps the existing row.

        Args:
            token: Raw JWT
            user_id: Owner of the token, if known
            reason: Why it was revoked (logout, logout_all, ...)

        Returns:
            The blacklist entry
        """
        token_hash = hash_token(token)
        existing = self.db.query(BlacklistedToken).filter(BlacklistedToken.token_hash == token_hash).first()
        if existing:
            logger.debug(f"Token already blacklisted (user {existing.user_id})")
            return existing

        entry = BlacklistedToken(
            token_hash=token_hash,
            user_id=user_id,
            reason=reason,
            expires_at=self._token_expiry(token),
            blacklisted_at=datetime.utcnow(),
        )
        self.db.add(entry)
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent logout with the same token
            self.db.rollback()
            return self.db.query(BlacklistedToken).filter(BlacklistedToken.token_hash == token_hash).one()
        self.db.refresh(entry)

        tokens_blacklisted_total.labels(reason=reason).inc()
        logger.info(f"Blacklisted token for user {user_id} (reason: {reason}, expires {entry.expires_at})")
        return entry

    def is_token_blacklisted(self, token: str) -> bool:
        """True if the token has an active (not yet expired) blacklist entry"""
        return (
            self.db.query(BlacklistedToken.id)
            .filter(
                BlacklistedToken.token_hash == hash_token(token),
                BlacklistedToken.expires_at > datetime.utcnow(),
            )
            .first()
            is not None
        )

    def blacklist_all_user_tokens(self, user_id: UUID, reason: str = "logout_all") -> Optional[datetime]:
        """
        Invalidate every token issued to a user so far.

        Individual tokens are not tracked, so this stamps ``last_logout_at``;
        the token guard rejects any token issued at or before it.
        """
        user = self.db.get(User, user_id)
        if user is None:
            logger.warning(f"Cannot revoke tokens of unknown user {user_id}")
            return None
        user.last_logout_at = datetime.utcnow()
        self.db.commit()
        logger.info(f"Revoked all tokens for user {user_id} (reason: {reason})")
        return user.last_logout_at

    def _delete_expired_before(self, cutoff: datetime) -> int:
        deleted = (
            self.db.query(BlacklistedToken)
            .filter(BlacklistedToken.expires_at < cutoff)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted

    def cleanup_expired_tokens(self) -> int:
        """Delete entries that expired more than the grace period ago"""
        cutoff = datetime.utcnow() - timedelta(days=self.grace_days)
        deleted = self._delete_expired_before(cutoff)
        logger.info(f"Removed {deleted} blacklist entries expired before {cutoff.isoformat()}")
        return deleted

    def cleanup_all_expired_tokens(self) -> int:
        """Delete every expired entry immediately, ignoring the grace period"""
        deleted = self._delete_expired_before(datetime.utcnow())
        logger.warning(f"Immediate cleanup removed {deleted} expired blacklist entries")
        return deleted

    def get_blacklist_stats(self) -> Dict[str, int]:
        now = datetime.utcnow()
        total = self.db.query(func.count(BlacklistedToken.id)).scalar() or 0
        expired = (
            self.db.query(func.count(BlacklistedToken.id))
            .filter(BlacklistedToken.expires_at < now)
            .scalar()
            or 0
        )
        stats = {"total": total, "expired": expired, "active": total - expired}
        token_blacklist_size.labels(state="active").set(stats["active"])
        token_blacklist_size.labels(state="expired").set(expired)
        return stats

    def get_blacklist_history(self, days: int = 7) -> List[Dict[str, Any]]:
        """Entries blacklisted in the last ``days`` days, newest first"""
        now = datetime.utcnow()
        since = now - timedelta(days=days)
        entries = (
            self.db.query(BlacklistedToken)
            .filter(BlacklistedToken.blacklisted_at >= since)
            .order_by(BlacklistedToken.blacklisted_at.desc())
            .all()
        )
        return [
            {
                "token_hash": entry.token_hash,
                "user_id": entry.user_id,
                "reason": entry.reason,
                "blacklisted_at": entry.blacklisted_at,
                "expires_at": entry.expires_at,
                "status": "active" if entry.is_active(now) else "expired",
            }
            for entry in entries
        ]

    def get_blacklist_stats_by_user(self, user_id: UUID) -> Dict[str, Any]:
        now = datetime.utcnow()
        entries = self.db.query(BlacklistedToken).filter(BlacklistedToken.user_id == user_id).all()
        active = sum(1 for entry in entries if entry.is_active(now))
        return {
            "total": len(entries),
            "active": active,
            "expired": len(entries) - active,
            "reasons": dict(Counter(entry.reason for entry in entries)),
        }

    def check_health(self) -> Dict[str, Any]:
        """
        Report on blacklist size.

        Returns:
            Dict with status (healthy/warning/critical), message, stats and
            recommendations
        """
        stats = self.get_blacklist_stats()
        status = "healthy"
        message = "Token blacklist is healthy"
        recommendations: List[str] = []

        if stats["total"] > CRITICAL_TOTAL:
            status = "critical"
            message = f"Token blacklist is very large ({stats['total']} entries)"
            recommendations.append("Run an immediate cleanup of expired tokens")
            recommendations.append("Consider reducing the cleanup grace period")
        elif stats["total"] > WARNING_TOTAL:
            status = "warning"
            message = f"Token blacklist is growing ({stats['total']} entries)"
            recommendations.append("Check that the scheduled cleanup is running")

        if stats["expired"] > stats["active"] * 2:
            if status == "healthy":
                status = "warning"
                message = "Expired entries outnumber active entries more than two to one"
            recommendations.append("Run a manual cleanup to remove expired entries")

        return {
            "status": status,
            "message": message,
            "stats": stats,
            "recommendations": recommendations,
        }
