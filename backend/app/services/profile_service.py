"""
Profile-side records: interests, experience, blocks, sign-in attempts and visits
"""
from typing import Any, Dict, List
from uuid import UUID

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.models.profile import AttemptLog, Block, ExperienceEducation
from app.models.project import Interest, Sector, VisitorProfileProject
from app.models.user import User
from app.services.base_crud import BaseCrudService, clean_values


class InterestService(BaseCrudService[Interest]):
    """A user's interest in a sector"""

    model = Interest
    resource_name = "Interest"

    def create(self, data: Dict[str, Any]) -> Interest:
        data = clean_values(data)
        if self.db.get(Sector, data["sector_id"]) is None:
            raise NotFoundError(f"Sector with ID {data['sector_id']} not found")
        existing = (
            self.db.query(Interest.id)
            .filter(Interest.user_id == data["user_id"], Interest.sector_id == data["sector_id"])
            .first()
        )
        if existing:
            raise ConflictError("User is already interested in this sector")
        return super().create(data)


class ExperienceEducationService(BaseCrudService[ExperienceEducation]):
    model = ExperienceEducation
    resource_name = "ExperienceEducation"
    search_fields = ("title", "organization", "degree", "field_of_study", "location")

    def create(self, data: Dict[str, Any]) -> ExperienceEducation:
        data = clean_values(data)
        if data.get("end_date") and data["end_date"] < data["start_date"]:
            raise BadRequestError("end_date must not be before start_date")
        return super().create(data)


class BlockService(BaseCrudService[Block]):
    """User-to-user blocks"""

    model = Block
    resource_name = "Block"

    def create(self, data: Dict[str, Any]) -> Block:
        """
        Raises:
            BadRequestError: If a user tries to block themselves
            NotFoundError: If the blocked user does not exist
            ConflictError: If the block already exists
        """
        data = clean_values(data)
        if data["user_id"] == data["blocked_user_id"]:
            raise BadRequestError("You cannot block yourself")
        if self.db.get(User, data["blocked_user_id"]) is None:
            raise NotFoundError(f"User with ID {data['blocked_user_id']} not found")
        if self.is_blocked(data["user_id"], data["blocked_user_id"]):
            raise ConflictError("User is already blocked")
        return super().create(data)

    def is_blocked(self, user_id: UUID, blocked_user_id: UUID) -> bool:
        return (
            self.db.query(Block.id)
            .filter(Block.user_id == user_id, Block.blocked_user_id == blocked_user_id)
            .first()
            is not None
        )


class AttemptLogService(BaseCrudService[AttemptLog]):
    model = AttemptLog
    resource_name = "AttemptLog"
    search_fields = ("ip_address", "reason")

    def find_failed_by_user(self, user_id: UUID) -> List[AttemptLog]:
        return (
            self.db.query(AttemptLog)
            .filter(AttemptLog.user_id == user_id, AttemptLog.success.is_(False))
            .order_by(AttemptLog.created_at.desc())
            .all()
        )


class VisitorProfileProjectService(BaseCrudService[VisitorProfileProject]):
    model = VisitorProfileProject
    resource_name = "VisitorProfileProject"
    user_field = "user_visitor_id"

    def create(self, data: Dict[str, Any]) -> VisitorProfileProject:
        data = clean_values(data)
        if not data.get("user_id") and not data.get("project_id"):
            raise BadRequestError("Either user_id or project_id must be provided")
        return super().create(data)
