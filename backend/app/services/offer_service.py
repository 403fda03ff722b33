"""
Offer service: offers and their counters move together in one transaction
"""
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.database import atomic
from app.core.errors import NotFoundError
from app.core.logging_config import LoggingConfig
from app.models.offer import Offer, OfferStatus
from app.models.project import Project
from app.models.user import User
from app.services.base_crud import BaseCrudService, clean_values
from app.services.counter_service import CounterService, CounterTarget

logger = LoggingConfig.get_logger(__name__)


class OfferService(BaseCrudService[Offer]):
    """Service for investment offers"""

    model = Offer
    resource_name = "Offer"
    search_fields = ("offer_description", "status")

    def __init__(self, db: Session):
        super().__init__(db)
        self.counters = CounterService(db)

    def _adjust_counters(self, user_id: UUID, project_id: UUID, delta: int) -> None:
        self.counters.adjust(CounterTarget.USER, user_id, "nb_offer", delta)
        self.counters.adjust(CounterTarget.PROJECT, project_id, "nb_offers", delta)

    def create(self, data: Dict[str, Any]) -> Offer:
        """
        Create an offer and bump the investor's and project's offer counters.

        The insert and both counter updates commit together; if any step
        fails nothing is persisted.

        Raises:
            NotFoundError: If the user or project does not exist
        """
        data = clean_values(data)
        user_id = data["user_id"]
        project_id = data["project_id"]

        with atomic(self.db, "offer.create"):
            if self.db.get(User, user_id) is None:
                raise NotFoundError(f"User with ID {user_id} not found")
            if self.db.get(Project, project_id) is None:
                raise NotFoundError(f"Project with ID {project_id} not found")

            offer = Offer(**data)
            self.db.add(offer)
            self.db.flush()
            self._adjust_counters(user_id, project_id, 1)

        self.db.refresh(offer)
        logger.info(f"Created offer {offer.id} of {offer.amount} on project {project_id} by user {user_id}")
        return offer

    def remove(self, id: UUID) -> Offer:
        """
        Delete an offer and decrement both counters (never below zero)

        Raises:
            NotFoundError: If the offer does not exist
        """
        with atomic(self.db, "offer.remove"):
            offer = self.find_one(id)
            user_id, project_id = offer.user_id, offer.project_id
            self.db.delete(offer)
            self.db.flush()
            self._adjust_counters(user_id, project_id, -1)

        logger.info(f"Deleted offer {id}")
        return offer

    def get_user_offers_with_projects(self, user_id: UUID) -> List[Offer]:
        return (
            self.db.query(Offer)
            .options(joinedload(Offer.project))
            .filter(Offer.user_id == user_id)
            .order_by(Offer.created_at.desc())
            .all()
        )

    def get_project_offers(self, project_id: UUID) -> List[Offer]:
        return (
            self.db.query(Offer)
            .options(joinedload(Offer.user))
            .filter(Offer.project_id == project_id)
            .order_by(Offer.created_at.desc())
            .all()
        )

    def get_user_offer_stats(self, user_id: UUID) -> Dict[str, Any]:
        """Offer totals for an investor"""
        rows = (
            self.db.query(Offer.status, func.count(Offer.id), func.coalesce(func.sum(Offer.amount), 0))
            .filter(Offer.user_id == user_id)
            .group_by(Offer.status)
            .all()
        )
        by_status = {status: count for status, count, _ in rows}
        total_offers = sum(by_status.values())
        total_amount = float(sum(amount for _, _, amount in rows))
        return {
            "total_offers": total_offers,
            "pending_offers": by_status.get(OfferStatus.PENDING.value, 0),
            "accepted_offers": by_status.get(OfferStatus.ACCEPTED.value, 0),
            "rejected_offers": by_status.get(OfferStatus.REJECTED.value, 0),
            "total_amount": total_amount,
            "average_amount": total_amount / total_offers if total_offers else 0.0,
        }

    def get_project_offer_stats(self, project_id: UUID) -> Dict[str, Any]:
        """Offer totals received by a project"""
        total_offers, total_amount, highest = (
            self.db.query(
                func.count(Offer.id),
                func.coalesce(func.sum(Offer.amount), 0),
                func.coalesce(func.max(Offer.amount), 0),
            )
            .filter(Offer.project_id == project_id)
            .one()
        )
        total_amount = float(total_amount)
        return {
            "total_offers": total_offers,
            "total_amount": total_amount,
            "average_amount": total_amount / total_offers if total_offers else 0.0,
            "highest_offer": float(highest),
        }
