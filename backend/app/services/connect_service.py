"""
Connect service: connection requests from users to projects
"""
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.database import atomic
from app.core.errors import NotFoundError
from app.core.logging_config import LoggingConfig
from app.models.offer import Connect, ConnectStatus
from app.models.project import Project
from app.models.user import User
from app.services.base_crud import BaseCrudService, clean_values
from app.services.counter_service import CounterService, CounterTarget

logger = LoggingConfig.get_logger(__name__)


class ConnectService(BaseCrudService[Connect]):
    """Service for project connection requests"""

    model = Connect
    resource_name = "Connect"
    search_fields = ("connect_status",)

    def __init__(self, db: Session):
        super().__init__(db)
        self.counters = CounterService(db)

    def _adjust_counters(self, user_id: UUID, project_id: UUID, delta: int) -> None:
        self.counters.adjust(CounterTarget.USER, user_id, "nb_connects", delta)
        self.counters.adjust(CounterTarget.PROJECT, project_id, "nb_connects", delta)

    def create(self, data: Dict[str, Any]) -> Connect:
        """
        Create a connection request and bump both connect counters atomically

        Raises:
            NotFoundError: If the user or project does not exist
        """
        data = clean_values(data)
        user_id = data["user_id"]
        project_id = data["project_id"]

        with atomic(self.db, "connect.create"):
            if self.db.get(User, user_id) is None:
                raise NotFoundError(f"User with ID {user_id} not found")
            if self.db.get(Project, project_id) is None:
                raise NotFoundError(f"Project with ID {project_id} not found")

            connect = Connect(**data)
            self.db.add(connect)
            self.db.flush()
            self._adjust_counters(user_id, project_id, 1)

        self.db.refresh(connect)
        logger.info(f"Created connect {connect.id} from user {user_id} to project {project_id}")
        return connect

    def remove(self, id: UUID) -> Connect:
        with atomic(self.db, "connect.remove"):
            connect = self.find_one(id)
            user_id, project_id = connect.user_id, connect.project_id
            self.db.delete(connect)
            self.db.flush()
            self._adjust_counters(user_id, project_id, -1)

        logger.info(f"Deleted connect {id}")
        return connect

    def get_user_connections_with_projects(self, user_id: UUID) -> List[Connect]:
        return (
            self.db.query(Connect)
            .options(joinedload(Connect.project))
            .filter(Connect.user_id == user_id)
            .order_by(Connect.created_at.desc())
            .all()
        )

    def get_project_connections(self, project_id: UUID) -> List[Connect]:
        return (
            self.db.query(Connect)
            .options(joinedload(Connect.user))
            .filter(Connect.project_id == project_id)
            .order_by(Connect.created_at.desc())
            .all()
        )

    def get_user_connection_stats(self, user_id: UUID) -> Dict[str, int]:
        rows = (
            self.db.query(Connect.connect_status, func.count(Connect.id))
            .filter(Connect.user_id == user_id)
            .group_by(Connect.connect_status)
            .all()
        )
        by_status = dict(rows)
        return {
            "total": sum(by_status.values()),
            "pending": by_status.get(ConnectStatus.PENDING.value, 0),
            "accepted": by_status.get(ConnectStatus.ACCEPTED.value, 0),
            "rejected": by_status.get(ConnectStatus.REJECTED.value, 0),
        }
