"""
Projects and sectors
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from app.core.errors import ConflictError, NotFoundError
from app.core.logging_config import LoggingConfig
from app.models.project import Interest, Project, Sector
from app.models.user import User
from app.services.base_crud import BaseCrudService, clean_values

logger = LoggingConfig.get_logger(__name__)


class ProjectService(BaseCrudService[Project]):
    """Service for startup projects"""

    model = Project
    resource_name = "Project"
    search_fields = ("title", "description", "problem", "solution", "project_location")
    user_field = "creator_id"

    def _check_references(self, data: Dict[str, Any]) -> None:
        if "creator_id" in data and self.db.get(User, data["creator_id"]) is None:
            raise NotFoundError(f"User with ID {data['creator_id']} not found")
        if "sector_id" in data and self.db.get(Sector, data["sector_id"]) is None:
            raise NotFoundError(f"Sector with ID {data['sector_id']} not found")

    def create(self, data: Dict[str, Any]) -> Project:
        """
        Create a project

        Raises:
            NotFoundError: If the creator or sector does not exist
        """
        data = clean_values(data)
        self._check_references(data)
        return super().create(data)

    def update(self, id: UUID, data: Dict[str, Any]) -> Project:
        data = clean_values(data)
        self._check_references(data)
        return super().update(id, data)

    def find_one_with_relations(self, id: UUID) -> Project:
        project = (
            self.db.query(Project)
            .options(joinedload(Project.sector), joinedload(Project.creator))
            .filter(Project.id == id)
            .first()
        )
        if project is None:
            raise self.not_found(id)
        return project

    def find_by_creator(self, creator_id: UUID) -> List[Project]:
        return (
            self.db.query(Project)
            .filter(Project.creator_id == creator_id)
            .order_by(Project.created_at.desc())
            .all()
        )


class SectorService(BaseCrudService[Sector]):
    """Service for business sectors"""

    model = Sector
    resource_name = "Sector"
    search_fields = ("name", "description")

    def _ensure_unique_name(self, name: str, exclude_id: Optional[UUID] = None) -> str:
        name = name.strip()
        query = self.db.query(Sector.id).filter(func.lower(Sector.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Sector.id != exclude_id)
        if query.first() is not None:
            raise ConflictError(f"Sector with name '{name}' already exists")
        return name

    def create(self, data: Dict[str, Any]) -> Sector:
        data = clean_values(data)
        data["name"] = self._ensure_unique_name(data["name"])
        return super().create(data)

    def update(self, id: UUID, data: Dict[str, Any]) -> Sector:
        data = clean_values(data)
        if data.get("name") is not None:
            data["name"] = self._ensure_unique_name(data["name"], exclude_id=id)
        return super().update(id, data)

    def find_one_detailed(self, id: UUID) -> Dict[str, Any]:
        """Sector with its project and interested-user counts"""
        sector = self.find_one(id)
        project_count = self.db.query(func.count(Project.id)).filter(Project.sector_id == id).scalar() or 0
        interest_count = self.db.query(func.count(Interest.id)).filter(Interest.sector_id == id).scalar() or 0
        return {
            "sector": sector,
            "project_count": project_count,
            "interested_users_count": interest_count,
        }
