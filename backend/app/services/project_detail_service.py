"""
Project details: partnerships, use of funds and tags
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func

from app.core.errors import BadRequestError, ConflictError, NotFoundError
from app.models.project import (Partnership, Project, ProjectTag, Tag,
                                UseOfFunds)
from app.services.base_crud import BaseCrudService, clean_values


class _ProjectChildService(BaseCrudService):
    """CRUD for rows that belong to a project"""

    def _check_project(self, data: Dict[str, Any]) -> None:
        if "project_id" in data and self.db.get(Project, data["project_id"]) is None:
            raise NotFoundError(f"Project with ID {data['project_id']} not found")

    def create(self, data: Dict[str, Any]):
        data = clean_values(data)
        self._check_project(data)
        return super().create(data)

    def find_by_project(self, project_id: UUID) -> List:
        return self.find_many_by("project_id", project_id)


class PartnershipService(_ProjectChildService):
    model = Partnership
    resource_name = "Partnership"
    search_fields = ("name", "web_site")


class UseOfFundsService(_ProjectChildService):
    """Allocation lines of a project; percentages of one project stay within 100"""

    model = UseOfFunds
    resource_name = "UseOfFunds"
    search_fields = ("title", "description")

    def _allocated(self, project_id: UUID, exclude_id: Optional[UUID] = None) -> float:
        query = self.db.query(func.coalesce(func.sum(UseOfFunds.use_percentage), 0)).filter(
            UseOfFunds.project_id == project_id
        )
        if exclude_id is not None:
            query = query.filter(UseOfFunds.id != exclude_id)
        return float(query.scalar())

    def create(self, data: Dict[str, Any]) -> UseOfFunds:
        data = clean_values(data)
        self._check_project(data)
        if self._allocated(data["project_id"]) + data["use_percentage"] > 100:
            raise BadRequestError("Total use of funds for a project cannot exceed 100%")
        return BaseCrudService.create(self, data)

    def update(self, id: UUID, data: Dict[str, Any]) -> UseOfFunds:
        data = clean_values(data)
        if data.get("use_percentage") is not None:
            current = self.find_one(id)
            if self._allocated(current.project_id, exclude_id=id) + data["use_percentage"] > 100:
                raise BadRequestError("Total use of funds for a project cannot exceed 100%")
        return super().update(id, data)


class TagService(BaseCrudService[Tag]):
    model = Tag
    resource_name = "Tag"
    search_fields = ("name", "description")

    def create(self, data: Dict[str, Any]) -> Tag:
        data = clean_values(data)
        data["name"] = data["name"].strip()
        if self.db.query(Tag.id).filter(func.lower(Tag.name) == data["name"].lower()).first():
            raise ConflictError(f"Tag with name '{data['name']}' already exists")
        return super().create(data)


class ProjectTagService(_ProjectChildService):
    model = ProjectTag
    resource_name = "ProjectTag"

    def create(self, data: Dict[str, Any]) -> ProjectTag:
        data = clean_values(data)
        self._check_project(data)
        if self.db.get(Tag, data["tag_id"]) is None:
            raise NotFoundError(f"Tag with ID {data['tag_id']} not found")
        existing = (
            self.db.query(ProjectTag.id)
            .filter(ProjectTag.project_id == data["project_id"], ProjectTag.tag_id == data["tag_id"])
            .first()
        )
        if existing:
            raise ConflictError("Project already has this tag")
        return BaseCrudService.create(self, data)
