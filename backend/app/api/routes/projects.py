"""
Project and sector API routes
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.crud import MUTATIONS, add_crud_routes
from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.core.security import CurrentUser, require_project_owner
from app.schemas.project import (ProjectCreate, ProjectDetail,
                                 ProjectResponse, ProjectUpdate, SectorCreate,
                                 SectorDetailed, SectorResponse, SectorUpdate)
from app.services.project_service import ProjectService, SectorService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])
sector_router = APIRouter(prefix="/api/v1/sector", tags=["sector"])


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(body: ProjectCreate, db: Session = Depends(get_db)):
    return ProjectService(db).create(body.model_dump())


@router.get("", response_model=List[ProjectResponse])
async def list_projects(db: Session = Depends(get_db)):
    return ProjectService(db).find_all()


@router.get("/search", response_model=List[ProjectResponse])
async def search_projects(q: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return ProjectService(db).search(q)


@router.get("/paginate", response_model=List[ProjectResponse])
async def paginate_projects(
    skip: int = Query(0, ge=0),
    take: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return ProjectService(db).paginate(skip, take)


@router.get("/user/{user_id}", response_model=List[ProjectResponse])
async def projects_by_creator(user_id: UUID, db: Session = Depends(get_db)):
    return ProjectService(db).find_by_creator(user_id)


@router.get("/{id}", response_model=ProjectDetail)
async def get_project(id: UUID, db: Session = Depends(get_db)):
    """Project with sector, creator, partnerships and use of funds"""
    return ProjectService(db).find_one_with_relations(id)


@router.patch("/{id}", response_model=ProjectResponse)
async def update_project(
    id: UUID,
    body: ProjectUpdate,
    current_user: CurrentUser = Depends(require_project_owner),
    db: Session = Depends(get_db),
):
    return ProjectService(db).update(id, body.model_dump(exclude_unset=True))


@router.delete("/{id}", response_model=ProjectResponse)
async def delete_project(
    id: UUID,
    current_user: CurrentUser = Depends(require_project_owner),
    db: Session = Depends(get_db),
):
    logger.info(f"Project {id} deleted by owner {current_user.id}")
    return ProjectService(db).remove(id)


@sector_router.get("/{id}/detailed", response_model=SectorDetailed)
async def get_sector_detailed(id: UUID, db: Session = Depends(get_db)):
    return SectorService(db).find_one_detailed(id)


add_crud_routes(sector_router, SectorService, SectorResponse, SectorCreate, SectorUpdate, protected=MUTATIONS)
