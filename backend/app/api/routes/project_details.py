"""
Partnerships, use of funds and tags of projects
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.crud import MUTATIONS, add_crud_routes
from app.core.database import get_db
from app.schemas.project import (PartnershipCreate, PartnershipResponse,
                                 PartnershipUpdate, ProjectTagCreate,
                                 ProjectTagResponse, TagCreate, TagResponse,
                                 TagUpdate, UseOfFundsCreate,
                                 UseOfFundsResponse, UseOfFundsUpdate)
from app.services.project_detail_service import (PartnershipService,
                                                 ProjectTagService, TagService,
                                                 UseOfFundsService)

partnership_router = APIRouter(prefix="/api/v1/partnership", tags=["partnership"])
use_of_funds_router = APIRouter(prefix="/api/v1/use-of-funds", tags=["use-of-funds"])
tag_router = APIRouter(prefix="/api/v1/tag", tags=["tag"])
project_tag_router = APIRouter(prefix="/api/v1/project-tag", tags=["project-tag"])


@partnership_router.get("/project/{project_id}", response_model=List[PartnershipResponse])
async def partnerships_by_project(project_id: UUID, db: Session = Depends(get_db)):
    return PartnershipService(db).find_by_project(project_id)


@use_of_funds_router.get("/project/{project_id}", response_model=List[UseOfFundsResponse])
async def use_of_funds_by_project(project_id: UUID, db: Session = Depends(get_db)):
    return UseOfFundsService(db).find_by_project(project_id)


@project_tag_router.get("/project/{project_id}", response_model=List[ProjectTagResponse])
async def tags_by_project(project_id: UUID, db: Session = Depends(get_db)):
    return ProjectTagService(db).find_by_project(project_id)


add_crud_routes(partnership_router, PartnershipService, PartnershipResponse, PartnershipCreate, PartnershipUpdate)
add_crud_routes(use_of_funds_router, UseOfFundsService, UseOfFundsResponse, UseOfFundsCreate, UseOfFundsUpdate,
                protected=MUTATIONS)
add_crud_routes(tag_router, TagService, TagResponse, TagCreate, TagUpdate)
add_crud_routes(
    project_tag_router,
    ProjectTagService,
    ProjectTagResponse,
    ProjectTagCreate,
    routes=("create", "list", "get", "delete"),
)

routers = (partnership_router, use_of_funds_router, tag_router, project_tag_router)
