"""
Standard CRUD endpoints over a BaseCrudService
"""
from typing import Callable, List, Optional, Sequence, Type
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import require_token
from app.services.base_crud import BaseCrudService

ALL_ROUTES = ("create", "list", "search", "paginate", "get", "update", "delete")
MUTATIONS = ("create", "update", "delete")


def add_crud_routes(
    router: APIRouter,
    service_factory: Callable[[Session], BaseCrudService],
    response_model: Type[BaseModel],
    create_model: Optional[Type[BaseModel]] = None,
    update_model: Optional[Type[BaseModel]] = None,
    routes: Sequence[str] = ALL_ROUTES,
    protected: Sequence[str] = (),
) -> APIRouter:
    """
    Register create/list/search/paginate/get/update/delete on a router

    ``search`` and ``paginate`` are registered before ``/{id}`` so the
    literal paths win. Routes whose model is missing are skipped. Routes
    named in ``protected`` require a bearer token.
    """
    def guard(name: str) -> list:
        return [Depends(require_token)] if name in protected else []

    if "create" in routes and create_model is not None:
        @router.post(
            "", response_model=response_model, status_code=status.HTTP_201_CREATED, dependencies=guard("create")
        )
        async def create(body: create_model, db: Session = Depends(get_db)):
            return service_factory(db).create(body.model_dump())

    if "list" in routes:
        @router.get("", response_model=List[response_model])
        async def find_all(db: Session = Depends(get_db)):
            return service_factory(db).find_all()

    if "search" in routes:
        @router.get("/search", response_model=List[response_model])
        async def search(q: Optional[str] = Query(None), db: Session = Depends(get_db)):
            return service_factory(db).search(q)

    if "paginate" in routes:
        @router.get("/paginate", response_model=List[response_model])
        async def paginate(
            skip: int = Query(0, ge=0),
            take: int = Query(10, ge=1, le=100),
            db: Session = Depends(get_db),
        ):
            return service_factory(db).paginate(skip, take)

    if "get" in routes:
        @router.get("/{id}", response_model=response_model)
        async def find_one(id: UUID, db: Session = Depends(get_db)):
            return service_factory(db).find_one(id)

    if "update" in routes and update_model is not None:
        @router.patch("/{id}", response_model=response_model, dependencies=guard("update"))
        async def update(id: UUID, body: update_model, db: Session = Depends(get_db)):
            return service_factory(db).update(id, body.model_dump(exclude_unset=True))

    if "delete" in routes:
        @router.delete("/{id}", response_model=response_model, dependencies=guard("delete"))
        async def remove(id: UUID, db: Session = Depends(get_db)):
            return service_factory(db).remove(id)

    return router
