"""
Offer and connection API routes
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.crud import MUTATIONS, add_crud_routes
from app.core.database import get_db
from app.schemas.project import (ConnectCreate, ConnectionStats,
                                 ConnectResponse, ConnectUpdate,
                                 ConnectWithProject, ConnectWithUser,
                                 OfferCreate, OfferResponse, OfferUpdate,
                                 OfferWithProject, OfferWithUser,
                                 ProjectOfferStats, UserOfferStats)
from app.services.connect_service import ConnectService
from app.services.offer_service import OfferService

offer_router = APIRouter(prefix="/api/v1/offer", tags=["offer"])
connect_router = APIRouter(prefix="/api/v1/connects", tags=["connects"])


@offer_router.get("/user/{user_id}", response_model=List[OfferWithProject])
async def offers_of_user(user_id: UUID, db: Session = Depends(get_db)):
    return OfferService(db).get_user_offers_with_projects(user_id)


@offer_router.get("/user/{user_id}/stats", response_model=UserOfferStats)
async def offer_stats_of_user(user_id: UUID, db: Session = Depends(get_db)):
    return OfferService(db).get_user_offer_stats(user_id)


@offer_router.get("/project/{project_id}", response_model=List[OfferWithUser])
async def offers_of_project(project_id: UUID, db: Session = Depends(get_db)):
    return OfferService(db).get_project_offers(project_id)


@offer_router.get("/project/{project_id}/stats", response_model=ProjectOfferStats)
async def offer_stats_of_project(project_id: UUID, db: Session = Depends(get_db)):
    return OfferService(db).get_project_offer_stats(project_id)


@connect_router.get("/user/{user_id}", response_model=List[ConnectWithProject])
async def connections_of_user(user_id: UUID, db: Session = Depends(get_db)):
    return ConnectService(db).get_user_connections_with_projects(user_id)


@connect_router.get("/user/{user_id}/stats", response_model=ConnectionStats)
async def connection_stats_of_user(user_id: UUID, db: Session = Depends(get_db)):
    return ConnectService(db).get_user_connection_stats(user_id)


@connect_router.get("/project/{project_id}", response_model=List[ConnectWithUser])
async def connections_of_project(project_id: UUID, db: Session = Depends(get_db)):
    return ConnectService(db).get_project_connections(project_id)


add_crud_routes(offer_router, OfferService, OfferResponse, OfferCreate, OfferUpdate)
add_crud_routes(connect_router, ConnectService, ConnectResponse, ConnectCreate, ConnectUpdate, protected=MUTATIONS)

routers = (offer_router, connect_router)
