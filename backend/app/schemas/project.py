"""
Project, sector, offer and connection schemas
"""
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.models.offer import ConnectStatus, OfferStatus
from app.models.project import ProjectStage, ProjectStatus
from app.schemas.common import ORMModel, strip_required
from app.schemas.user import UserSummary


class SectorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return strip_required(v)


class SectorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None


class SectorResponse(ORMModel):
    id: UUID
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SectorDetailed(BaseModel):
    sector: SectorResponse
    project_count: int
    interested_users_count: int


class ProjectCreate(BaseModel):
    """Project creation request"""
    creator_id: UUID
    sector_id: UUID
    team_id: Optional[UUID] = None
    title: str = Field(..., min_length=1, max_length=255)
    logo_image: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1)
    problem: str = Field(..., min_length=1)
    solution: str = Field(..., min_length=1)
    project_location: str = Field(..., min_length=1, max_length=255)
    team_size: int = Field(..., ge=1)
    customers_number: int = Field(..., ge=0)
    financial_goal: float = Field(..., ge=0)
    monthly_revenue: float = Field(..., ge=0)
    net_profit: float = 0
    min_percentage: int = Field(..., ge=0, le=100)
    max_percentage: int = Field(..., ge=0, le=100)
    percentage_unit_price: float = Field(..., ge=0)
    runway: date
    market_plan: str = Field(..., min_length=1)
    business_plan: str = Field(..., min_length=1)
    status: ProjectStatus = ProjectStatus.DRAFT
    project_stage: ProjectStage = ProjectStage.IDEA
    success_probability: Optional[float] = Field(None, ge=0, le=1)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return strip_required(v)


class ProjectUpdate(BaseModel):
    sector_id: Optional[UUID] = None
    team_id: Optional[UUID] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    logo_image: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None
    problem: Optional[str] = None
    solution: Optional[str] = None
    project_location: Optional[str] = Field(None, max_length=255)
    team_size: Optional[int] = Field(None, ge=1)
    customers_number: Optional[int] = Field(None, ge=0)
    financial_goal: Optional[float] = Field(None, ge=0)
    monthly_revenue: Optional[float] = Field(None, ge=0)
    net_profit: Optional[float] = None
    min_percentage: Optional[int] = Field(None, ge=0, le=100)
    max_percentage: Optional[int] = Field(None, ge=0, le=100)
    percentage_unit_price: Optional[float] = Field(None, ge=0)
    runway: Optional[date] = None
    market_plan: Optional[str] = None
    business_plan: Optional[str] = None
    status: Optional[ProjectStatus] = None
    project_stage: Optional[ProjectStage] = None
    success_probability: Optional[float] = Field(None, ge=0, le=1)
    verified_project: Optional[bool] = None


class ProjectResponse(ORMModel):
    id: UUID
    creator_id: UUID
    sector_id: UUID
    team_id: Optional[UUID] = None
    title: str
    logo_image: str
    description: str
    problem: str
    solution: str
    project_location: str
    team_size: int
    customers_number: int
    financial_goal: float
    monthly_revenue: float
    net_profit: float
    min_percentage: int
    max_percentage: int
    percentage_unit_price: float
    runway: date
    market_plan: str
    business_plan: str
    status: str
    project_stage: str
    success_probability: Optional[float] = None
    verified_project: bool
    nb_offers: int
    nb_connects: int
    nb_likes: int
    nb_comments: int
    nb_views: int
    created_at: datetime
    updated_at: datetime


class PartnershipCreate(BaseModel):
    project_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    web_site: Optional[str] = Field(None, max_length=500)


class PartnershipUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    web_site: Optional[str] = Field(None, max_length=500)


class PartnershipResponse(ORMModel):
    id: UUID
    project_id: UUID
    name: str
    web_site: Optional[str] = None
    created_at: datetime


class UseOfFundsCreate(BaseModel):
    project_id: UUID
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    use_percentage: float = Field(..., ge=0, le=100)


class UseOfFundsUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    use_percentage: Optional[float] = Field(None, ge=0, le=100)


class UseOfFundsResponse(ORMModel):
    id: UUID
    project_id: UUID
    title: str
    description: Optional[str] = None
    use_percentage: float
    created_at: datetime


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return strip_required(v)


class TagUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)


class TagResponse(ORMModel):
    id: UUID
    name: str
    description: Optional[str] = None
    created_at: datetime


class ProjectTagCreate(BaseModel):
    project_id: UUID
    tag_id: UUID


class ProjectTagResponse(ORMModel):
    id: UUID
    project_id: UUID
    tag_id: UUID
    created_at: datetime


class ProjectDetail(ProjectResponse):
    """Project with its sector, creator and child collections"""
    sector: Optional[SectorResponse] = None
    creator: Optional[UserSummary] = None
    partnerships: List[PartnershipResponse] = []
    use_of_funds: List[UseOfFundsResponse] = []


# Offers and connections

class OfferCreate(BaseModel):
    user_id: UUID
    project_id: UUID
    amount: float = Field(..., gt=0)
    equity: float = Field(..., gt=0, le=100)
    offer_description: Optional[str] = None
    status: OfferStatus = OfferStatus.PENDING


class OfferUpdate(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    equity: Optional[float] = Field(None, gt=0, le=100)
    offer_description: Optional[str] = None
    status: Optional[OfferStatus] = None
    response_at: Optional[datetime] = None


class OfferResponse(ORMModel):
    id: UUID
    user_id: UUID
    project_id: UUID
    amount: float
    equity: float
    offer_description: Optional[str] = None
    status: str
    response_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class OfferWithProject(OfferResponse):
    project: Optional[ProjectResponse] = None


class OfferWithUser(OfferResponse):
    user: Optional[UserSummary] = None


class UserOfferStats(BaseModel):
    total_offers: int
    pending_offers: int
    accepted_offers: int
    rejected_offers: int
    total_amount: float
    average_amount: float


class ProjectOfferStats(BaseModel):
    total_offers: int
    total_amount: float
    average_amount: float
    highest_offer: float


class ConnectCreate(BaseModel):
    user_id: UUID
    project_id: UUID
    connect_status: ConnectStatus = ConnectStatus.PENDING


class ConnectUpdate(BaseModel):
    connect_status: Optional[ConnectStatus] = None


class ConnectResponse(ORMModel):
    id: UUID
    user_id: UUID
    project_id: UUID
    connect_status: str
    created_at: datetime
    updated_at: datetime


class ConnectWithProject(ConnectResponse):
    project: Optional[ProjectResponse] = None


class ConnectWithUser(ConnectResponse):
    user: Optional[UserSummary] = None


class ConnectionStats(BaseModel):
    total: int
    pending: int
    accepted: int
    rejected: int
