"""
Project, sector and project-side detail models
"""
from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import (Boolean, Column, Date, DateTime, Float, ForeignKey,
                        Integer, String, Text, UniqueConstraint, Uuid)
from sqlalchemy.orm import relationship

from app.core.database import Base


class ProjectStatus(str, Enum):
    """Publication status of a project"""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class ProjectStage(str, Enum):
    """Funding stage of a project"""
    IDEA = "IDEA"
    PROTOTYPE = "PROTOTYPE"
    MVP = "MVP"
    SEED = "SEED"
    SERIES_A = "SERIES_A"
    SERIES_B = "SERIES_B"
    GROWTH = "GROWTH"


class Sector(Base):
    """Business sector"""
    __tablename__ = "sectors"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    projects = relationship("Project", back_populates="sector")


class Project(Base):
    """Startup project seeking investment"""
    __tablename__ = "projects"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    creator_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    sector_id = Column(Uuid(as_uuid=True), ForeignKey("sectors.id"), nullable=False, index=True)
    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)

    title = Column(String(255), nullable=False)
    logo_image = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    problem = Column(Text, nullable=False)
    solution = Column(Text, nullable=False)
    project_location = Column(String(255), nullable=False)
    team_size = Column(Integer, nullable=False)
    customers_number = Column(Integer, nullable=False)
    financial_goal = Column(Float, nullable=False)
    monthly_revenue = Column(Float, nullable=False)
    net_profit = Column(Float, nullable=False, default=0)
    min_percentage = Column(Integer, nullable=False)
    max_percentage = Column(Integer, nullable=False)
    percentage_unit_price = Column(Float, nullable=False)
    runway = Column(Date, nullable=False)
    market_plan = Column(Text, nullable=False)
    business_plan = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=ProjectStatus.DRAFT.value)
    project_stage = Column(String(20), nullable=False, default=ProjectStage.IDEA.value)
    success_probability = Column(Float, nullable=True)
    verified_project = Column(Boolean, nullable=False, default=False)

    # Denormalized counters
    nb_offers = Column(Integer, nullable=False, default=0)
    nb_connects = Column(Integer, nullable=False, default=0)
    nb_likes = Column(Integer, nullable=False, default=0)
    nb_comments = Column(Integer, nullable=False, default=0)
    nb_views = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    creator = relationship("User", back_populates="projects")
    sector = relationship("Sector", back_populates="projects")
    offers = relationship("Offer", back_populates="project", cascade="all, delete-orphan")
    connects = relationship("Connect", back_populates="project", cascade="all, delete-orphan")
    files = relationship("ProjectFile", back_populates="project", cascade="all, delete-orphan")
    videos = relationship("Video", back_populates="project", cascade="all, delete-orphan")
    partnerships = relationship("Partnership", cascade="all, delete-orphan")
    use_of_funds = relationship("UseOfFunds", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Project(id={self.id}, title={self.title}, status={self.status})>"


class Partnership(Base):
    __tablename__ = "partnerships"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    web_site = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class UseOfFunds(Base):
    """Planned allocation of raised money"""
    __tablename__ = "use_of_funds"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    use_percentage = Column(Float, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Interest(Base):
    """A user's declared interest in a sector"""
    __tablename__ = "interests"
    __table_args__ = (UniqueConstraint("user_id", "sector_id", name="uq_interest_user_sector"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    sector_id = Column(Uuid(as_uuid=True), ForeignKey("sectors.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class VisitorProfileProject(Base):
    """Profile or project visit record"""
    __tablename__ = "visitor_profile_projects"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    user_visitor_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(100), unique=True, nullable=False, index=True)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ProjectTag(Base):
    __tablename__ = "project_tags"
    __table_args__ = (UniqueConstraint("project_id", "tag_id", name="uq_project_tag"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    tag_id = Column(Uuid(as_uuid=True), ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
