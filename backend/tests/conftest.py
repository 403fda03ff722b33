"""
Pytest configuration and fixtures
"""
import os
import sys
from datetime import date
from pathlib import Path

import pytest
from sqlalchemy.orm import Session

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Settings are read from the environment; pin them before any app import
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["TOKEN_CLEANUP_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("EMAIL_HOST", None)

from app.core.config import get_settings  # noqa: E402
from app.core.database import Base, get_db, get_engine, get_session_local  # noqa: E402
from app.core.security import ACCESS_TOKEN, create_token, hash_password  # noqa: E402
from app.models.post import Post, Video  # noqa: E402
from app.models.project import Project, Sector  # noqa: E402
from app.models.user import User  # noqa: E402

TEST_PASSWORD = "Str0ng!Pass"


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch) -> Path:
    """Point every upload directory at a per-test temporary root"""
    root = tmp_path / "uploads"
    monkeypatch.setenv("UPLOAD_DIRECTORY", str(root))
    monkeypatch.setenv("PROJECT_FILES_DIR", str(root / "ProjectFiles"))
    get_settings.cache_clear()
    yield root
    get_settings.cache_clear()


@pytest.fixture(scope="function")
def db() -> Session:
    """Create a database session on a fresh schema"""
    import app.models  # noqa: F401

    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = get_session_local()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session):
    """Create test client with database dependency override"""
    from fastapi.testclient import TestClient

    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db: Session):
    """Factory for verified users"""
    counter = {"n": 0}

    def _make(**overrides) -> User:
        counter["n"] += 1
        values = {
            "name": f"User {counter['n']}",
            "email": f"user{counter['n']}@venturelink.io",
            "password": hash_password(TEST_PASSWORD),
            "is_email_verified": True,
        }
        values.update(overrides)
        user = User(**values)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def sector(db: Session) -> Sector:
    sector = Sector(name="Fintech", description="Financial technology")
    db.add(sector)
    db.commit()
    db.refresh(sector)
    return sector


def project_payload(creator_id, sector_id, **overrides) -> dict:
    values = {
        "creator_id": creator_id,
        "sector_id": sector_id,
        "title": "Solar Grid",
        "logo_image": "/uploads/logo.png",
        "description": "Community solar micro-grids",
        "problem": "Unreliable power",
        "solution": "Shared solar storage",
        "project_location": "Tunis",
        "team_size": 4,
        "customers_number": 120,
        "financial_goal": 250000.0,
        "monthly_revenue": 8000.0,
        "min_percentage": 5,
        "max_percentage": 20,
        "percentage_unit_price": 12500.0,
        "runway": date(2027, 6, 30),
        "market_plan": "Municipal partnerships",
        "business_plan": "Subscription per household",
    }
    values.update(overrides)
    return values


@pytest.fixture
def make_project(db: Session, make_user, sector):
    """Factory for projects; creates an owner when none is given"""

    def _make(creator: User = None, **overrides) -> Project:
        creator = creator or make_user()
        project = Project(**project_payload(creator.id, sector.id, **overrides))
        db.add(project)
        db.commit()
        db.refresh(project)
        return project

    return _make


@pytest.fixture
def make_post(db: Session):
    def _make(user: User, **overrides) -> Post:
        values = {"user_id": user.id, "title": "Update", "content": "We shipped the pilot"}
        values.update(overrides)
        post = Post(**values)
        db.add(post)
        db.commit()
        db.refresh(post)
        return post

    return _make


@pytest.fixture
def make_video(db: Session):
    def _make(project: Project, **overrides) -> Video:
        values = {"project_id": project.id, "title": "Pitch", "video_url": "/uploads/videos/pitch.mp4"}
        values.update(overrides)
        video = Video(**values)
        db.add(video)
        db.commit()
        db.refresh(video)
        return video

    return _make


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a user"""

    def _headers(user: User, token_type: str = ACCESS_TOKEN) -> dict:
        return {"Authorization": f"Bearer {create_token(user, token_type)}"}

    return _headers
