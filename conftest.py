"""
Shared fixtures: an in-memory SQLite store with the same schema (including
the partial unique index on open shifts), seeded facilities and staff, and a
TestClient whose identity can be switched per test.
"""
import os

# Must be set before db.session builds its engine
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import models  # noqa: F401
from core.deps import get_current_user
from db.session import get_session
from main import app
from models.organization import Organization
from models.user import User, UserRole
from utils.view_cache import clear_cache

HOSPITAL = {"latitude": 12.9716, "longitude": 77.5946, "radius_meters": 200.0}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(autouse=True)
def _fresh_view_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def organization(session):
    org = Organization(id="org1", name="City General Hospital", **HOSPITAL)
    session.add(org)
    session.commit()
    session.refresh(org)
    return org


@pytest.fixture
def other_organization(session):
    org = Organization(
        id="org2", name="Downtown Clinic", latitude=12.9352, longitude=77.6245, radius_meters=100.0
    )
    session.add(org)
    session.commit()
    session.refresh(org)
    return org


def _make_user(session, **fields) -> User:
    user = User(**fields)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def worker(session, organization):
    return _make_user(
        session,
        id="user1",
        email="alice.johnson@citygeneral.com",
        name="Alice Johnson",
        role=UserRole.WORKER,
        organization_id=organization.id,
    )


@pytest.fixture
def coworker(session, organization):
    return _make_user(
        session,
        id="user3",
        email="sarah.davis@citygeneral.com",
        name="Sarah Davis",
        role=UserRole.WORKER,
        organization_id=organization.id,
    )


@pytest.fixture
def manager(session, organization):
    return _make_user(
        session,
        id="user2",
        email="robert.smith@citygeneral.com",
        name="Dr. Robert Smith",
        role=UserRole.MANAGER,
        organization_id=organization.id,
    )


@pytest.fixture
def admin(session):
    return _make_user(
        session,
        id="admin1",
        email="admin@careshift.example.org",
        name="Platform Admin",
        role=UserRole.ADMIN,
    )


@pytest.fixture
def client(session):
    """TestClient acting as whichever user was last passed to client.login()."""
    identity = {"user_id": None}

    def _get_session():
        yield session

    def _get_current_user():
        return session.get(User, identity["user_id"])

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_current_user] = _get_current_user

    test_client = TestClient(app)

    def login(user: User):
        identity["user_id"] = user.id

    test_client.login = login
    yield test_client
    app.dependency_overrides.clear()
