import os

# Settings are read at import time, so configure them before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ALGORITHM", "HS256")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["OUTBOX_ENABLED"] = "false"
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from unittest.mock import AsyncMock

from sangraha import crud, schemas
from sangraha.config import settings
from sangraha.database import Base, get_db
from sangraha.main import app


# --- Test Database Setup ---
@pytest.fixture(scope="function")
def engine():
    """A fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


# --- Data helpers ---
@pytest.fixture
def make_facility(db_session):
    """Factory for committed facilities; owned by provider-1 unless told otherwise."""
    def _make(owner_id="provider-1", available_capacity=None, **fields):
        fields.setdefault("name", "Sahyadri Cold Storage")
        fields.setdefault("location", "Nashik, Maharashtra")
        fields.setdefault("price_per_kg_per_day", 2.0)
        fields.setdefault("total_capacity", 1000)
        data = schemas.FacilityCreate(**fields)
        facility = crud.add_facility(db_session, data, owner_id=owner_id, available_capacity=available_capacity)
        db_session.commit()
        return facility
    return _make


def create_test_token(user_id: str = "farmer-1", role: str = "farmer") -> str:
    payload = {"sub": user_id, "role": role}
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return f"Bearer {token}"


@pytest.fixture
def auth_headers():
    """Builds headers for any user: auth_headers("provider-2", "provider")."""
    def _headers(user_id: str, role: str = "farmer") -> dict:
        return {"Authorization": create_test_token(user_id, role)}
    return _headers


@pytest.fixture
def farmer_headers():
    return {"Authorization": create_test_token("farmer-1", "farmer")}


@pytest.fixture
def provider_headers():
    return {"Authorization": create_test_token("provider-1", "provider")}


# --- Mocking External Services ---
@pytest.fixture(scope="function", autouse=True)
def mock_background_tasks(mocker):
    """Keeps the outbox poller from trying to reach Kafka."""
    mocker.patch("sangraha.main.run_outbox_poller", new_callable=AsyncMock)


# --- API Test Client Fixture ---
@pytest.fixture(scope="function")
def client(session_factory):
    """A TestClient whose requests each get their own session on the test database."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
