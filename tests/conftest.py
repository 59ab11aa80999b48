"""
Pytest configuration and shared fixtures for backend tests.

This module provides test fixtures for:
- Database sessions (in-memory SQLite for fast tests)
- FastAPI test client with settings and identity provider overrides
- Mock external APIs (identity provider, IndexNow) over httpx.MockTransport
- Test data factories
"""

import os
from datetime import datetime
from typing import Dict, Generator

# Must be set before numtrip.infrastructure.persistence.db builds its engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "test")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Import app and models
from numtrip.config import Settings, get_settings
from numtrip.core.dependencies import get_identity_provider
from numtrip.domain.enums import BusinessCategory
from numtrip.infrastructure.external_apis.http_client import build_client
from numtrip.infrastructure.external_apis.supabase_auth_client import SupabaseAuthClient
from numtrip.infrastructure.persistence import models
from numtrip.infrastructure.persistence.db import Base, get_db
from numtrip.main import app

ADMIN_KEY = "test_admin_key"
SUPABASE_URL = "https://auth.numtrip.co"
SUPABASE_ANON_KEY = "anon-test-key"

# bearer token -> identity-provider user payload
IDENTITY_USERS = {
    "owner-token": {
        "id": "user-owner",
        "email": "owner@numtrip.co",
        "user_metadata": {"name": "Owner"},
        "email_confirmed_at": "2024-01-01T00:00:00Z",
    },
    "other-token": {
        "id": "user-other",
        "email": "other@numtrip.co",
        "user_metadata": {"name": "Other"},
    },
}


# ==============================================================================
# DATABASE FIXTURES
# ==============================================================================

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign key support for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Drop all tables after test
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """Create a database session for testing."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ==============================================================================
# SETTINGS AND EXTERNAL API FIXTURES
# ==============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the developer's .env."""
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        SITE_URL="https://numtrip.com",
        ADMIN_KEY=ADMIN_KEY,
        SUPABASE_URL=SUPABASE_URL,
        SUPABASE_ANON_KEY=SUPABASE_ANON_KEY,
        INDEXNOW_KEY=None,
    )


def identity_provider_handler(request: httpx.Request) -> httpx.Response:
    """Fake Supabase auth API backed by IDENTITY_USERS."""
    if request.headers.get("apikey") != SUPABASE_ANON_KEY:
        return httpx.Response(401, json={"msg": "No API key found in request"})

    if request.url.path == "/auth/v1/user":
        token = request.headers.get("authorization", "").removeprefix("Bearer ")
        user = IDENTITY_USERS.get(token)
        if user is None:
            return httpx.Response(401, json={"msg": "invalid JWT"})
        return httpx.Response(200, json=user)

    if request.url.path == "/auth/v1/token":
        return httpx.Response(400, json={"error_description": "Invalid login credentials"})

    return httpx.Response(404, json={"msg": "not found"})


@pytest.fixture
def mock_identity_provider() -> SupabaseAuthClient:
    """Supabase client talking to identity_provider_handler."""
    transport = httpx.MockTransport(identity_provider_handler)
    return SupabaseAuthClient(
        SUPABASE_URL,
        SUPABASE_ANON_KEY,
        client=build_client(transport=transport),
    )


def _override_dependencies(test_db_session, test_settings, identity_provider):
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider


@pytest.fixture(scope="function")
def client(test_db_session, test_settings, mock_identity_provider) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with test database."""
    _override_dependencies(test_db_session, test_settings, mock_identity_provider)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ==============================================================================
# TEST DATA FACTORIES
# ==============================================================================

@pytest.fixture
def sample_business_data() -> Dict:
    """Sample business payload for testing (API field names)."""
    return {
        "name": "Hotel Caribe Azul",
        "description": "Hotel frente al mar",
        "category": "HOTEL",
        "city": "Cartagena",
        "address": "Carrera 1 #2-87, Bocagrande",
        "latitude": 10.3997,
        "longitude": -75.5144,
        "phone": "+57 300 123 4567",
        "email": "reservas@caribeazul.co",
        "whatsapp": "+57 300 123 4567",
        "website": "https://caribeazul.co",
    }


@pytest.fixture
def make_business(test_db_session):
    """Factory persisting a Business row directly."""
    def _make(**overrides) -> models.Business:
        fields = {
            "name": "Hotel Caribe Azul",
            "description": "Hotel frente al mar",
            "category": BusinessCategory.HOTEL,
            "city": "Cartagena",
            "address": "Carrera 1 #2-87, Bocagrande",
            "phone": "+57 300 123 4567",
            "email": "reservas@caribeazul.co",
            "whatsapp": "+57 300 123 4567",
            "verified": False,
            "active": True,
        }
        fields.update(overrides)
        business = models.Business(**fields)
        test_db_session.add(business)
        test_db_session.commit()
        test_db_session.refresh(business)
        return business

    return _make


@pytest.fixture
def make_user(test_db_session):
    """Factory persisting a User row matching an IDENTITY_USERS entry."""
    def _make(token: str = "owner-token") -> models.User:
        payload = IDENTITY_USERS[token]
        user = models.User(id=payload["id"], email=payload["email"], name=payload["user_metadata"]["name"])
        test_db_session.add(user)
        test_db_session.commit()
        return user

    return _make


@pytest.fixture
def make_validation(test_db_session):
    def _make(business, type_, is_correct, created_at=None) -> models.Validation:
        validation = models.Validation(
            business_id=business.id,
            type=type_,
            is_correct=is_correct,
            created_at=created_at or datetime.utcnow(),
        )
        test_db_session.add(validation)
        test_db_session.commit()
        return validation

    return _make


# ==============================================================================
# AUTHENTICATION FIXTURES
# ==============================================================================

@pytest.fixture
def admin_headers():
    """Headers with admin API key for authenticated requests."""
    return {"X-Admin-Key": ADMIN_KEY}


@pytest.fixture
def invalid_admin_headers():
    """Headers with invalid admin API key for testing auth failures."""
    return {"X-Admin-Key": "invalid_key_12345"}


@pytest.fixture
def owner_headers():
    return {"Authorization": "Bearer owner-token"}


@pytest.fixture
def other_headers():
    return {"Authorization": "Bearer other-token"}


# ==============================================================================
# UTILITY FIXTURES
# ==============================================================================

@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# ==============================================================================
# MARKERS
# ==============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: Mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: Mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: Mark test as slow (may take >1 second)"
    )
    config.addinivalue_line(
        "markers", "external_api: Mark test as requiring external API calls"
    )
