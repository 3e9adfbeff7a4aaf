"""
Pytest configuration and fixtures

Tests run against an in-memory SQLite database. The environment is set up
before any application module is imported so core.database builds a SQLite
engine. Tables are created for each test and dropped afterwards, so nothing
leaks between tests.
"""
import os
import sys

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_FORMAT"] = "text"
os.environ.pop("OPENAI_API_KEY", None)
os.environ.pop("SENTRY_DSN", None)

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from uuid import uuid4
from fastapi.testclient import TestClient

from core.config import settings
from core.database import Base, SessionLocal, engine
from core.security import create_access_token, hash_password
import models  # noqa: F401
import services.plan_generation as plan_generation
from services import storage
from main import app


@pytest.fixture(autouse=True)
def _no_openai(monkeypatch):
    """Every test starts without an OpenAI key or cached client."""
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    monkeypatch.setattr(plan_generation, "_openai_client", None)


@pytest.fixture(scope="function")
def db_session():
    """
    Session on a freshly created schema.

    The app's get_db uses the same engine (a single shared in-memory
    connection), so rows created here are visible to requests.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    return TestClient(app)


def make_user(db_session, role="USER", password="password123", **profile):
    return storage.create_user(db_session, {
        "email": f"user_{uuid4().hex[:12]}@example.com",
        "password": hash_password(password),
        "name": "Test User",
        "role": role,
        **profile,
    })


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def test_user(db_session):
    return make_user(db_session)


@pytest.fixture
def other_user(db_session):
    return make_user(db_session)


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, role="ADMIN")


@pytest.fixture
def user_headers(test_user):
    return auth_headers(test_user)


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)
