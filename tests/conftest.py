"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database; API tests talk to the
FastAPI app through ``TestClient`` with ``get_db`` pointed at that database.
"""

import os
import tempfile
from datetime import date, timedelta

# Configure the app before anything under app/ is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["REDIS_URL"] = ""
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="hall-booking-logs-")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.dependencies import get_db
from app.core.jwt import token_for_user
from app.core.security import hash_password
from app.db.base import Base
from app.main import app
from app.models.enums import UserRole
from app.models.hall import Hall
from app.models.user import User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------
# FACTORIES
# ---------------------------------------------------------------------
def make_user(db, name="Customer", email="customer@example.com", role=UserRole.CUSTOMER, password="secret123"):
    user = User(name=name, email=email, password_hash=hash_password(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_hall(db, **overrides):
    data = {
        "name": "Grand Ballroom",
        "description": "A large wedding hall",
        "capacity": 100,
        "price_per_day": 5000.0,
        "location": "Colombo",
        "amenities": ["Parking", "Catering"],
        "images": [],
        "availability": True,
        "deleted": False,
    }
    data.update(overrides)
    hall = Hall(**data)
    db.add(hall)
    db.commit()
    db.refresh(hall)
    return hall


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {token_for_user(user)}"}


@pytest.fixture
def customer(db):
    return make_user(db)


@pytest.fixture
def other_customer(db):
    return make_user(db, name="Other", email="other@example.com")


@pytest.fixture
def admin(db):
    return make_user(db, name="Admin", email="admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def hall(db):
    return make_hall(db)


@pytest.fixture
def event_day():
    """A date far enough ahead to always be bookable."""
    return date.today() + timedelta(days=30)
