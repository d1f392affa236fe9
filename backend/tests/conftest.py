"""Pytest configuration and fixtures."""

import os

# Keep the background refresh out of every app started by the tests.
os.environ.setdefault("PRICE_REFRESH_ENABLED", "false")

import pytest
from argon2 import PasswordHasher
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.dependencies import get_price_service
from database import Base, get_db
from main import app
# Pytest fixtures - imported to make them available to tests
from tests.fixtures import (  # noqa: F401
    btc_asset,
    btc_holding,
    eth_asset,
    other_user,
    user,
)
from tests.fixtures.mocks import MockPriceService


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Hash passwords with minimal Argon2 costs so auth tests stay fast."""
    monkeypatch.setattr(
        "services.user_service.password_hasher",
        PasswordHasher(time_cost=1, memory_cost=8, parallelism=1),
    )


@pytest.fixture(name="db")
def db_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="file_session_factory")
def file_session_factory_fixture(tmp_path):
    """A sessionmaker on a file-backed SQLite database, usable from threads."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'wallet.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        engine.dispose()


@pytest.fixture(name="mock_price_service")
def mock_price_service_fixture():
    """A price service with fixed BTC/ETH prices."""
    return MockPriceService(
        current={"BTC": Decimal("95000.00"), "ETH": Decimal("3500.00")},
        history={"BTC": [Decimal("90000.00")], "ETH": [Decimal("3000.00")]},
    )


@pytest.fixture(name="client")
def client_fixture(db, mock_price_service):
    """Create a test client with the test database and a mock price service."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_price_service] = lambda: mock_price_service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
