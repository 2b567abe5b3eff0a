"""
Root conftest.py for pytest configuration and shared fixtures.
"""
import os
import random
from datetime import UTC, datetime, timedelta
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment BEFORE importing any app code
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "true"

# The shared app instance would otherwise throttle the whole suite
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTH_ENABLED"] = "false"

# Set JWT secret for auth tests (32+ chars required)
os.environ["JWT_SECRET_KEY"] = "test_secret_key_for_testing_purposes_only_do_not_use_in_production"


class FakeClock:
    """Deterministic clock; every call advances by one millisecond."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 3, 5, 9, 7, 2, 45000, tzinfo=UTC)

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(milliseconds=1)
        return current


@pytest.fixture(scope="function")
def test_db_engine():
    """
    Create a test database engine using SQLite in-memory.
    Function-scoped so every test starts from empty option tables.
    """
    from services.options.app.db import Base
    # Registers one table per option kind on Base.metadata
    from services.options.app.models import options  # noqa: F401

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Required for SQLite in-memory
        echo=False,
    )

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_db_engine) -> Generator[Session, None, None]:
    """
    Create a new database session for a test.

    The service commits and rolls back on its own, so the session is bound
    straight to the engine; isolation comes from the per-test engine.
    """
    SessionLocal = sessionmaker(bind=test_db_engine, expire_on_commit=False)
    session = SessionLocal()

    yield session

    session.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture(scope="function")
def client(test_db_engine, db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a FastAPI test client with database overrides.
    """
    # Must import here to ensure test environment is set
    import services.options.app.db as db_module
    from services.options.app.main import app
    from services.options.app.api.deps import get_db_session

    # Override the global engine and sessionmaker
    original_engine = db_module._engine
    original_sessionmaker = db_module._SessionLocal

    db_module._engine = test_db_engine
    db_module._SessionLocal = sessionmaker(bind=test_db_engine, expire_on_commit=False)

    # Override the database session dependency
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close, managed by db_session fixture

    app.dependency_overrides[get_db_session] = override_get_db

    with TestClient(app) as test_client:
        yield test_client
        # Close the session before app shutdown disposes the shared test engine
        db_session.close()

    # Restore original state
    app.dependency_overrides.clear()
    db_module._engine = original_engine
    db_module._SessionLocal = original_sessionmaker


@pytest.fixture
def sample_option_data():
    """Sample payload for option create tests."""
    return {"name": "Open tender", "description": "Open competitive tendering"}


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables and cached settings after each test."""
    from services.options.app.core.config import get_settings

    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
    get_settings.cache_clear()
