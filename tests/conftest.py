"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from shelflife.api.dependencies import get_llm_service, get_trigger_debouncer
from shelflife.database import Base, get_db, make_engine
from shelflife.main import app
from shelflife.services.llm import NotConfiguredError
from shelflife.services.trigger import TriggerDebouncer


class AuthHeaders(dict):
    """Dict subclass that also stores user_id."""

    def __init__(self, *args, user_id: int | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/shelflife", "/shelflife_test")
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = make_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def today():
    """Today's date as the service sees it (UTC calendar)."""
    from shelflife.services.freshness import today_in_timezone

    return today_in_timezone("UTC")


@pytest.fixture
def mock_llm():
    """LLM service double; fails as unconfigured unless a test sets a return value."""
    llm = MagicMock()
    llm.generate_json = AsyncMock(side_effect=NotConfiguredError("no key in tests"))
    return llm


@pytest.fixture(scope="function")
def client(db, mock_llm):
    """Create a test client with database, LLM and debouncer overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    debouncer = TriggerDebouncer()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_llm_service] = lambda: mock_llm
    app.dependency_overrides[get_trigger_debouncer] = lambda: debouncer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "test@example.com", "password": "testpass123", "name": "Test User"},
    )
    assert response.status_code == 201
    data = response.json()
    token = data["access_token"]
    user_id = data["user"]["id"]

    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user_id)


@pytest.fixture
def generated_recipes_payload():
    """A well-formed generation API answer with four recipes."""
    return [
        {
            "recipeName": f"Recipe {i}",
            "description": f"Description {i}",
            "servingSize": "Serves 2",
            "ingredients": ["Milk", "Spinach", "Salt"],
            "instructions": ["Mix", "Cook", "Serve"],
        }
        for i in range(1, 5)
    ]
