import os
import sys
from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient

# Add the parent directory to the path so we can import our modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.auth import JWTManager, PasswordManager
from core.database import create_db_and_tables, dispose_engine, get_session_factory, init_engine

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


@pytest.fixture
def test_env(tmp_path, monkeypatch):
    """Point the application at a throwaway SQLite database."""
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_SECRET)
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return database_url


@pytest.fixture
def test_client(test_env) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app with a fresh database."""
    from main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def jwt_manager():
    return JWTManager(secret_key=TEST_SECRET, expires_in=3600)


@pytest.fixture
def password_manager():
    return PasswordManager(rounds=4)


@pytest.fixture
async def db_session(tmp_path):
    """Async session bound to a fresh SQLite database."""
    init_engine(f"sqlite+aiosqlite:///{tmp_path / 'service.db'}")
    await create_db_and_tables()
    async with get_session_factory()() as session:
        yield session
    await dispose_engine()


def _register_user(
    client: TestClient,
    name: str = "Jane Doe",
    email: str = "jane@example.com",
    password: str = "secret1",
) -> str:
    """Register a user through the API and return the session token."""
    response = client.post(
        "/api/users", json={"name": name, "email": email, "password": password}
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture
def auth_headers():
    def _headers(token: str) -> Dict[str, str]:
        return {"x-auth-token": token}

    return _headers


@pytest.fixture
def register(test_client):
    """Register users against the test client; returns their tokens."""

    def _register(**kwargs) -> str:
        return _register_user(test_client, **kwargs)

    return _register


@pytest.fixture
def user_token(register) -> str:
    return register()


@pytest.fixture
def other_token(register) -> str:
    return register(name="John Roe", email="john@example.com")


@pytest.fixture
def sample_profile_data():
    """Sample profile form data for testing."""
    return {
        "status": "Developer",
        "skills": "python, fastapi , ,sql",
        "company": "Acme",
        "location": "Berlin",
        "bio": "Writes code",
        "githubusername": "janedoe",
        "twitter": "https://twitter.com/janedoe",
    }
