"""
Shared fixtures.

The application is pointed at an in-memory SQLite database before it is
imported; every TestClient context runs the lifespan hook and therefore
starts from an empty database.
"""
import os
import sys
from typing import Callable, Dict, Generator

import pytest

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["ADMIN_USERNAME"] = "florence"
os.environ["ADMIN_PASSWORD"] = "admin"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["REPORT_TIMEZONE"] = "UTC"

# Add the backend directory to sys.path so the package imports without installation
backend_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if backend_path not in sys.path:
    sys.path.insert(0, backend_path)

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from topic_portal.core.config import settings
from topic_portal.db.database import Database
from topic_portal.main import app

ADMIN_CREDENTIALS = {"username": "florence", "password": "admin"}


@pytest.fixture(scope="function")
def client() -> Generator[TestClient, None, None]:
    """Test client backed by a fresh in-memory database"""
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def admin_headers(client: TestClient) -> Dict[str, str]:
    response = client.post(f"{settings.API_PREFIX}/auth/login", json=ADMIN_CREDENTIALS)
    assert response.status_code == 200
    token = response.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Session on a private in-memory database, discarded after the test"""
    database = Database("sqlite+pysqlite:///:memory:").open()
    session = database.session()
    try:
        yield session
    finally:
        session.close()
        database.close()


@pytest.fixture
def make_payload() -> Callable[..., Dict[str, str]]:
    """Build a valid camelCase submission body, overriding any field"""
    def _make(**overrides: str) -> Dict[str, str]:
        payload = {
            "fullName": "Ada Lovelace",
            "matricNumber": "2021/001",
            "discipline": "linguistics",
            "projectTopic": "Code switching in bilingual classrooms",
        }
        payload.update(overrides)
        return payload
    return _make
