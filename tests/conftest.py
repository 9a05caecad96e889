import os
import tempfile
import uuid

import pytest

# Settings are read when the application is imported, so configure first.
_db_dir = tempfile.mkdtemp(prefix="order-backend-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["JWT_ISSUER"] = "OrderBackend"
os.environ["JWT_AUDIENCE"] = "OrderBackendClients"
os.environ["JWT_EXPIRATION_MINUTES"] = "60"
os.environ["LOG_LEVEL"] = "INFO"

from fastapi.testclient import TestClient  # noqa: E402


@pytest.fixture(scope="session")
def client():
    from app.main import app

    with TestClient(app) as c:
        yield c


def _unique(prefix="user"):
    return f"{prefix}_{uuid.uuid4().hex[:10]}"


@pytest.fixture
def registered_user(client):
    username = _unique()
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "passwordHash": "P@ssw0rd1",
    }
    r = client.post("/api/auth/register", json=payload)
    assert r.status_code == 200, r.text
    data = r.json()
    return {
        "username": username,
        "email": payload["email"],
        "password": payload["passwordHash"],
        "id": data["user"]["id"],
        "token": data["token"],
    }


@pytest.fixture
def auth_headers(registered_user):
    return {"Authorization": f"Bearer {registered_user['token']}"}


@pytest.fixture
def unique_name():
    return _unique
