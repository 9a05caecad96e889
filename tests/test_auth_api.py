from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from jose import jwt

from app.auth import ALGORITHM, create_token
from app.config import get_settings


def _register(client, username, email, password="secret1"):
    return client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "passwordHash": password},
    )


def test_register_then_register_same_username_again(client):
    r = _register(client, "alice", "a@x.com")
    assert r.status_code == 200
    data = r.json()
    assert data["message"] == "User registered successfully"
    assert data["token"]
    assert data["user"]["username"] == "alice"
    assert data["user"]["email"] == "a@x.com"
    assert data["user"]["id"]
    assert "passwordHash" not in data["user"] and "password_hash" not in data["user"]

    again = _register(client, "alice", "other@x.com")
    assert again.status_code == 400
    assert again.json() == {"message": "Username already exists"}


def test_duplicate_username_creates_no_record(client, unique_name):
    taken = unique_name()
    assert _register(client, taken, f"{taken}@example.com").status_code == 200

    fresh_email = f"{unique_name()}@example.com"
    assert _register(client, taken, fresh_email).status_code == 400

    # The rejected attempt must not have claimed the email.
    r = _register(client, unique_name(), fresh_email)
    assert r.status_code == 200


def test_duplicate_email(client, registered_user, unique_name):
    r = _register(client, unique_name(), registered_user["email"])
    assert r.status_code == 400
    assert r.json() == {"message": "Email already exists"}


def test_register_accepts_snake_case_password_field(client, unique_name):
    username = unique_name()
    r = client.post(
        "/api/auth/register",
        json={"username": username, "email": f"{username}@example.com", "password_hash": "secret1"},
    )
    assert r.status_code == 200


def test_register_validates_fields(client, unique_name):
    r = client.post("/api/auth/register", json={"username": unique_name(), "email": "x@example.com"})
    assert r.status_code == 422

    r = client.post(
        "/api/auth/register",
        json={"username": "u" * 51, "email": "long@example.com", "passwordHash": "secret1"},
    )
    assert r.status_code == 422


def test_login_after_register(client, registered_user):
    r = client.post(
        "/api/auth/login",
        json={"username": registered_user["username"], "password": registered_user["password"]},
    )
    assert r.status_code == 200
    data = r.json()
    assert data["token"]
    assert data["user"] == {
        "id": registered_user["id"],
        "username": registered_user["username"],
        "email": registered_user["email"],
    }


def test_login_with_wrong_password(client, registered_user):
    r = client.post(
        "/api/auth/login",
        json={"username": registered_user["username"], "password": "wrong"},
    )
    assert r.status_code == 401
    assert "token" not in r.json()


def test_login_with_unknown_user(client, unique_name):
    r = client.post("/api/auth/login", json={"username": unique_name(), "password": "secret1"})
    assert r.status_code == 401


def test_me_returns_token_identity(client, registered_user, auth_headers):
    r = client.get("/api/auth/me", headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["id"] == registered_user["id"]
    assert data["username"] == registered_user["username"]
    assert data["expires_at"]


def test_protected_endpoints_require_token(client):
    for path in ("/api/auth/me", "/api/patients", "/api/medicalorders"):
        r = client.get(path)
        assert r.status_code == 401
        assert r.headers["www-authenticate"] == "Bearer"


def test_invalid_tokens_are_unauthorized(client, registered_user):
    user = SimpleNamespace(id=registered_user["id"], username=registered_user["username"])
    expired = create_token(user, issued_at=datetime.now(timezone.utc) - timedelta(days=1))

    for header in (
        "Bearer not-a-jwt",
        f"Bearer {expired}",
        f"Basic {registered_user['token']}",
        "Bearer",
    ):
        r = client.get("/api/patients", headers={"Authorization": header})
        assert r.status_code == 401
        assert r.json() == {"detail": "Not authenticated"}


def test_health_does_not_require_token(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_token_without_expiry_is_unauthorized(client, registered_user):
    settings = get_settings()
    token = jwt.encode(
        {
            "sub": registered_user["id"],
            "unique_name": registered_user["username"],
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
            "iat": int(datetime.now(timezone.utc).timestamp()),
        },
        settings.jwt_secret_key,
        algorithm=ALGORITHM,
    )
    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json() == {"detail": "Not authenticated"}
