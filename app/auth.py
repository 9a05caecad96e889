"""
Auth module: password hashing, JWT creation/validation and the get_current_user
FastAPI dependency.

Tokens are HS256-signed with the configured secret and carry the user id (sub),
username (unique_name), issuer, audience, issued-at and expiration. A token is
accepted only when the signature, issuer, audience and expiration all check out;
every failure surfaces as a plain 401 from get_current_user.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from fastapi import HTTPException, Request, status
from app.config import get_settings
from app.exceptions import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# jose skips the aud/iss/exp checks when the claim is absent, so demand them.
REQUIRED_CLAIMS = {
    "require_aud": True,
    "require_iss": True,
    "require_exp": True,
    "require_iat": True,
    "require_sub": True,
}

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass
class UserPrincipal:
    """Resolved identity attached to each authenticated request."""
    user_id: str
    username: str
    expires_at: datetime


def hash_password(plaintext: str) -> str:
    """Return a salted bcrypt hash. Same input gives a different hash every call."""
    if not plaintext:
        raise ValueError("password must not be empty")
    return pwd_context.hash(plaintext)


def verify_password(plaintext: str, hashed: str) -> bool:
    if not plaintext or not hashed:
        return False
    try:
        return pwd_context.verify(plaintext, hashed)
    except (ValueError, TypeError):
        # Unrecognised or corrupt hash.
        return False


def create_token(user, issued_at: Optional[datetime] = None) -> str:
    """Create a signed JWT for the given User model instance."""
    settings = get_settings()
    issued_at = issued_at or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(minutes=settings.jwt_expiration_minutes)
    payload = {
        "sub": user.id,
        "unique_name": user.username,
        "jti": str(uuid.uuid4()),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> UserPrincipal:
    """
    Decode and validate a JWT.

    Raises TokenExpiredError when the token is otherwise valid but past its
    expiration, InvalidTokenError for any other problem.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[ALGORITHM],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options=REQUIRED_CLAIMS,
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError as e:
        raise InvalidTokenError(str(e))

    user_id = payload.get("sub")
    username = payload.get("unique_name")
    if not user_id or not username:
        raise InvalidTokenError("missing identity claims")
    return UserPrincipal(
        user_id=user_id,
        username=username,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(request: Request) -> UserPrincipal:
    """
    FastAPI dependency. Extracts the JWT from the Authorization header and
    raises 401 if it is absent, malformed or fails validation.
    """
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized()
    try:
        return decode_token(token.strip())
    except InvalidTokenError as e:
        logger.info("Rejected bearer token: %s", e.reason)
        raise _unauthorized()
