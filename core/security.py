"""
Password hashing and JWT helpers.

Tokens carry the user id, email and role; the API layer resolves the user
from the database on every request so disabled accounts are rejected at once.
"""

import uuid
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from core.config import settings

logger = logging.getLogger("security")


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Malformed password hash encountered")
        return False


def _encode(payload: Dict[str, Any], secret_key: Optional[str], algorithm: Optional[str]) -> str:
    return jwt.encode(
        payload,
        secret_key or settings.jwt_secret_key,
        algorithm=algorithm or settings.jwt_algorithm,
    )


def create_access_token(
    user_id: int,
    email: str,
    role: str,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed access token.

    Args:
        user_id: Subject user id
        email: User email
        role: User role value
        secret_key: Signing key (defaults to settings)
        algorithm: Signing algorithm (defaults to settings)
        expires_delta: Custom lifetime

    Returns:
        Encoded JWT
    """
    now = datetime.now(timezone.utc)
    expires = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload = {
        "user_id": user_id,
        "email": email,
        "role": role,
        "type": "access",
        "iat": now,
        "exp": expires,
        "jti": uuid.uuid4().hex,
    }
    return _encode(payload, secret_key, algorithm)


def create_refresh_token(
    user_id: int,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed refresh token."""
    now = datetime.now(timezone.utc)
    expires = now + (expires_delta or timedelta(days=settings.refresh_token_expire_days))
    payload = {
        "user_id": user_id,
        "type": "refresh",
        "iat": now,
        "exp": expires,
        "jti": uuid.uuid4().hex,
    }
    return _encode(payload, secret_key, algorithm)


def create_token_pair(user_id: int, email: str, role: str, secret_key: Optional[str] = None) -> Dict[str, Any]:
    """Create an access + refresh token pair."""
    return {
        "access_token": create_access_token(user_id, email, role, secret_key=secret_key),
        "refresh_token": create_refresh_token(user_id, secret_key=secret_key),
        "token_type": "Bearer",
        "expires_in": settings.access_token_expire_minutes * 60,
    }


def verify_jwt_token(
    token: str,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None,
    expected_type: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Decode and validate a token.

    Raises:
        jwt.ExpiredSignatureError: token expired
        jwt.InvalidTokenError: bad signature, malformed token or wrong type
    """
    payload = jwt.decode(
        token,
        secret_key or settings.jwt_secret_key,
        algorithms=[algorithm or settings.jwt_algorithm],
    )
    if expected_type and payload.get("type") != expected_type:
        raise jwt.InvalidTokenError(f"Expected {expected_type} token")
    return payload
