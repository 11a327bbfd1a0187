"""
Tests for core security utilities.

Tests:
- Password hashing and verification
- JWT token creation and validation
- Token expiration and token types
"""

import pytest
from datetime import timedelta
import jwt as pyjwt

from core.security import (
    hash_password,
    verify_password,
    create_access_token,
    create_refresh_token,
    verify_jwt_token,
    create_token_pair,
)
from core.config import settings


class TestPasswordHashing:
    """Test password hashing and verification."""

    def test_hash_password(self):
        """Test password hashing."""
        password = "SecurePassword123!"
        hashed = hash_password(password)

        assert isinstance(hashed, str)
        assert hashed != password
        assert hashed.startswith("$2b$")  # bcrypt format

    def test_hash_password_different_each_time(self):
        password = "SecurePassword123!"
        assert hash_password(password) != hash_password(password)

    def test_verify_password_success(self):
        hashed = hash_password("SecurePassword123!")
        assert verify_password("SecurePassword123!", hashed) is True

    def test_verify_password_failure(self):
        hashed = hash_password("SecurePassword123!")
        assert verify_password("WrongPassword", hashed) is False

    def test_verify_password_malformed_hash(self):
        """Test that a corrupt stored hash fails closed."""
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_unicode_password(self):
        password = "pässwörd-密码"
        assert verify_password(password, hash_password(password)) is True


class TestJWTTokens:
    """Test JWT token creation and validation."""

    def test_access_token_claims(self):
        token = create_access_token(7, "erin@example.com", "employer")
        payload = verify_jwt_token(token, expected_type="access")

        assert payload["user_id"] == 7
        assert payload["email"] == "erin@example.com"
        assert payload["role"] == "employer"
        assert payload["type"] == "access"
        assert "exp" in payload and "jti" in payload

    def test_refresh_token_claims(self):
        payload = verify_jwt_token(create_refresh_token(7), expected_type="refresh")
        assert payload["user_id"] == 7
        assert "email" not in payload

    def test_wrong_token_type_rejected(self):
        """Test that a refresh token cannot be used as an access token."""
        token = create_refresh_token(7)
        with pytest.raises(pyjwt.InvalidTokenError):
            verify_jwt_token(token, expected_type="access")

    def test_expired_token(self):
        token = create_access_token(
            7, "erin@example.com", "employer", expires_delta=timedelta(seconds=-1)
        )
        with pytest.raises(pyjwt.ExpiredSignatureError):
            verify_jwt_token(token)

    def test_wrong_secret(self):
        token = create_access_token(7, "erin@example.com", "employer", secret_key="x" * 40)
        with pytest.raises(pyjwt.InvalidSignatureError):
            verify_jwt_token(token)

    def test_malformed_token(self):
        with pytest.raises(pyjwt.InvalidTokenError):
            verify_jwt_token("not.a.token")

    def test_unique_jti(self):
        first = verify_jwt_token(create_access_token(1, "a@example.com", "admin"))
        second = verify_jwt_token(create_access_token(1, "a@example.com", "admin"))
        assert first["jti"] != second["jti"]


class TestTokenPair:
    """Test token pair creation."""

    def test_create_token_pair(self):
        pair = create_token_pair(3, "sam@example.com", "job_seeker")

        assert pair["token_type"] == "Bearer"
        assert pair["expires_in"] == settings.access_token_expire_minutes * 60
        assert verify_jwt_token(pair["access_token"], expected_type="access")["user_id"] == 3
        assert verify_jwt_token(pair["refresh_token"], expected_type="refresh")["user_id"] == 3
