"""Tests for JWT access tokens."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from magilearn.auth.jwt import create_access_token, verify_token
from magilearn.config import get_settings


class TestAccessToken:
    def test_roundtrip_claims(self):
        token = create_access_token("user-123", "mia")
        payload = verify_token(token)
        assert payload["sub"] == "user-123"
        assert payload["username"] == "mia"
        assert payload["type"] == "access"
        assert payload["iss"] == "magilearn"

    def test_wrong_type_rejected(self):
        token = create_access_token("user-123", "mia")
        with pytest.raises(jwt.InvalidTokenError, match="Expected token type"):
            verify_token(token, expected_type="refresh")

    def test_expired_token_rejected(self):
        settings = get_settings()
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {"sub": "user-123", "iat": past, "exp": past + timedelta(minutes=1), "iss": settings.jwt_issuer,
             "type": "access"},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(jwt.InvalidTokenError, match="expired"):
            verify_token(token)

    def test_foreign_signature_rejected(self):
        token = jwt.encode(
            {"sub": "user-123", "iss": "magilearn", "type": "access"},
            "some-other-secret-that-is-long-enough-to-sign",
            algorithm="HS256",
        )
        with pytest.raises(jwt.InvalidTokenError):
            verify_token(token)

    def test_garbage_rejected(self):
        with pytest.raises(jwt.InvalidTokenError):
            verify_token("not.a.token")
