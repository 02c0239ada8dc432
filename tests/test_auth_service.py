"""Tests for password hashing and access tokens."""

import pytest
from jose import jwt

from marketplan.config import settings
from marketplan.errors import ConfigurationError
from marketplan.services.auth_service import (
    JWTError, create_access_token, decode_token, hash_password, verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("motdepasse123")
    assert hashed != "motdepasse123"
    assert verify_password("motdepasse123", hashed)
    assert not verify_password("autre", hashed)


def test_token_carries_subject():
    payload = decode_token(create_access_token("42"))
    assert payload["sub"] == "42"
    assert payload["iss"] == "marketplan-ia"


def test_expired_token_is_rejected():
    with pytest.raises(JWTError):
        decode_token(create_access_token("42", expires_minutes=-1))


def test_foreign_issuer_is_rejected():
    token = jwt.encode({"sub": "42", "iss": "ailleurs"}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(JWTError):
        decode_token(token)


def test_missing_secret_is_a_configuration_error(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET_KEY", "")
    with pytest.raises(ConfigurationError):
        create_access_token("42")
