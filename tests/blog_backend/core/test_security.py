"""Tests for password hashing and access tokens."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from blog_backend.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    token_ttl_seconds,
    verify_password,
)


def test_password_hash_round_trip():
    """Test that a bcrypt hash verifies only the original password."""
    hashed = hash_password("s3cret-pass")

    assert hashed != "s3cret-pass"
    assert hashed.startswith("$2b$")
    assert verify_password("s3cret-pass", hashed) is True
    assert verify_password("other-pass", hashed) is False


def test_hashes_are_salted():
    """Test that the same password hashes differently each time."""
    assert hash_password("same") != hash_password("same")


def test_token_carries_subject_and_unique_jti():
    """Test that every token gets its own jti for revocation."""
    first = decode_access_token(create_access_token({"sub": "user-1"}))
    second = decode_access_token(create_access_token({"sub": "user-1"}))

    assert first["sub"] == "user-1"
    assert first["jti"] != second["jti"]
    assert "exp" in first


def test_token_expiry_defaults_to_configured_ttl():
    """Test that exp is roughly now + ACCESS_TOKEN_EXPIRE_MINUTES."""
    payload = decode_access_token(create_access_token({"sub": "user-1"}))
    remaining = datetime.fromtimestamp(payload["exp"], tz=timezone.utc) - datetime.now(timezone.utc)

    assert abs(remaining.total_seconds() - token_ttl_seconds()) < 60


def test_expired_token_is_rejected():
    """Test that a token past its exp does not decode."""
    token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))

    assert decode_access_token(token) is None


def test_garbage_token_is_rejected():
    """Test that a malformed token does not decode."""
    assert decode_access_token("not-a-jwt") is None


def test_token_signed_with_other_secret_is_rejected():
    """Test that signature verification uses the configured secret."""
    token = create_access_token({"sub": "user-1"})

    with patch("blog_backend.core.security.settings") as mock_settings:
        mock_settings.secret_key = "wrong_secret_key"
        mock_settings.algorithm = "HS256"

        assert decode_access_token(token) is None


def test_verify_rejects_password_over_72_bytes():
    """Test that verification fails instead of raising for over-long input."""
    hashed = hash_password("x" * 72)

    assert verify_password("x" * 72, hashed) is True
    assert verify_password("x" * 80, hashed) is False
