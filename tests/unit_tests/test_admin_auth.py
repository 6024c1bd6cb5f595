"""Unit tests for the admin and cron authorization checks."""

import pytest
from jose import jwt

import config
from auth.admin import (
    admin_email_from_header,
    get_admin_emails_masked,
    is_admin_email,
    is_authorized,
    is_cron_authorized,
)
from auth.jwt import create_admin_token, decode_token


def test_valid_admin_token_is_authorized():
    token = create_admin_token("admin@example.com")

    assert is_authorized(f"Bearer {token}")
    assert admin_email_from_header(f"Bearer {token}") == "admin@example.com"


def test_allowlist_is_case_insensitive():
    """Test: ADMIN_EMAILS entries and token emails are compared lower-cased."""
    token = create_admin_token("SUPPORT@example.com")

    assert is_admin_email("support@EXAMPLE.com")
    assert is_authorized(f"bearer {token}")


@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        "Bearer",
        "Bearer ",
        "Basic YWRtaW46cGFzcw==",
        "Bearer not-a-jwt",
        "Bearer a.b.c",
        "Token abc",
        12345,
    ],
)
def test_malformed_headers_are_unauthorized(header):
    """Test: Missing or malformed credentials fail closed without raising."""
    assert is_authorized(header) is False


def test_non_allowlisted_email_is_unauthorized():
    token = create_admin_token("intruder@example.com")

    assert not is_authorized(f"Bearer {token}")


def test_expired_token_is_unauthorized():
    token = create_admin_token("admin@example.com", expires_in_hours=-1)

    assert not is_authorized(f"Bearer {token}")


def test_token_signed_with_other_secret_is_unauthorized():
    token = jwt.encode(
        {"sub": "admin@example.com", "email": "admin@example.com", "exp": 4102444800},
        "some-other-secret",
        algorithm="HS256",
    )

    assert not is_authorized(f"Bearer {token}")


def test_token_without_email_claim_is_unauthorized():
    token = jwt.encode(
        {"sub": "admin@example.com", "exp": 4102444800},
        config.settings.JWT_SECRET,
        algorithm=config.settings.JWT_ALGORITHM,
    )

    assert not is_authorized(f"Bearer {token}")


def test_empty_allowlist_authorizes_nobody(monkeypatch):
    monkeypatch.setattr(config.settings, "ADMIN_EMAILS", "")
    token = create_admin_token("admin@example.com")

    assert not is_authorized(f"Bearer {token}")


def test_decode_token_round_trips_claims():
    payload = decode_token(create_admin_token("admin@example.com"))

    assert payload.sub == "admin@example.com"
    assert payload.email == "admin@example.com"


def test_masked_admin_emails_hide_local_part():
    assert get_admin_emails_masked() == ["ad***@example.com", "su***@example.com"]


def test_cron_secret_must_match():
    assert is_cron_authorized("Bearer test-cron-secret")
    assert not is_cron_authorized("Bearer wrong-secret")
    assert not is_cron_authorized("test-cron-secret")
    assert not is_cron_authorized(None)


def test_cron_without_secret_allowed_only_in_dev(monkeypatch):
    monkeypatch.setattr(config.settings, "CRON_SECRET", None)

    monkeypatch.setattr(config.settings, "ENV", "dev")
    assert is_cron_authorized(None)

    monkeypatch.setattr(config.settings, "ENV", "production")
    assert not is_cron_authorized(None)
    assert not is_cron_authorized("Bearer anything")
