"""Admin and cron authorization checks.

Both checks are pure and fail closed: a missing, malformed, expired or
unknown credential yields False, never an exception.
"""

import hmac
import logging

from jose import JWTError

import config
from auth.jwt import decode_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def get_admin_emails() -> list[str]:
    """Admin allowlist from ADMIN_EMAILS, lower-cased."""
    raw = config.settings.ADMIN_EMAILS or ""
    if not raw:
        logger.warning("ADMIN_EMAILS is not set; no request will be treated as admin")
        return []
    return [email.strip().lower() for email in raw.split(",") if email.strip()]


def is_admin_email(email: str | None) -> bool:
    if not email:
        return False
    return email.strip().lower() in get_admin_emails()


def get_admin_emails_masked() -> list[str]:
    """Allowlist with the local part masked, for diagnostics only."""
    masked = []
    for email in get_admin_emails():
        local, _, domain = email.partition("@")
        masked.append(f"{local[:2]}***@{domain}")
    return masked


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of a ``Bearer <token>`` header, or None."""
    if not authorization or not isinstance(authorization, str):
        return None
    if not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


def admin_email_from_header(authorization: str | None) -> str | None:
    """
    Resolve the admin identity carried by an Authorization header.

    Returns:
        The admin email if the token is valid and allowlisted, otherwise None
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return None

    try:
        payload = decode_token(token)
    except JWTError:
        logger.info("Admin auth check failed: invalid token")
        return None

    if not is_admin_email(payload.email):
        logger.info("Admin auth check failed: email not allowlisted")
        return None

    return payload.email.strip().lower()


def is_authorized(authorization: str | None) -> bool:
    """True if the Authorization header carries a valid admin token."""
    return admin_email_from_header(authorization) is not None


def is_cron_authorized(authorization: str | None) -> bool:
    """
    Verify the scheduler's bearer secret.

    Without CRON_SECRET the sweep may only be triggered in the dev environment.
    """
    cron_secret = config.settings.CRON_SECRET
    if not cron_secret:
        if config.settings.ENV == "dev":
            return True
        logger.error("CRON_SECRET is not set; refusing cron request")
        return False

    token = extract_bearer_token(authorization)
    if token is None:
        return False
    return hmac.compare_digest(token.encode("utf-8"), cron_secret.encode("utf-8"))
