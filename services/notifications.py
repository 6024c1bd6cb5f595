"""Outbound notifications for signup decisions.

Mail delivery is an external collaborator; until a provider is configured the
messages are written to the log so they can be retrieved during development.
"""

import logging
from datetime import datetime

import config

logger = logging.getLogger(__name__)


def send_approval_email(
    *,
    email: str,
    contact_name: str,
    credits: int,
    expiry_date: datetime,
) -> bool:
    """
    Tell an approved signup that their event account is ready.

    Returns:
        True if the message was handed off for delivery
    """
    login_url = f"{config.settings.SITE_URL.rstrip('/')}/login"
    logger.info(
        "Approval email to=%s name=%s credits=%d expires=%s login=%s",
        email,
        contact_name,
        credits,
        expiry_date.date().isoformat(),
        login_url,
    )
    return True


def send_rejection_email(*, email: str, contact_name: str) -> bool:
    """Tell a rejected signup that their request was declined."""
    logger.info("Rejection email to=%s name=%s", email, contact_name)
    return True
