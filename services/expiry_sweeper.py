"""Scheduled sweep that expires stale signups and lapsed event accounts."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, UTC

from sqlalchemy.ext.asyncio import AsyncSession

import config
from services import accounts_service, signups_service

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    expired_signups: int = 0
    deactivated_accounts: list[str] = field(default_factory=list)
    failed_accounts: list[str] = field(default_factory=list)


def compute_cutoff(now: datetime, stale_after: timedelta | None = None) -> datetime:
    """Signups created before the returned time are stale."""
    if stale_after is None:
        stale_after = timedelta(hours=config.settings.SIGNUP_STALE_AFTER_HOURS)
    return now - stale_after


async def run_sweep(
    session: AsyncSession,
    *,
    now: datetime | None = None,
    stale_after: timedelta | None = None,
) -> SweepResult:
    """
    Run one sweep.

    Safe to invoke repeatedly or concurrently: both steps only act on rows that
    are still pending or still active. Failures are not retried here; the next
    scheduled run picks up whatever is left.
    """
    now = now or datetime.now(UTC)
    cutoff = compute_cutoff(now, stale_after)
    logger.info("Running expiry sweep (cutoff=%s)", cutoff.isoformat())

    expired = await signups_service.expire_stale(session, cutoff, now=now)
    accounts = await accounts_service.deactivate_expired_accounts(session, now=now)

    logger.info(
        "Sweep finished: %d signups expired, %d accounts deactivated, %d failed",
        expired,
        len(accounts.deactivated),
        len(accounts.failed),
    )
    return SweepResult(
        expired_signups=expired,
        deactivated_accounts=accounts.deactivated,
        failed_accounts=accounts.failed,
    )
