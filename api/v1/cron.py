"""Scheduler-triggered endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, require_cron
from services.expiry_sweeper import run_sweep

router = APIRouter()


class SweepResponse(BaseModel):
    """Response schema for the expiry sweep."""

    expired: int
    accounts_deactivated: int
    accounts_failed: int
    deactivated: list[str]
    errors: list[str]


@router.api_route(
    "/cron/expire-event-signups",
    methods=["GET", "POST"],
    response_model=SweepResponse,
)
async def expire_event_signups(
    _cron: None = Depends(require_cron),
    db: AsyncSession = Depends(get_db),
):
    """
    Expire stale pending signups and deactivate lapsed event accounts.

    Invoked by the scheduler, which sends ``Authorization: Bearer <CRON_SECRET>``.
    """
    result = await run_sweep(db)
    return SweepResponse(
        expired=result.expired_signups,
        accounts_deactivated=len(result.deactivated_accounts),
        accounts_failed=len(result.failed_accounts),
        deactivated=result.deactivated_accounts,
        errors=result.failed_accounts,
    )
