"""Admin endpoints for reviewing event signups."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_db, require_admin
from models.signup import (
    Pagination,
    SignupApproveRequest,
    SignupApproveResponse,
    SignupDecisionRequest,
    SignupListResponse,
    SignupRejectRequest,
    SignupResponse,
)
from services import signups_service

router = APIRouter()

ALL_STATUSES = "all"


@router.get("/admin/event-signups", response_model=SignupListResponse)
async def list_event_signups(
    status: str = Query("pending", description="Status filter, or 'all'"),
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    campaign: Optional[str] = Query(None, description="Filter by campaign source"),
    _admin_email: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    List event signups (admin only).

    Args:
        status: Status filter (default 'pending'; 'all' disables the filter)
        limit: Maximum number of results (1-1000, default 50)
        offset: Number of results to skip (default 0)
        campaign: Optional campaign source filter
        _admin_email: Dependency that ensures the caller is an admin
        db: Database session

    Returns:
        SignupListResponse: Page of signups, pagination info and per-status counts
    """
    page = await signups_service.list_signups(
        db,
        status=None if status == ALL_STATUSES else status,
        campaign_source=campaign,
        limit=limit,
        offset=offset,
    )
    return SignupListResponse(
        data=[SignupResponse.model_validate(signup) for signup in page.signups],
        pagination=Pagination(
            total=page.total,
            limit=page.limit,
            offset=page.offset,
            has_more=page.has_more,
        ),
        statistics=page.statistics,
    )


@router.post("/admin/event-signups/decision", response_model=SignupResponse)
async def decide_event_signup(
    decision: SignupDecisionRequest,
    admin_email: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Approve or reject a pending signup (admin only).

    Returns:
        SignupResponse: Updated signup

    Raises:
        NotFoundError (404) for an unknown id, InvalidTransitionError (409)
        if the signup is no longer pending
    """
    signup = await signups_service.decide(
        db,
        decision.id,
        decision.decision,
        admin_email=admin_email,
        credits=decision.credits,
        reason=decision.reason,
    )
    return SignupResponse.model_validate(signup)


@router.post("/admin/event-signups/{signup_id}/approve", response_model=SignupApproveResponse)
async def approve_event_signup(
    signup_id: UUID,
    approve_data: Optional[SignupApproveRequest] = None,
    admin_email: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Approve a pending signup and provision its event account (admin only).

    Sets status to 'approved', records decided_at, creates the account with
    demo credits and sends the approval notification.
    """
    result = await signups_service.approve(
        db,
        signup_id,
        admin_email=admin_email,
        credits=approve_data.credits if approve_data else None,
    )
    return SignupApproveResponse(
        signup=SignupResponse.model_validate(result.signup),
        account_id=result.account_id,
        credits=result.credits,
        expiry_date=result.expiry_date,
        notification_sent=result.notification_sent,
    )


@router.post("/admin/event-signups/{signup_id}/reject", response_model=SignupResponse)
async def reject_event_signup(
    signup_id: UUID,
    reject_data: Optional[SignupRejectRequest] = None,
    admin_email: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Reject a pending signup (admin only).

    Sets status to 'rejected' and optionally stores the rejection reason.
    """
    signup = await signups_service.reject(
        db,
        signup_id,
        admin_email=admin_email,
        reason=reject_data.reason if reject_data else None,
    )
    return SignupResponse.model_validate(signup)
