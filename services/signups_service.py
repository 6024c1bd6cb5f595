"""Service layer for the event signup lifecycle.

States: ``pending`` -> ``approved`` | ``rejected`` | ``expired``. All three
targets are terminal. Every transition is a conditional update on
``status = 'pending'``, so approvals, rejections and the expiry sweep never
overwrite each other.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

import config
import db
from auth.passwords import hash_password
from errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    RepositoryError,
    SignupError,
    ValidationError,
    field_errors,
)
from models.signup import EventSignup, SignupCreate, SignupStatus
from repos import accounts_repo, signups_repo
from services import accounts_service, notifications

logger = logging.getLogger(__name__)


def parse_submission(fields: Mapping[str, Any] | SignupCreate) -> SignupCreate:
    """
    Validate raw submission fields into a SignupCreate.

    Raises:
        ValidationError: With one entry per offending field
    """
    if isinstance(fields, SignupCreate):
        return fields
    try:
        return SignupCreate.model_validate(dict(fields))
    except PydanticValidationError as e:
        raise ValidationError("Invalid signup submission", errors=field_errors(e.errors())) from e


async def submit(
    session: AsyncSession,
    fields: Mapping[str, Any] | SignupCreate,
    *,
    now: datetime | None = None,
) -> EventSignup:
    """
    Create a pending signup.

    Args:
        session: Database session
        fields: Submission fields (raw mapping or already-validated schema)
        now: Creation time (defaults to the current UTC time)

    Returns:
        The created signup in status ``pending``

    Raises:
        ValidationError: Missing or invalid fields
        ConflictError: An active signup or account already uses the email
    """
    payload = parse_submission(fields)
    now = now or datetime.now(UTC)

    if await signups_repo.find_active_by_email(session, payload.email):
        raise ConflictError("This email is already registered")
    if await accounts_repo.get_by_email(session, payload.email):
        raise ConflictError("This email is already registered")

    utm = payload.utm
    signup = EventSignup(
        organization_name=payload.organization_name,
        contact_name=payload.contact_name,
        phone=payload.phone,
        email=payload.email,
        password_hash=hash_password(payload.password),
        status=SignupStatus.PENDING.value,
        campaign_source=payload.campaign_source,
        utm_source=utm.source if utm else None,
        utm_medium=utm.medium if utm else None,
        utm_campaign=utm.campaign if utm else None,
        created_at=now,
        updated_at=now,
    )

    try:
        signup = await signups_repo.create(session, signup)
        await db.commit(session)
    except ConflictError:
        # Lost the race to a concurrent submission for the same email
        await session.rollback()
        raise ConflictError("This email is already registered")
    except RepositoryError:
        await session.rollback()
        raise

    logger.info("Created pending signup %s for %s", signup.id, signup.email)
    return signup


async def _raise_for_failed_transition(
    session: AsyncSession,
    signup_id: UUID,
    target_status: str,
) -> None:
    signup = await signups_repo.get_by_id(session, signup_id)
    if signup is None:
        raise NotFoundError("Signup not found")
    raise InvalidTransitionError(signup.status, target_status)


async def get_signup(session: AsyncSession, signup_id: UUID) -> EventSignup:
    signup = await signups_repo.get_by_id(session, signup_id)
    if signup is None:
        raise NotFoundError("Signup not found")
    return signup


@dataclass
class ApprovalResult:
    signup: EventSignup
    account_id: UUID
    credits: int
    expiry_date: datetime
    notification_sent: bool


async def approve(
    session: AsyncSession,
    signup_id: UUID,
    *,
    admin_email: str | None = None,
    credits: int | None = None,
    now: datetime | None = None,
) -> ApprovalResult:
    """
    Approve a pending signup and provision its event account.

    The status change and the account are committed together; if provisioning
    fails the signup stays pending.

    Raises:
        NotFoundError: Unknown signup id
        InvalidTransitionError: Signup is not pending
    """
    now = now or datetime.now(UTC)
    if credits is None:
        credits = config.settings.EVENT_DEMO_CREDITS

    try:
        changed = await signups_repo.update_status(
            session,
            signup_id=signup_id,
            new_status=SignupStatus.APPROVED.value,
            decided_at=now,
            decided_by=admin_email,
        )
        if not changed:
            await session.rollback()
            await _raise_for_failed_transition(session, signup_id, SignupStatus.APPROVED.value)

        signup = await signups_repo.get_by_id(session, signup_id)
        account = await accounts_service.provision_event_account(
            session,
            signup=signup,
            credits=credits,
            now=now,
        )
        account_id = account.id
        expiry_date = account.event_expiry_date
        await signups_repo.set_account_id(session, signup_id=signup_id, account_id=account_id)
        await db.commit(session)
    except (InvalidTransitionError, NotFoundError):
        raise
    except SignupError:
        await session.rollback()
        raise

    signup = await signups_repo.get_by_id(session, signup_id)
    logger.info(
        "Approved signup %s (%s) by %s with %d credits",
        signup.id,
        signup.email,
        admin_email or "unknown",
        credits,
    )

    try:
        sent = notifications.send_approval_email(
            email=signup.email,
            contact_name=signup.contact_name,
            credits=credits,
            expiry_date=expiry_date,
        )
    except Exception:
        # The account exists; an admin can resend the notice by hand
        logger.exception("Failed to send approval email to %s", signup.email)
        sent = False

    return ApprovalResult(
        signup=signup,
        account_id=account_id,
        credits=credits,
        expiry_date=expiry_date,
        notification_sent=sent,
    )


async def reject(
    session: AsyncSession,
    signup_id: UUID,
    *,
    admin_email: str | None = None,
    reason: str | None = None,
    now: datetime | None = None,
) -> EventSignup:
    """
    Reject a pending signup.

    Raises:
        NotFoundError: Unknown signup id
        InvalidTransitionError: Signup is not pending
    """
    now = now or datetime.now(UTC)

    try:
        changed = await signups_repo.update_status(
            session,
            signup_id=signup_id,
            new_status=SignupStatus.REJECTED.value,
            decided_at=now,
            decided_by=admin_email,
            rejection_reason=reason,
        )
        if not changed:
            await session.rollback()
            await _raise_for_failed_transition(session, signup_id, SignupStatus.REJECTED.value)
        await db.commit(session)
    except (InvalidTransitionError, NotFoundError):
        raise
    except RepositoryError:
        await session.rollback()
        raise

    signup = await signups_repo.get_by_id(session, signup_id)
    logger.info("Rejected signup %s (%s) by %s", signup.id, signup.email, admin_email or "unknown")

    try:
        notifications.send_rejection_email(email=signup.email, contact_name=signup.contact_name)
    except Exception:
        logger.exception("Failed to send rejection email to %s", signup.email)

    return signup


async def decide(
    session: AsyncSession,
    signup_id: UUID,
    decision: str,
    *,
    admin_email: str | None = None,
    credits: int | None = None,
    reason: str | None = None,
    now: datetime | None = None,
) -> EventSignup:
    """Apply an admin decision (``approve`` or ``reject``) and return the signup."""
    if decision == "approve":
        result = await approve(
            session,
            signup_id,
            admin_email=admin_email,
            credits=credits,
            now=now,
        )
        return result.signup
    if decision == "reject":
        return await reject(
            session,
            signup_id,
            admin_email=admin_email,
            reason=reason,
            now=now,
        )
    raise ValidationError(f"Unknown decision: {decision}")


async def expire_stale(
    session: AsyncSession,
    cutoff: datetime,
    *,
    now: datetime | None = None,
) -> int:
    """
    Expire every pending signup created before ``cutoff``.

    Idempotent: only rows still pending are touched.

    Returns:
        Number of signups expired by this call
    """
    now = now or datetime.now(UTC)
    try:
        count = await signups_repo.expire_pending_before(session, cutoff=cutoff, decided_at=now)
        await db.commit(session)
    except RepositoryError:
        await session.rollback()
        raise

    if count:
        logger.info("Expired %d pending signups created before %s", count, cutoff.isoformat())
    return count


@dataclass
class SignupPage:
    signups: list[EventSignup]
    total: int
    limit: int
    offset: int
    statistics: dict[str, int]

    @property
    def has_more(self) -> bool:
        return self.total > self.offset + self.limit


async def list_signups(
    session: AsyncSession,
    *,
    status: str | None = SignupStatus.PENDING.value,
    campaign_source: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> SignupPage:
    """
    List signups for the admin view, newest first.

    Raises:
        ValidationError: Unknown status filter
    """
    if status is not None:
        try:
            status = SignupStatus(status).value
        except ValueError:
            raise ValidationError(f"Invalid status: {status}")

    signups, total = await signups_repo.list_by_status(
        session,
        status=status,
        campaign_source=campaign_source,
        limit=limit,
        offset=offset,
    )
    statistics = await signups_repo.count_by_status(session)
    return SignupPage(
        signups=signups,
        total=total,
        limit=limit,
        offset=offset,
        statistics=statistics,
    )
