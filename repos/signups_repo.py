"""Repository for EventSignup database operations.

Store failures surface as RepositoryError; status changes are single
conditional UPDATE statements so concurrent transitions cannot both succeed.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import ConflictError, RepositoryError
from models.signup import ACTIVE_STATUSES, EventSignup, SignupStatus


async def create(session: AsyncSession, signup: EventSignup) -> EventSignup:
    """
    Create a new signup.

    Args:
        session: Database session
        signup: EventSignup instance to create

    Returns:
        Created signup

    Raises:
        ConflictError: If the active-email unique index rejects the row
        RepositoryError: On any other store failure
    """
    try:
        session.add(signup)
        await session.flush()
        await session.refresh(signup)
    except IntegrityError as e:
        raise ConflictError("A signup for this email already exists") from e
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to create signup: {e}") from e
    return signup


async def get_by_id(session: AsyncSession, signup_id: UUID) -> EventSignup | None:
    """
    Get a signup by ID.

    Always reloads from the store, since status changes bypass the identity map.

    Returns:
        EventSignup if found, None otherwise
    """
    try:
        result = await session.execute(
            select(EventSignup)
            .where(EventSignup.id == signup_id)
            .execution_options(populate_existing=True)
        )
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to load signup: {e}") from e
    return result.scalar_one_or_none()


async def find_active_by_email(session: AsyncSession, email: str) -> EventSignup | None:
    """Find a pending or approved signup for an email."""
    try:
        result = await session.execute(
            select(EventSignup)
            .where(
                EventSignup.email == email,
                EventSignup.status.in_(ACTIVE_STATUSES),
            )
            .limit(1)
        )
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to look up signup by email: {e}") from e
    return result.scalar_one_or_none()


async def list_by_status(
    session: AsyncSession,
    *,
    status: str | None = None,
    campaign_source: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[EventSignup], int]:
    """
    List signups newest first.

    Args:
        session: Database session
        status: Optional status filter
        campaign_source: Optional campaign filter
        limit: Page size
        offset: Number of rows to skip

    Returns:
        Tuple of (signups on this page, total matching rows)
    """
    filters = []
    if status:
        filters.append(EventSignup.status == status)
    if campaign_source:
        filters.append(EventSignup.campaign_source == campaign_source)

    query = (
        select(EventSignup)
        .where(*filters)
        .order_by(EventSignup.created_at.desc(), EventSignup.id)
        .limit(limit)
        .offset(offset)
    )
    count_query = select(func.count()).select_from(EventSignup).where(*filters)

    try:
        result = await session.execute(query)
        total = (await session.execute(count_query)).scalar_one()
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to list signups: {e}") from e
    return [signup for signup in result.scalars().all()], total


async def count_by_status(session: AsyncSession) -> dict[str, int]:
    """Count signups per status; every status is present in the result."""
    try:
        result = await session.execute(
            select(EventSignup.status, func.count()).group_by(EventSignup.status)
        )
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to count signups: {e}") from e

    counts = {s.value: 0 for s in SignupStatus}
    for status, count in result.all():
        counts[status] = count
    return counts


async def update_status(
    session: AsyncSession,
    *,
    signup_id: UUID,
    new_status: str,
    decided_at: datetime,
    decided_by: str | None = None,
    rejection_reason: str | None = None,
) -> bool:
    """
    Move a pending signup to ``new_status``.

    ``status`` and ``decided_at`` are written by one conditional UPDATE guarded
    by ``status = 'pending'``. The caller owns the transaction.

    Returns:
        True if the row was pending and is now updated, False otherwise
    """
    values = {
        "status": new_status,
        "decided_at": decided_at,
        "decided_by": decided_by,
        "updated_at": decided_at,
    }
    if rejection_reason is not None:
        values["rejection_reason"] = rejection_reason

    try:
        result = await session.execute(
            update(EventSignup)
            .where(
                EventSignup.id == signup_id,
                EventSignup.status == SignupStatus.PENDING.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to update signup status: {e}") from e
    return result.rowcount == 1


async def set_account_id(session: AsyncSession, *, signup_id: UUID, account_id: UUID) -> None:
    """Link an approved signup to its provisioned account."""
    try:
        await session.execute(
            update(EventSignup)
            .where(EventSignup.id == signup_id)
            .values(account_id=account_id)
            .execution_options(synchronize_session=False)
        )
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to link account to signup: {e}") from e


async def expire_pending_before(
    session: AsyncSession,
    *,
    cutoff: datetime,
    decided_at: datetime,
) -> int:
    """
    Expire every pending signup created before ``cutoff``.

    Already-terminal rows are never touched, so re-running is harmless.

    Returns:
        Number of signups expired
    """
    try:
        result = await session.execute(
            update(EventSignup)
            .where(
                EventSignup.status == SignupStatus.PENDING.value,
                EventSignup.created_at < cutoff,
            )
            .values(
                status=SignupStatus.EXPIRED.value,
                decided_at=decided_at,
                decided_by="system",
                updated_at=decided_at,
            )
            .execution_options(synchronize_session=False)
        )
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to expire stale signups: {e}") from e
    return result.rowcount or 0
