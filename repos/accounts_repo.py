"""Repository for EventAccount and credit database operations."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import ConflictError, RepositoryError
from models.account import (
    EVENT_ACCOUNT_TYPE,
    CreditBalance,
    CreditTransaction,
    EventAccount,
)


async def get_by_email(session: AsyncSession, email: str) -> EventAccount | None:
    """Get an account by email."""
    try:
        result = await session.execute(
            select(EventAccount).where(EventAccount.email == email)
            .execution_options(populate_existing=True)
        )
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to look up account: {e}") from e
    return result.scalar_one_or_none()


async def get_balance(session: AsyncSession, account_id: UUID) -> CreditBalance | None:
    try:
        result = await session.execute(
            select(CreditBalance)
            .where(CreditBalance.account_id == account_id)
            .execution_options(populate_existing=True)
        )
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to load credit balance: {e}") from e
    return result.scalar_one_or_none()


async def create(session: AsyncSession, account: EventAccount) -> EventAccount:
    """
    Create a new account.

    Raises:
        ConflictError: If an account already exists for the email or signup
        RepositoryError: On any other store failure
    """
    try:
        session.add(account)
        await session.flush()
    except IntegrityError as e:
        raise ConflictError("An account already exists for this email") from e
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to create account: {e}") from e
    return account


async def create_balance(session: AsyncSession, balance: CreditBalance) -> CreditBalance:
    try:
        session.add(balance)
        await session.flush()
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to create credit balance: {e}") from e
    return balance


async def add_transaction(
    session: AsyncSession,
    transaction: CreditTransaction,
) -> CreditTransaction:
    try:
        session.add(transaction)
        await session.flush()
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to record credit transaction: {e}") from e
    return transaction


async def list_expired_active(session: AsyncSession, *, now: datetime) -> list[EventAccount]:
    """Active EVENT accounts whose expiry date has passed."""
    try:
        result = await session.execute(
            select(EventAccount)
            .where(
                EventAccount.account_type == EVENT_ACCOUNT_TYPE,
                EventAccount.is_active.is_(True),
                EventAccount.event_expiry_date < now,
            )
            .order_by(EventAccount.event_expiry_date)
        )
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to list expired accounts: {e}") from e
    return [account for account in result.scalars().all()]


async def deactivate(session: AsyncSession, *, account_id: UUID, now: datetime) -> bool:
    """
    Deactivate an active account.

    Returns:
        True if the account was active and is now inactive
    """
    try:
        result = await session.execute(
            update(EventAccount)
            .where(
                EventAccount.id == account_id,
                EventAccount.is_active.is_(True),
            )
            .values(is_active=False, updated_at=now)
            .execution_options(synchronize_session=False)
        )
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to deactivate account: {e}") from e
    return result.rowcount == 1


async def reset_credits(session: AsyncSession, *, account_id: UUID, now: datetime) -> None:
    try:
        await session.execute(
            update(CreditBalance)
            .where(CreditBalance.account_id == account_id)
            .values(subscription_credits=0, purchased_credits=0, updated_at=now)
            .execution_options(synchronize_session=False)
        )
    except SQLAlchemyError as e:
        raise RepositoryError(f"Failed to reset credits: {e}") from e
