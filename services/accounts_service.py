"""Service layer for EventAccount provisioning and expiry."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, UTC

from sqlalchemy.ext.asyncio import AsyncSession

import config
import db
from errors import RepositoryError
from models.account import (
    EVENT_ACCOUNT_TYPE,
    CreditBalance,
    CreditTransaction,
    EventAccount,
    TransactionType,
)
from models.signup import EventSignup
from repos import accounts_repo

logger = logging.getLogger(__name__)


async def provision_event_account(
    session: AsyncSession,
    *,
    signup: EventSignup,
    credits: int,
    now: datetime,
) -> EventAccount:
    """
    Create the account, credit balance and grant ledger entry for a signup.

    Runs inside the caller's transaction; nothing is committed here.

    Args:
        session: Database session
        signup: The signup being approved
        credits: Demo credits to grant
        now: Approval time; the account expires EVENT_ACCOUNT_DAYS later

    Returns:
        The new account
    """
    account = EventAccount(
        signup_id=signup.id,
        email=signup.email,
        organization_name=signup.organization_name,
        contact_name=signup.contact_name,
        phone=signup.phone,
        password_hash=signup.password_hash,
        account_type=EVENT_ACCOUNT_TYPE,
        event_signup_date=now,
        event_expiry_date=now + timedelta(days=config.settings.EVENT_ACCOUNT_DAYS),
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    account = await accounts_repo.create(session, account)

    await accounts_repo.create_balance(
        session,
        CreditBalance(
            account_id=account.id,
            subscription_credits=0,
            purchased_credits=credits,
            updated_at=now,
        ),
    )
    await accounts_repo.add_transaction(
        session,
        CreditTransaction(
            account_id=account.id,
            amount=credits,
            balance_after=credits,
            credit_type="purchased",
            transaction_type=TransactionType.ADMIN_GRANT.value,
            description="EVENT demo credits - approved by admin",
            created_at=now,
        ),
    )
    return account


@dataclass
class DeactivationResult:
    deactivated: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


async def deactivate_expired_accounts(
    session: AsyncSession,
    *,
    now: datetime | None = None,
) -> DeactivationResult:
    """
    Deactivate EVENT accounts past their expiry date.

    Each account is handled in its own savepoint so one failure does not undo
    the others. Credits are reset to zero and an expiration entry is logged.
    Commits at the end.
    """
    now = now or datetime.now(UTC)
    result = DeactivationResult()

    accounts = await accounts_repo.list_expired_active(session, now=now)
    if not accounts:
        logger.info("No expired EVENT accounts found")
        return result

    logger.info("Found %d expired EVENT accounts", len(accounts))
    for account_id, email in [(account.id, account.email) for account in accounts]:
        try:
            async with session.begin_nested():
                if not await accounts_repo.deactivate(session, account_id=account_id, now=now):
                    # Deactivated by a concurrent sweep
                    continue
                await accounts_repo.reset_credits(session, account_id=account_id, now=now)
                await accounts_repo.add_transaction(
                    session,
                    CreditTransaction(
                        account_id=account_id,
                        amount=0,
                        balance_after=0,
                        credit_type="purchased",
                        transaction_type=TransactionType.EXPIRATION.value,
                        description="EVENT account expired - credits reset to 0",
                        created_at=now,
                    ),
                )
        except RepositoryError:
            logger.exception("Failed to deactivate account %s", email)
            result.failed.append(email)
            continue
        logger.info("Deactivated EVENT account %s", email)
        result.deactivated.append(email)

    await db.commit(session)
    return result
