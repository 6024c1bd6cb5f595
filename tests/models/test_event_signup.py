"""DB-backed tests for the EventSignup and EventAccount models.

These tests verify model defaults and the database constraints that back
the one-active-signup-per-email rule.
"""

from datetime import datetime, timedelta, UTC
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.account import CreditBalance, EventAccount
from models.signup import EventSignup, SignupResponse, SignupStatus


def _signup(email: str = "test@example.com", **fields) -> EventSignup:
    values = {
        "organization_name": "Acme ApS",
        "contact_name": "Alex Jensen",
        "phone": "12345678",
        "email": email,
        "password_hash": "$2b$04$notarealhash",
    }
    values.update(fields)
    return EventSignup(**values)


@pytest.mark.asyncio
async def test_create_signup_minimal(db_session: AsyncSession):
    """
    Test: Can create a signup with only the required fields.

    Status defaults to pending; decision and attribution fields start empty.
    """
    signup = _signup()
    db_session.add(signup)
    await db_session.commit()
    await db_session.refresh(signup)

    assert signup.id is not None
    assert signup.status == SignupStatus.PENDING.value
    assert signup.campaign_source is None
    assert signup.utm_source is None
    assert signup.decided_at is None
    assert signup.decided_by is None
    assert signup.rejection_reason is None
    assert signup.account_id is None
    assert isinstance(signup.created_at, datetime)
    assert isinstance(signup.updated_at, datetime)


@pytest.mark.asyncio
async def test_two_pending_signups_for_same_email_violate_index(db_session: AsyncSession):
    db_session.add(_signup())
    await db_session.commit()

    db_session.add(_signup())
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


@pytest.mark.asyncio
@pytest.mark.parametrize("terminal", [SignupStatus.REJECTED.value, SignupStatus.EXPIRED.value])
async def test_terminal_signups_release_the_email(db_session: AsyncSession, terminal):
    """Test: Rejected and expired records may share an email with a pending one."""
    db_session.add_all([
        _signup(status=terminal, decided_at=datetime.now(UTC)),
        _signup(status=terminal, decided_at=datetime.now(UTC)),
        _signup(),
    ])
    await db_session.commit()


@pytest.mark.asyncio
async def test_approved_signup_still_holds_the_email(db_session: AsyncSession):
    db_session.add(_signup(status=SignupStatus.APPROVED.value, decided_at=datetime.now(UTC)))
    await db_session.commit()

    db_session.add(_signup())
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


def test_signup_response_hides_password_hash():
    now = datetime.now(UTC)
    signup = _signup(id=uuid4(), status="pending", created_at=now, updated_at=now)

    dumped = SignupResponse.model_validate(signup).model_dump()

    assert "password_hash" not in dumped
    assert "password" not in dumped
    assert dumped["email"] == "test@example.com"


@pytest.mark.asyncio
async def test_event_account_defaults(db_session: AsyncSession):
    signup = _signup()
    db_session.add(signup)
    await db_session.flush()

    now = datetime.now(UTC)
    account = EventAccount(
        signup_id=signup.id,
        email=signup.email,
        organization_name=signup.organization_name,
        contact_name=signup.contact_name,
        phone=signup.phone,
        password_hash=signup.password_hash,
        event_signup_date=now,
        event_expiry_date=now + timedelta(days=14),
    )
    db_session.add(account)
    await db_session.flush()
    db_session.add(CreditBalance(account_id=account.id))
    await db_session.commit()
    await db_session.refresh(account)

    assert account.account_type == "EVENT"
    assert account.is_active is True

    balance = await db_session.get(CreditBalance, account.id)
    assert balance.purchased_credits == 0
    assert balance.subscription_credits == 0


@pytest.mark.asyncio
async def test_one_account_per_email(db_session: AsyncSession):
    first = _signup("a@x.com", status=SignupStatus.APPROVED.value)
    second = _signup("a@x.com", status=SignupStatus.REJECTED.value)
    db_session.add_all([first, second])
    await db_session.flush()

    now = datetime.now(UTC)
    for signup in (first, second):
        db_session.add(
            EventAccount(
                signup_id=signup.id,
                email="a@x.com",
                organization_name="Acme ApS",
                contact_name="Alex Jensen",
                phone="12345678",
                password_hash="$2b$04$notarealhash",
                event_signup_date=now,
                event_expiry_date=now + timedelta(days=14),
            )
        )
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()
