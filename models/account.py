"""EventAccount, credit balance and credit ledger models."""

import enum
from datetime import datetime, UTC
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


EVENT_ACCOUNT_TYPE = "EVENT"


class TransactionType(str, enum.Enum):
    """Credit ledger transaction types."""

    ADMIN_GRANT = "admin_grant"
    EXPIRATION = "expiration"


class EventAccount(Base):
    """EventAccount ORM model - time-limited account provisioned on approval."""

    __tablename__ = "event_accounts"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
    )
    signup_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("event_signups.id"),
        nullable=False,
        unique=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    organization_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    account_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EVENT_ACCOUNT_TYPE,
    )
    event_signup_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    event_expiry_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


class CreditBalance(Base):
    """Credit balance per account."""

    __tablename__ = "credit_balances"

    account_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("event_accounts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    subscription_credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    purchased_credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


class CreditTransaction(Base):
    """Append-only credit ledger."""

    __tablename__ = "credit_transactions"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    account_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("event_accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    balance_after: Mapped[int] = mapped_column(Integer, nullable=False)
    credit_type: Mapped[str] = mapped_column(String(20), nullable=False, default="purchased")
    transaction_type: Mapped[str] = mapped_column(String(30), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )


# Pydantic schemas
class EventAccountResponse(BaseModel):
    """Schema for account response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    signup_id: UUID
    email: str
    organization_name: str
    account_type: str
    event_signup_date: datetime
    event_expiry_date: datetime
    is_active: bool
