"""Event signup model and schemas."""

import enum
import re
from datetime import datetime, UTC
from typing import Literal, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from sqlalchemy import DateTime, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from db import Base


class SignupStatus(str, enum.Enum):
    """Signup status enum."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"


# Statuses that hold the email; a new signup for the same email is refused
ACTIVE_STATUSES = (SignupStatus.PENDING.value, SignupStatus.APPROVED.value)
TERMINAL_STATUSES = (
    SignupStatus.APPROVED.value,
    SignupStatus.REJECTED.value,
    SignupStatus.EXPIRED.value,
)

_active_email_clause = text("status IN ('pending', 'approved')")


class EventSignup(Base):
    """EventSignup ORM model - pending self-signups awaiting admin review."""

    __tablename__ = "event_signups"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
        index=True,
    )
    organization_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SignupStatus.PENDING.value,
        index=True,
    )

    # Marketing attribution
    campaign_source: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    utm_source: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    utm_medium: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    utm_campaign: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Decision tracking
    decided_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    decided_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Filled on approval
    account_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        # One active signup per email; terminal records may share it
        Index(
            "ux_event_signups_email_active",
            "email",
            unique=True,
            postgresql_where=_active_email_clause,
            sqlite_where=_active_email_clause,
        ),
    )


PHONE_STRIP_RE = re.compile(r"[\s-]")
PHONE_RE = re.compile(r"^[0-9]{8}$")


# Pydantic schemas
class UtmParams(BaseModel):
    """UTM parameters captured by the landing page."""

    source: Optional[str] = Field(None, max_length=100)
    medium: Optional[str] = Field(None, max_length=100)
    campaign: Optional[str] = Field(None, max_length=100)


class SignupCreate(BaseModel):
    """Schema for submitting an event signup."""

    organization_name: str = Field(..., max_length=255)
    contact_name: str = Field(..., max_length=255)
    phone: str = Field(..., max_length=32)
    email: EmailStr
    password: str = Field(..., max_length=128)
    campaign_source: Optional[str] = Field(None, max_length=100)
    utm: Optional[UtmParams] = None

    @field_validator("organization_name", "contact_name")
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str) -> str:
        """Phone numbers are exactly 8 digits; spaces and hyphens are dropped."""
        cleaned = PHONE_STRIP_RE.sub("", value.strip())
        if not PHONE_RE.match(cleaned):
            raise ValueError("phone number must be exactly 8 digits")
        return cleaned

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        """At least 8 characters with an upper case, a lower case and a special character."""
        if "\x00" in value:
            raise ValueError("password must not contain NUL characters")
        if (
            len(value) < 8
            or not re.search(r"[A-Z]", value)
            or not re.search(r"[a-z]", value)
            or not re.search(r"[^A-Za-z0-9]", value)
        ):
            raise ValueError(
                "password must be at least 8 characters and contain upper case, "
                "lower case and special characters"
            )
        return value


class SignupCreateResponse(BaseModel):
    """Response schema for signup submission."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    status: str
    created_at: datetime
    message: str = "Your request has been received. We will contact you within 24 hours."


class SignupResponse(BaseModel):
    """Schema for signup response (admin views). Never exposes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_name: str
    contact_name: str
    phone: str
    email: str
    status: str
    campaign_source: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    decided_at: Optional[datetime] = None
    decided_by: Optional[str] = None
    rejection_reason: Optional[str] = None
    account_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class SignupListResponse(BaseModel):
    """Paginated admin listing with per-status counts."""

    data: list[SignupResponse]
    pagination: Pagination
    statistics: dict[str, int]


class SignupApproveRequest(BaseModel):
    """Request schema for approving a signup."""

    credits: Optional[int] = Field(None, ge=0, le=100000)


class SignupRejectRequest(BaseModel):
    """Request schema for rejecting a signup."""

    reason: Optional[str] = Field(None, max_length=1000)


class SignupDecisionRequest(BaseModel):
    """Request schema for the combined decision endpoint."""

    id: UUID
    decision: Literal["approve", "reject"]
    credits: Optional[int] = Field(None, ge=0, le=100000)
    reason: Optional[str] = Field(None, max_length=1000)


class SignupApproveResponse(BaseModel):
    """Result of an approval: the updated signup and the provisioned account."""

    signup: SignupResponse
    account_id: UUID
    credits: int
    expiry_date: datetime
    notification_sent: bool
