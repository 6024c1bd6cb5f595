"""JWT token payload schemas."""

from datetime import datetime

from pydantic import BaseModel


class TokenPayload(BaseModel):
    """Admin JWT token payload structure."""

    sub: str  # admin email (standard JWT claim)
    email: str  # checked against the ADMIN_EMAILS allowlist
    exp: datetime  # Expiration time (standard JWT claim)
