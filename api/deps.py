"""FastAPI dependencies for authorization and database."""

from fastapi import Header
from sqlalchemy.ext.asyncio import AsyncSession

from auth.admin import admin_email_from_header, is_cron_authorized
from db import get_db as get_db_session
from errors import AuthorizationError


async def get_db() -> AsyncSession:
    """
    Dependency to get database session.
    Reuses the get_db function from db.py.
    """
    async for session in get_db_session():
        yield session


async def require_admin(
    authorization: str | None = Header(None),
) -> str:
    """
    Dependency to require admin access.

    Args:
        authorization: Authorization header (``Bearer <admin jwt>``)

    Returns:
        The admin's email

    Raises:
        AuthorizationError: For any missing, invalid or non-admin credential
    """
    admin_email = admin_email_from_header(authorization)
    if admin_email is None:
        raise AuthorizationError("Admin check failed")
    return admin_email


async def require_cron(
    authorization: str | None = Header(None),
) -> None:
    """Dependency to require the scheduler's bearer secret."""
    if not is_cron_authorized(authorization):
        raise AuthorizationError("Cron check failed")
