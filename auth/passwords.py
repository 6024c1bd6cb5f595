"""Password hashing for event signup credentials."""

import logging

from passlib.context import CryptContext
from passlib.exc import MissingBackendError

import config
from errors import HashingError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=config.settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt.

    Args:
        password: Plain text password

    Returns:
        Salted bcrypt hash

    Raises:
        HashingError: If the bcrypt backend is unavailable
        ValueError: If bcrypt refuses the password itself (e.g. a NUL byte)
    """
    try:
        return pwd_context.hash(password)
    except MissingBackendError as e:
        logger.error("Password hashing backend unavailable: %s", e)
        raise HashingError("Password hashing is unavailable") from e


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Check a password against a stored hash.

    Returns False for empty input or a hash passlib cannot identify.

    Raises:
        HashingError: If the bcrypt backend is unavailable
    """
    if not password or not hashed_password:
        return False
    try:
        return pwd_context.verify(password, hashed_password)
    except MissingBackendError as e:
        raise HashingError("Password hashing is unavailable") from e
    except (ValueError, TypeError):
        return False
