"""JWT token creation and validation."""

from datetime import datetime, timedelta, UTC

from jose import jwt, JWTError

import config
from auth.schemas import TokenPayload


def create_admin_token(
    email: str,
    expires_in_hours: int | None = None,
) -> str:
    """
    Create a JWT token identifying an administrator.

    Args:
        email: Admin email (must also be listed in ADMIN_EMAILS to be accepted)
        expires_in_hours: Token expiration in hours (default from settings)

    Returns:
        Encoded JWT token string
    """
    if expires_in_hours is None:
        expires_in_hours = config.settings.ADMIN_TOKEN_EXPIRES_HOURS
    exp = datetime.now(UTC) + timedelta(hours=expires_in_hours)

    payload = {
        "sub": email,
        "email": email,
        "exp": int(exp.timestamp()),  # JWT expects Unix timestamp
    }

    return jwt.encode(
        payload,
        config.settings.JWT_SECRET,
        algorithm=config.settings.JWT_ALGORITHM,
    )


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        TokenPayload with decoded claims

    Raises:
        JWTError: If token is invalid, expired or lacks required claims
    """
    try:
        payload = jwt.decode(
            token,
            config.settings.JWT_SECRET,
            algorithms=[config.settings.JWT_ALGORITHM],
        )

        return TokenPayload(
            sub=payload["sub"],
            email=payload["email"],
            exp=datetime.fromtimestamp(payload["exp"], UTC),
        )
    except JWTError as e:
        raise JWTError(f"Invalid token: {str(e)}") from e
    except (KeyError, TypeError, ValueError) as e:
        raise JWTError(f"Invalid token claims: {str(e)}") from e
