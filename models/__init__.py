"""Database models."""

from db import Base

# Import all models so Alembic can detect them
from models.signup import EventSignup
from models.account import CreditBalance, CreditTransaction, EventAccount

__all__ = [
    "Base",
    "EventSignup",
    "EventAccount",
    "CreditBalance",
    "CreditTransaction",
]
