"""SQLAlchemy models for Level Up."""

from .talent_transaction import TalentTransaction, TransactionType
from .user import User, UserRole

__all__ = [
    "TalentTransaction",
    "TransactionType",
    "User",
    "UserRole",
]
