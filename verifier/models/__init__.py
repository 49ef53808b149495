"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from verifier.models.base import Base
from verifier.models.ledger_entry import LedgerEntry
from verifier.models.user_balance import UserBalance


__all__ = [
    "Base",
    "LedgerEntry",
    "UserBalance",
]
