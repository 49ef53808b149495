"""
Repositories package.

Data access layer over the deposit ledger and user balances.
"""

from verifier.repositories.balance_repository import BalanceRepository
from verifier.repositories.base import BaseRepository
from verifier.repositories.ledger_repository import LedgerRepository


__all__ = [
    "BalanceRepository",
    "BaseRepository",
    "LedgerRepository",
]
