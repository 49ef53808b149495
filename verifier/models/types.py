"""
Standard type definitions for database models.

Provides consistent types for monetary fields across all models.
"""

from sqlalchemy import DECIMAL

# Token money type for ledger amounts and balances
# Precision: 36 digits total, 18 after decimal point
# Holds every 18-decimal token amount exactly, up to 10^18 whole units
TokenAmountType = DECIMAL(36, 18)

# Hex identifiers
TX_HASH_LENGTH = 66  # 0x + 64 hex
ADDRESS_LENGTH = 42  # 0x + 40 hex
USER_ID_LENGTH = 64  # identity provider subject (UUID or similar)
