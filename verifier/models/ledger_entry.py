"""
Ledger entry model.

Records balance movements. Deposit entries written by the crediting
engine carry the on-chain transaction hash in a unique column, which is
the idempotency key for crediting.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Index,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from verifier.config.constants import LEDGER_STATUS_COMPLETED, LEDGER_TYPE_DEPOSIT
from verifier.models.base import Base
from verifier.models.types import (
    ADDRESS_LENGTH,
    TX_HASH_LENGTH,
    USER_ID_LENGTH,
    TokenAmountType,
)


class LedgerEntry(Base):
    """Ledger entry - one row per balance movement."""

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint(
            'amount >= 0', name='check_transaction_amount_non_negative'
        ),
        Index('idx_transactions_user_type', 'user_id', 'type'),
    )

    # Primary key
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Owner
    user_id: Mapped[str] = mapped_column(
        String(USER_ID_LENGTH), nullable=False, index=True
    )

    # Movement
    amount: Mapped[Decimal] = mapped_column(
        TokenAmountType, nullable=False
    )
    type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LEDGER_TYPE_DEPOSIT
    )  # deposit, withdrawal, trade, ...
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=LEDGER_STATUS_COMPLETED
    )
    description: Mapped[str | None] = mapped_column(
        Text, nullable=True
    )

    # Blockchain data (deposits only)
    tx_hash: Mapped[str | None] = mapped_column(
        String(TX_HASH_LENGTH), nullable=True, unique=True, index=True
    )
    block_number: Mapped[int | None] = mapped_column(
        BigInteger, nullable=True
    )
    from_address: Mapped[str | None] = mapped_column(
        String(ADDRESS_LENGTH), nullable=True
    )
    amount_raw: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )  # raw integer value for precision

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<LedgerEntry(id={self.id}, user_id={self.user_id}, "
            f"type={self.type}, amount={self.amount}, tx_hash={self.tx_hash})>"
        )
