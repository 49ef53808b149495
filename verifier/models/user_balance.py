"""
User balance model.

One row per user, mutated in place by crediting and by the trading and
withdrawal flows of the platform.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from verifier.models.base import Base
from verifier.models.types import USER_ID_LENGTH, TokenAmountType


class UserBalance(Base):
    """Spendable balance and lifetime deposit counter of a user."""

    __tablename__ = "user_balances"
    __table_args__ = (
        CheckConstraint(
            'balance >= 0', name='check_user_balance_non_negative'
        ),
        CheckConstraint(
            'total_deposited >= 0',
            name='check_user_total_deposited_non_negative'
        ),
    )

    user_id: Mapped[str] = mapped_column(
        String(USER_ID_LENGTH), primary_key=True
    )

    balance: Mapped[Decimal] = mapped_column(
        TokenAmountType, default=Decimal("0"), nullable=False
    )
    total_deposited: Mapped[Decimal] = mapped_column(
        TokenAmountType, default=Decimal("0"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<UserBalance(user_id={self.user_id}, balance={self.balance}, "
            f"total_deposited={self.total_deposited})>"
        )
