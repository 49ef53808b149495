"""
Balance repository.

Data access layer for UserBalance model.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from verifier.models.user_balance import UserBalance
from verifier.repositories.base import BaseRepository

# Dialects with INSERT ... ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class BalanceRepository(BaseRepository[UserBalance]):
    """Balance repository with crediting operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize balance repository."""
        super().__init__(UserBalance, session)

    async def get_balance(self, user_id: str) -> Decimal:
        """
        Get spendable balance, zero when the user has no record.

        Args:
            user_id: User ID

        Returns:
            Current balance
        """
        record = await self.get_by_id(user_id)
        return record.balance if record else Decimal("0")

    async def credit_deposit(self, user_id: str, amount: Decimal) -> None:
        """
        Add a deposit to balance and lifetime deposit counter.

        Runs as one INSERT ... ON CONFLICT (user_id) DO UPDATE: a missing
        record is created with the amount, an existing one is incremented
        by the database. Concurrent first credits of the same user both
        land on the row instead of one failing the primary key.

        Args:
            user_id: User ID
            amount: Non-negative amount to credit

        Raises:
            ValueError: If amount is negative
            NotImplementedError: If the ledger store has no upsert support
        """
        if amount < 0:
            raise ValueError(f"Deposit amount must be non-negative: {amount}")

        dialect = self.session.bind.dialect.name
        try:
            insert = UPSERT_INSERTS[dialect]
        except KeyError:
            raise NotImplementedError(
                f"Balance upsert is not supported on {dialect}"
            ) from None

        stmt = insert(UserBalance).values(
            user_id=user_id,
            balance=amount,
            total_deposited=amount,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserBalance.user_id],
            set_={
                "balance": UserBalance.balance + stmt.excluded.balance,
                "total_deposited": (
                    UserBalance.total_deposited + stmt.excluded.total_deposited
                ),
                "updated_at": datetime.now(UTC),
            },
        )
        await self.session.execute(stmt)
