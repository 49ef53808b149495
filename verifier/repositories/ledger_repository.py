"""
Ledger repository.

Data access layer for LedgerEntry model.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from verifier.config.constants import (
    DEPOSIT_DESCRIPTION_TEMPLATE,
    LEDGER_STATUS_COMPLETED,
    LEDGER_TYPE_DEPOSIT,
)
from verifier.models.ledger_entry import LedgerEntry
from verifier.repositories.base import BaseRepository

if TYPE_CHECKING:
    from verifier.services.blockchain.log_decoder import TransferEvent


class LedgerRepository(BaseRepository[LedgerEntry]):
    """Ledger repository with deposit-specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize ledger repository."""
        super().__init__(LedgerEntry, session)

    async def get_by_tx_hash(
        self, tx_hash: str
    ) -> LedgerEntry | None:
        """
        Get ledger entry by transaction hash.

        Args:
            tx_hash: Transaction hash (lower-case)

        Returns:
            LedgerEntry or None
        """
        return await self.get_by(tx_hash=tx_hash.lower())

    async def get_recorded_tx_hashes(
        self, tx_hashes: Iterable[str]
    ) -> set[str]:
        """
        Return the subset of hashes that already have a ledger entry.

        Args:
            tx_hashes: Candidate transaction hashes

        Returns:
            Set of lower-case hashes already recorded
        """
        candidates = {tx_hash.lower() for tx_hash in tx_hashes}
        if not candidates:
            return set()

        stmt = select(LedgerEntry.tx_hash).where(
            LedgerEntry.tx_hash.in_(candidates)
        )
        result = await self.session.execute(stmt)
        return {row for row in result.scalars().all() if row}

    async def create_deposit_entry(
        self, user_id: str, event: "TransferEvent"
    ) -> LedgerEntry:
        """
        Insert a completed deposit entry for a transfer.

        Args:
            user_id: Credited user
            event: Decoded transfer

        Returns:
            Created entry

        Raises:
            IntegrityError: If the transaction hash is already recorded
        """
        return await self.create(
            user_id=user_id,
            amount=event.amount,
            type=LEDGER_TYPE_DEPOSIT,
            status=LEDGER_STATUS_COMPLETED,
            description=DEPOSIT_DESCRIPTION_TEMPLATE.format(
                tx_hash=event.tx_hash
            ),
            tx_hash=event.tx_hash,
            block_number=event.block_number,
            from_address=event.from_address,
            amount_raw=str(event.raw_amount),
        )

    async def get_deposits_by_user(self, user_id: str) -> list[LedgerEntry]:
        """
        Get deposit entries of a user.

        Args:
            user_id: User ID

        Returns:
            List of deposit entries
        """
        return await self.find_by(user_id=user_id, type=LEDGER_TYPE_DEPOSIT)
