"""
Deposit crediting service.

Records confirmed on-chain transfers in the ledger and credits user
balances exactly once per transaction hash.

Idempotency rests on the unique tx_hash column of the ledger: a second
insert of the same hash fails with a constraint violation, which is read
as "already credited". The ledger insert and the balance credit of an
event commit in one transaction, so a balance is never credited without
its ledger entry.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from verifier.config.constants import DEFAULT_TOKEN_DECIMALS
from verifier.repositories.balance_repository import BalanceRepository
from verifier.repositories.ledger_repository import LedgerRepository
from verifier.services.blockchain.log_decoder import TransferEvent
from verifier.utils.exceptions import LedgerWriteError
from verifier.utils.formatters import to_decimal_amount
from verifier.utils.security import mask_tx_hash


@dataclass
class CreditResult:
    """Outcome of crediting a batch of transfers."""

    decimals: int = DEFAULT_TOKEN_DECIMALS
    credited_txs: list[str] = field(default_factory=list)
    newly_credited_raw: int = 0
    duplicates: int = 0
    failed: int = 0
    failed_txs: list[str] = field(default_factory=list)

    @property
    def newly_credited(self) -> Decimal:
        """Exact sum of credited amounts, scaled once from smallest units."""
        return to_decimal_amount(self.newly_credited_raw, self.decimals)


class CreditingService:
    """
    Deduplication and crediting engine.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        decimals: int = DEFAULT_TOKEN_DECIMALS,
    ) -> None:
        """
        Initialize service.

        Args:
            session_factory: Factory of ledger store sessions; every event
                gets its own session and transaction
            decimals: Token decimals used to scale credited totals
        """
        self.session_factory = session_factory
        self.decimals = decimals

    async def credit_transfers(
        self,
        user_id: str,
        events: Sequence[TransferEvent],
    ) -> CreditResult:
        """
        Credit confirmed transfers to a user, skipping recorded ones.

        Events are processed in the given order. A ledger failure on one
        event is counted and does not stop the others.

        Args:
            user_id: Authenticated user to credit
            events: Confirmed transfers matching the user's sender wallet

        Returns:
            CreditResult
        """
        result = CreditResult(decimals=self.decimals)
        if not events:
            return result

        recorded = await self._get_recorded(events)
        seen: set[str] = set()

        for event in events:
            if event.tx_hash in recorded or event.tx_hash in seen:
                result.duplicates += 1
                logger.info(
                    f"⏩ Deposit {mask_tx_hash(event.tx_hash)} already credited. Skipping."
                )
                continue
            seen.add(event.tx_hash)

            try:
                credited = await self.credit_transfer(user_id, event)
            except LedgerWriteError as e:
                result.failed += 1
                result.failed_txs.append(event.tx_hash)
                logger.error(
                    f"❌ Failed to credit deposit {mask_tx_hash(event.tx_hash)} "
                    f"for user {user_id}: {e}"
                )
                continue

            if credited:
                result.credited_txs.append(event.tx_hash)
                result.newly_credited_raw += event.raw_amount
            else:
                result.duplicates += 1

        return result

    async def credit_transfer(
        self, user_id: str, event: TransferEvent
    ) -> bool:
        """
        Record and credit a single transfer atomically.

        Args:
            user_id: User to credit
            event: Confirmed transfer

        Returns:
            True if credited now, False if the hash was already recorded

        Raises:
            LedgerWriteError: If the store rejected the write for any other
                reason; nothing was committed
        """
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    await LedgerRepository(session).create_deposit_entry(
                        user_id, event
                    )
                    await BalanceRepository(session).credit_deposit(
                        user_id, event.amount
                    )
        except IntegrityError as e:
            # Lost the tx_hash race, or a check constraint failed
            if await self._is_recorded(event.tx_hash):
                logger.info(
                    f"⏩ Deposit {mask_tx_hash(event.tx_hash)} was credited "
                    f"concurrently. Skipping."
                )
                return False
            raise LedgerWriteError(
                f"Constraint violation crediting {event.tx_hash}: {e.orig}"
            ) from e
        except SQLAlchemyError as e:
            raise LedgerWriteError(
                f"Database error crediting {event.tx_hash}: {e}"
            ) from e

        logger.success(
            f"✅ Credited deposit {event.amount} to user {user_id} "
            f"(TX: {mask_tx_hash(event.tx_hash)}, block {event.block_number})"
        )
        return True

    async def _get_recorded(
        self, events: Sequence[TransferEvent]
    ) -> set[str]:
        """Batch lookup of already recorded hashes (fast path only)."""
        try:
            async with self.session_factory() as session:
                return await LedgerRepository(session).get_recorded_tx_hashes(
                    event.tx_hash for event in events
                )
        except SQLAlchemyError as e:
            # The unique constraint still guards every insert below
            logger.warning(f"Recorded deposit lookup failed: {e}")
            return set()

    async def _is_recorded(self, tx_hash: str) -> bool:
        """Check whether a ledger entry exists for the hash."""
        try:
            async with self.session_factory() as session:
                entry = await LedgerRepository(session).get_by_tx_hash(tx_hash)
        except SQLAlchemyError as e:
            raise LedgerWriteError(
                f"Database error checking {tx_hash}: {e}"
            ) from e
        return entry is not None
