"""
Deposit verification service.

Orchestrates a verification request:
configuration check -> caller/input validation -> chain head ->
Transfer log scan -> confirmation filter -> crediting.

Everything runs sequentially within the request. Validation failures are
raised before any RPC call is made.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from verifier.config.constants import MAX_LOOKBACK_BLOCKS, MAX_MIN_CONFIRMATIONS
from verifier.config.settings import Settings
from verifier.services.blockchain.confirmations import filter_confirmed
from verifier.services.blockchain.rpc_client import RpcClient
from verifier.services.blockchain.transfer_scanner import TransferScanner
from verifier.services.deposit.crediting_service import CreditingService
from verifier.utils.exceptions import DecodeError, InvalidInput, Unauthorized
from verifier.utils.formatters import format_amount, to_decimal_amount
from verifier.utils.security import mask_address
from verifier.validators import (
    normalize_wallet_address,
    validate_amount,
    validate_int_in_range,
    validate_wallet_address,
)


@dataclass
class DepositConfig:
    """Public deposit configuration."""

    deposit_address: str
    token_address: str
    decimals: int

    def to_dict(self) -> dict[str, Any]:
        """Response body of config mode."""
        return {
            "depositAddress": self.deposit_address,
            "tokenAddress": self.token_address,
            "decimals": self.decimals,
        }


@dataclass
class VerifyParams:
    """Validated verify-mode input."""

    from_address: str
    min_amount: Decimal | None
    lookback_blocks: int
    min_confirmations: int


@dataclass
class VerificationResult:
    """Summary of one verification request."""

    from_address: str
    deposit_address: str
    token_address: str
    decimals: int
    latest_block: int
    from_block: int
    total_found: Decimal = Decimal("0")
    newly_credited: Decimal = Decimal("0")
    matched_count: int = 0
    credited_txs: list[str] = field(default_factory=list)
    pending_count: int = 0
    duplicate_count: int = 0
    failed_count: int = 0
    failed_txs: list[str] = field(default_factory=list)
    decode_errors: int = 0
    below_minimum_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Response body of verify mode; amounts as exact decimal strings."""
        return {
            "fromAddress": self.from_address,
            "depositAddress": self.deposit_address,
            "tokenAddress": self.token_address,
            "decimals": self.decimals,
            "totalFound": format_amount(self.total_found),
            "newlyCredited": format_amount(self.newly_credited),
            "matchedCount": self.matched_count,
            "creditedTxs": list(self.credited_txs),
            "pendingCount": self.pending_count,
            "duplicateCount": self.duplicate_count,
            "failedCount": self.failed_count,
            "failedTxs": list(self.failed_txs),
            "decodeErrors": self.decode_errors,
            "belowMinimumCount": self.below_minimum_count,
            "latestBlock": self.latest_block,
            "fromBlock": self.from_block,
        }


class VerificationService:
    """Request-level orchestration of deposit verification."""

    def __init__(
        self,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
        rpc_client: RpcClient | None = None,
    ) -> None:
        """
        Initialize service.

        Args:
            settings: Application settings
            session_factory: Ledger store session factory
            rpc_client: Pre-built RPC client; built from settings on first
                use when None
        """
        self.settings = settings
        self.crediting_service = CreditingService(
            session_factory, decimals=settings.token_decimals
        )
        self._rpc_client = rpc_client

    def get_rpc_client(self) -> RpcClient:
        """Return the RPC client, creating it from settings if needed."""
        if self._rpc_client is None:
            rpc_url, _ = self.settings.require_chain_config()
            self._rpc_client = RpcClient(
                rpc_url, timeout=self.settings.rpc_timeout_seconds
            )
        return self._rpc_client

    def get_config(self) -> DepositConfig:
        """
        Static deposit configuration. No chain access.

        Raises:
            ConfigurationError: If RPC endpoint or deposit address is absent
        """
        _, deposit_address = self.settings.require_chain_config()
        return DepositConfig(
            deposit_address=deposit_address,
            token_address=self.settings.token_contract_address,
            decimals=self.settings.token_decimals,
        )

    def validate_params(
        self,
        from_address: Any,
        min_amount: Any = None,
        lookback_blocks: Any = None,
        min_confirmations: Any = None,
    ) -> VerifyParams:
        """
        Validate verify-mode input.

        Raises:
            InvalidInput: On the first invalid parameter
        """
        is_valid, error = validate_wallet_address(from_address)
        if not is_valid:
            raise InvalidInput(f"Invalid fromAddress: {error}")

        parsed_min_amount = None
        if min_amount is not None:
            is_valid, parsed_min_amount, error = validate_amount(min_amount)
            if not is_valid:
                raise InvalidInput(f"Invalid minAmount: {error}")

        if lookback_blocks is None:
            lookback_blocks = self.settings.default_lookback_blocks
        else:
            is_valid, lookback_blocks, error = validate_int_in_range(
                lookback_blocks, 1, MAX_LOOKBACK_BLOCKS
            )
            if not is_valid:
                raise InvalidInput(f"Invalid lookbackBlocks: {error}")

        if min_confirmations is None:
            min_confirmations = self.settings.default_min_confirmations
        else:
            is_valid, min_confirmations, error = validate_int_in_range(
                min_confirmations, 0, MAX_MIN_CONFIRMATIONS
            )
            if not is_valid:
                raise InvalidInput(f"Invalid minConfirmations: {error}")

        return VerifyParams(
            from_address=normalize_wallet_address(from_address),
            min_amount=parsed_min_amount,
            lookback_blocks=lookback_blocks,
            min_confirmations=min_confirmations,
        )

    async def verify(
        self,
        user_id: str | None,
        from_address: Any,
        min_amount: Any = None,
        lookback_blocks: Any = None,
        min_confirmations: Any = None,
    ) -> VerificationResult:
        """
        Find confirmed deposits from a wallet and credit new ones.

        Args:
            user_id: Authenticated caller; the only account ever credited
            from_address: Wallet the caller claims to have sent from
            min_amount: Informational unless ENFORCE_MIN_AMOUNT is set
            lookback_blocks: Scan depth from the chain head
            min_confirmations: Required confirmation depth

        Returns:
            VerificationResult

        Raises:
            ConfigurationError: Missing chain configuration
            Unauthorized: No caller identity
            InvalidInput: Malformed parameters
            RpcError: Chain endpoint failure (retryable)
            DecodeError: Every returned log was malformed
        """
        _, deposit_address = self.settings.require_chain_config()

        if not user_id:
            raise Unauthorized("Unauthorized")

        params = self.validate_params(
            from_address, min_amount, lookback_blocks, min_confirmations
        )

        rpc_client = self.get_rpc_client()
        scanner = TransferScanner(
            rpc_client,
            token_address=self.settings.token_contract_address,
            deposit_address=deposit_address,
            decimals=self.settings.token_decimals,
            chunk_size=self.settings.log_chunk_size,
        )

        latest_block = await rpc_client.get_latest_block()
        from_block = max(0, latest_block - params.lookback_blocks)
        logger.info(
            f"[Verify] user={user_id} wallet={mask_address(params.from_address)} "
            f"window {from_block}-{latest_block} "
            f"(min confirmations {params.min_confirmations})"
        )

        scan = await scanner.scan_deposits(
            params.from_address, from_block, latest_block
        )
        if scan.raw_count and scan.decode_errors == scan.raw_count:
            raise DecodeError(
                f"All {scan.raw_count} transfer logs were malformed"
            )

        confirmed, pending = filter_confirmed(
            scan.events, latest_block, params.min_confirmations
        )

        eligible = confirmed
        below_minimum = 0
        if self.settings.enforce_min_amount and params.min_amount is not None:
            eligible = [e for e in confirmed if e.amount >= params.min_amount]
            below_minimum = len(confirmed) - len(eligible)

        credit = await self.crediting_service.credit_transfers(user_id, eligible)
        total_found_raw = sum(e.raw_amount for e in eligible)

        result = VerificationResult(
            from_address=params.from_address,
            deposit_address=deposit_address,
            token_address=self.settings.token_contract_address,
            decimals=self.settings.token_decimals,
            latest_block=latest_block,
            from_block=from_block,
            total_found=to_decimal_amount(
                total_found_raw, self.settings.token_decimals
            ),
            newly_credited=credit.newly_credited,
            matched_count=len(eligible),
            credited_txs=credit.credited_txs,
            pending_count=len(pending),
            duplicate_count=credit.duplicates,
            failed_count=credit.failed,
            failed_txs=credit.failed_txs,
            decode_errors=scan.decode_errors,
            below_minimum_count=below_minimum,
        )

        logger.info(
            f"[Verify] user={user_id} wallet={mask_address(params.from_address)}: "
            f"{result.matched_count} confirmed, {result.pending_count} pending, "
            f"{len(result.credited_txs)} credited ({result.newly_credited}), "
            f"{result.duplicate_count} already credited, "
            f"{result.failed_count} failed"
        )
        return result

    async def close(self) -> None:
        """Release the RPC client."""
        if self._rpc_client is not None:
            await self._rpc_client.close()
