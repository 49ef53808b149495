"""
Token transfer scanning operations.

This module handles:
- Transfer log queries from a sender wallet to the deposit address
- Chunked block ranges to stay under node range limits
- Decoding and in-process address filtering
"""

from dataclasses import dataclass, field

from loguru import logger

from verifier.config.constants import (
    DEFAULT_LOG_CHUNK_SIZE,
    DEFAULT_TOKEN_DECIMALS,
    TRANSFER_TOPIC,
)
from verifier.utils.security import mask_address

from .log_decoder import TransferEvent, decode_transfer_logs
from .rpc_client import RpcClient, address_to_topic


@dataclass
class ScanResult:
    """Decoded transfers found in a block window."""

    from_block: int
    to_block: int
    events: list[TransferEvent] = field(default_factory=list)
    raw_count: int = 0
    decode_errors: int = 0
    mismatched: int = 0


class TransferScanner:
    """
    Scans Transfer events of the deposit token into the deposit address.
    """

    def __init__(
        self,
        rpc_client: RpcClient,
        token_address: str,
        deposit_address: str,
        decimals: int = DEFAULT_TOKEN_DECIMALS,
        chunk_size: int = DEFAULT_LOG_CHUNK_SIZE,
    ) -> None:
        """
        Initialize transfer scanner.

        Args:
            rpc_client: JSON-RPC client
            token_address: Token contract address
            deposit_address: Custodial deposit address (receiver)
            decimals: Token decimals
            chunk_size: Number of blocks per eth_getLogs call
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive: {chunk_size}")

        self.rpc_client = rpc_client
        self.token_address = token_address.lower()
        self.deposit_address = deposit_address.lower()
        self.decimals = decimals
        self.chunk_size = chunk_size

    def iter_chunks(self, from_block: int, to_block: int):
        """Yield inclusive (start, end) ranges from oldest to newest."""
        start = from_block
        while start <= to_block:
            end = min(to_block, start + self.chunk_size - 1)
            yield start, end
            start = end + 1

    async def scan_deposits(
        self,
        sender: str,
        from_block: int,
        to_block: int,
    ) -> ScanResult:
        """
        Find all token transfers from sender to the deposit address.

        Any chunk failure propagates: a partial window would make
        totals look complete when they are not.

        Args:
            sender: Sender wallet address
            from_block: First block (inclusive)
            to_block: Last block (inclusive)

        Returns:
            ScanResult with events in chain order

        Raises:
            RpcError: If any eth_getLogs call fails
        """
        sender = sender.lower()
        topics = [
            TRANSFER_TOPIC,
            address_to_topic(sender),
            address_to_topic(self.deposit_address),
        ]

        logger.info(
            f"[Transfer Scan] Starting deposit scan: "
            f"sender={mask_address(sender)}, "
            f"receiver={mask_address(self.deposit_address)}, "
            f"blocks {from_block}-{to_block}, chunk size {self.chunk_size}"
        )

        result = ScanResult(from_block=from_block, to_block=to_block)

        for chunk_start, chunk_end in self.iter_chunks(from_block, to_block):
            logs = await self.rpc_client.get_logs(
                chunk_start, chunk_end, self.token_address, topics
            )
            logger.debug(
                f"[Transfer Scan] Chunk {chunk_start}-{chunk_end}: "
                f"{len(logs)} logs"
            )

            result.raw_count += len(logs)
            events, failed = decode_transfer_logs(logs, self.decimals)
            result.decode_errors += failed

            for event in events:
                # The node filter is not trusted on its own
                if (
                    event.to_address != self.deposit_address
                    or event.from_address != sender
                ):
                    result.mismatched += 1
                    logger.warning(
                        f"[Transfer Scan] Ignoring transfer "
                        f"{mask_address(event.from_address)} -> "
                        f"{mask_address(event.to_address)} outside filter"
                    )
                    continue
                result.events.append(event)

        logger.info(
            f"[Transfer Scan] Done: {result.raw_count} logs, "
            f"{len(result.events)} matching transfers, "
            f"{result.decode_errors} malformed"
        )
        return result
