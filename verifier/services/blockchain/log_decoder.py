"""
Transfer event log decoding.

This module handles:
- Parsing raw eth_getLogs entries into TransferEvent records
- Fixed-point amount scaling without floating point
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from eth_utils import decode_hex, is_hex
from loguru import logger

from verifier.config.constants import DEFAULT_TOKEN_DECIMALS, TRANSFER_TOPIC
from verifier.utils.exceptions import DecodeError
from verifier.utils.formatters import to_decimal_amount
from verifier.utils.security import mask_tx_hash

from .rpc_client import from_hex_quantity


@dataclass(frozen=True)
class TransferEvent:
    """Token transfer decoded from an event log."""

    tx_hash: str
    block_number: int
    from_address: str
    to_address: str
    raw_amount: int
    amount: Decimal
    log_index: int | None = None


def _hex_bytes(value: Any, length: int, field: str) -> bytes:
    """Decode a 0x-prefixed hex string of an exact byte length."""
    if not isinstance(value, str) or not value.lower().startswith("0x"):
        raise DecodeError(f"{field} is not a 0x-prefixed hex string")
    if len(value) != 2 + length * 2 or not is_hex(value):
        raise DecodeError(f"{field} must be {length} bytes of hex")
    return decode_hex(value)


def _topic_to_address(topic: Any, field: str) -> str:
    """Take the low 20 bytes of a 32-byte topic as an address."""
    raw = _hex_bytes(topic, 32, field)
    if any(raw[:12]):
        raise DecodeError(f"{field} is not a padded address")
    return "0x" + raw[12:].hex()


def decode_transfer_log(
    raw_log: dict[str, Any],
    decimals: int = DEFAULT_TOKEN_DECIMALS,
) -> TransferEvent:
    """
    Decode a single Transfer(address,address,uint256) log.

    The amount is the whole 32-byte data payload read as an unsigned
    big-endian integer.

    Args:
        raw_log: Log object from eth_getLogs
        decimals: Token decimals

    Returns:
        TransferEvent

    Raises:
        DecodeError: If any field is missing or malformed
    """
    if not isinstance(raw_log, dict):
        raise DecodeError("Log entry is not an object")

    topics = raw_log.get("topics")
    if not isinstance(topics, list) or len(topics) < 3:
        raise DecodeError("Transfer log must have 3 topics")
    if str(topics[0]).lower() != TRANSFER_TOPIC:
        raise DecodeError("Log is not a Transfer event")

    tx_hash_bytes = _hex_bytes(
        raw_log.get("transactionHash"), 32, "transactionHash"
    )
    data = _hex_bytes(raw_log.get("data"), 32, "data")
    raw_amount = int.from_bytes(data, "big")

    try:
        block_number = from_hex_quantity(raw_log.get("blockNumber"))
    except ValueError as e:
        raise DecodeError(f"blockNumber: {e}") from e

    log_index = None
    if raw_log.get("logIndex") is not None:
        try:
            log_index = from_hex_quantity(raw_log["logIndex"])
        except ValueError as e:
            raise DecodeError(f"logIndex: {e}") from e

    return TransferEvent(
        tx_hash="0x" + tx_hash_bytes.hex(),
        block_number=block_number,
        from_address=_topic_to_address(topics[1], "topics[1]"),
        to_address=_topic_to_address(topics[2], "topics[2]"),
        raw_amount=raw_amount,
        amount=to_decimal_amount(raw_amount, decimals),
        log_index=log_index,
    )


def decode_transfer_logs(
    raw_logs: list[dict[str, Any]],
    decimals: int = DEFAULT_TOKEN_DECIMALS,
) -> tuple[list[TransferEvent], int]:
    """
    Decode a batch of logs, skipping malformed entries.

    A malformed entry is dropped and counted; it never aborts the batch.

    Args:
        raw_logs: Log objects from eth_getLogs
        decimals: Token decimals

    Returns:
        Tuple of (decoded events in input order, number of failed entries)
    """
    events: list[TransferEvent] = []
    failed = 0

    for raw_log in raw_logs:
        try:
            events.append(decode_transfer_log(raw_log, decimals))
        except DecodeError as e:
            failed += 1
            tx_hash = (
                raw_log.get("transactionHash")
                if isinstance(raw_log, dict)
                else None
            )
            logger.warning(
                f"[Decode] Skipping malformed log "
                f"(TX: {mask_tx_hash(tx_hash if isinstance(tx_hash, str) else None)}): {e}"
            )

    return events, failed
