"""Confirmation depth filtering for decoded transfers."""

from collections.abc import Sequence

from loguru import logger

from verifier.utils.security import mask_tx_hash

from .log_decoder import TransferEvent


def confirmation_depth(latest_block: int, block_number: int) -> int:
    """Number of blocks mined after the event's block."""
    return latest_block - block_number


def filter_confirmed(
    events: Sequence[TransferEvent],
    latest_block: int,
    min_confirmations: int,
) -> tuple[list[TransferEvent], list[TransferEvent]]:
    """
    Split events by confirmation depth.

    An event is confirmed when latest_block - block_number >=
    min_confirmations. Pending events are not recorded anywhere; a later
    call picks them up once they are deep enough.

    Args:
        events: Decoded transfers
        latest_block: Current chain head
        min_confirmations: Required depth

    Returns:
        Tuple of (confirmed, pending), both in input order
    """
    confirmed: list[TransferEvent] = []
    pending: list[TransferEvent] = []

    for event in events:
        depth = confirmation_depth(latest_block, event.block_number)
        if depth >= min_confirmations:
            confirmed.append(event)
        else:
            pending.append(event)
            logger.debug(
                f"[Confirmations] TX {mask_tx_hash(event.tx_hash)} at depth "
                f"{depth} < {min_confirmations}, waiting"
            )

    return confirmed, pending
