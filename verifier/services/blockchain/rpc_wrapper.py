"""
Bounded RPC execution.

Every node call runs exactly once under a deadline. There is no retry
loop here: a failed verification is re-invoked by its caller, which is
safe because crediting is idempotent.
"""

import asyncio
import time
from collections.abc import Awaitable
from typing import TypeVar

from loguru import logger

from verifier.config.constants import BLOCKCHAIN_RPC_TIMEOUT
from verifier.utils.exceptions import RpcTimeoutError

T = TypeVar("T")


async def with_timeout(
    awaitable: Awaitable[T],
    timeout: float = BLOCKCHAIN_RPC_TIMEOUT,
    operation_name: str = "RPC call",
) -> T:
    """
    Await a node call, giving up after timeout seconds.

    Args:
        awaitable: Pending call
        timeout: Deadline in seconds
        operation_name: JSON-RPC method, used in messages

    Returns:
        Result of the call

    Raises:
        RpcTimeoutError: If the deadline passes first
    """
    started = time.monotonic()
    try:
        result = await asyncio.wait_for(awaitable, timeout=timeout)
    except TimeoutError as e:
        message = f"{operation_name} timed out after {timeout}s"
        logger.error(f"[RPC] {message}")
        raise RpcTimeoutError(message) from e

    logger.debug(
        f"[RPC] {operation_name} took {time.monotonic() - started:.3f}s"
    )
    return result
