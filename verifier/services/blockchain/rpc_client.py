"""
JSON-RPC client for the BNB Smart Chain node.

This module handles:
- eth_blockNumber and eth_getLogs calls over HTTP(S)
- Hex quantity encoding/decoding
- Mapping transport failures, timeouts and JSON-RPC errors to RpcError

Responses are returned raw (hex strings) so that log decoding stays in
log_decoder.
"""

from typing import Any

import aiohttp
from loguru import logger
from web3 import AsyncHTTPProvider
from web3.exceptions import Web3Exception
from web3.types import RPCEndpoint

from verifier.config.constants import BLOCKCHAIN_RPC_TIMEOUT
from verifier.utils.exceptions import RpcError, RpcTimeoutError

from .rpc_wrapper import with_timeout


def to_hex_quantity(value: int) -> str:
    """
    Encode a non-negative integer as a JSON-RPC hex quantity.

    Args:
        value: Block height or other quantity

    Returns:
        Hex string, e.g. "0x1b4"
    """
    if value < 0:
        raise ValueError(f"Quantity must be non-negative: {value}")
    return hex(value)


def from_hex_quantity(value: Any) -> int:
    """
    Decode a JSON-RPC hex quantity.

    Args:
        value: Hex string such as "0x1b4"

    Returns:
        Integer value

    Raises:
        ValueError: If value is not a 0x-prefixed hex string
    """
    if not isinstance(value, str) or not value.lower().startswith("0x"):
        raise ValueError(f"Not a hex quantity: {value!r}")
    return int(value, 16)


def address_to_topic(address: str) -> str:
    """
    Left-pad a 20-byte address to a 32-byte log topic.

    Args:
        address: 0x-prefixed address

    Returns:
        0x-prefixed 32-byte topic, lower-case
    """
    return "0x" + "0" * 24 + address.lower()[2:]


class RpcClient:
    """
    Minimal read-only JSON-RPC client.

    One attempt per call, bounded by a timeout. Callers surface failures
    as retryable errors of the whole verification request.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = BLOCKCHAIN_RPC_TIMEOUT,
        provider: AsyncHTTPProvider | None = None,
    ) -> None:
        """
        Initialize RPC client.

        Args:
            rpc_url: Node HTTP(S) endpoint
            timeout: Timeout per call in seconds
            provider: Pre-built provider (tests)
        """
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.provider = provider or AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)},
        )

    async def call(self, method: str, params: list[Any]) -> Any:
        """
        Issue a single JSON-RPC call and return its result.

        Args:
            method: JSON-RPC method name
            params: Positional params

        Returns:
            The "result" member of the response

        Raises:
            RpcTimeoutError: If the call exceeds the timeout
            RpcError: On transport failure or JSON-RPC error object
        """
        try:
            response = await with_timeout(
                self.provider.make_request(RPCEndpoint(method), params),
                timeout=self.timeout,
                operation_name=method,
            )
        except RpcTimeoutError:
            raise
        except (aiohttp.ClientError, Web3Exception, OSError, ValueError) as e:
            logger.error(f"[RPC] {method} failed: {e}")
            raise RpcError(f"{method} failed: {e}") from e

        if not isinstance(response, dict):
            raise RpcError(f"{method} returned malformed response")

        error = response.get("error")
        if error:
            message = (
                error.get("message") if isinstance(error, dict) else str(error)
            )
            logger.error(f"[RPC] {method} returned error: {error}")
            raise RpcError(message or "RPC error")

        if "result" not in response:
            raise RpcError(f"{method} returned no result")

        return response["result"]

    async def get_latest_block(self) -> int:
        """
        Get current chain head height.

        Returns:
            Latest block number
        """
        result = await self.call("eth_blockNumber", [])
        try:
            return from_hex_quantity(result)
        except ValueError as e:
            raise RpcError(f"eth_blockNumber returned {result!r}") from e

    async def get_logs(
        self,
        from_block: int,
        to_block: int,
        contract_address: str,
        topics: list[str | None],
    ) -> list[dict[str, Any]]:
        """
        Get event logs of a contract in an inclusive block range.

        Args:
            from_block: First block (inclusive)
            to_block: Last block (inclusive)
            contract_address: Emitting contract
            topics: Topic filters (32-byte hex, None for wildcard)

        Returns:
            Raw log objects as returned by the node
        """
        if from_block > to_block:
            raise ValueError(
                f"from_block {from_block} is after to_block {to_block}"
            )

        result = await self.call(
            "eth_getLogs",
            [
                {
                    "fromBlock": to_hex_quantity(from_block),
                    "toBlock": to_hex_quantity(to_block),
                    "address": contract_address.lower(),
                    "topics": topics,
                }
            ],
        )

        if not isinstance(result, list):
            raise RpcError(f"eth_getLogs returned {type(result).__name__}")

        return result

    async def close(self) -> None:
        """Close pooled HTTP sessions of the provider."""
        disconnect = getattr(self.provider, "disconnect", None)
        if disconnect is not None:
            await disconnect()
