"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Mock JSON-RPC provider
- RpcClient bound to the mock provider
"""

from unittest.mock import AsyncMock

import pytest

from verifier.services.blockchain.rpc_client import RpcClient


@pytest.fixture
def mock_provider():
    """
    Mock web3 AsyncHTTPProvider.

    Returns:
        AsyncMock: Provider whose make_request returns a JSON-RPC result
    """
    provider = AsyncMock()
    provider.make_request = AsyncMock(
        return_value={"jsonrpc": "2.0", "id": 1, "result": "0x0"}
    )
    provider.disconnect = AsyncMock()
    return provider


@pytest.fixture
def rpc_client(mock_provider):
    """
    RpcClient using the mock provider.

    Returns:
        RpcClient: Client for testing
    """
    return RpcClient(
        "https://bsc-dataseed.binance.org/",
        timeout=1.0,
        provider=mock_provider,
    )
