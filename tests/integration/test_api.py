"""Integration tests for the HTTP surface."""

import time
from decimal import Decimal

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer
from jose import jwt

from server.initialization.app import create_app
from verifier.repositories import BalanceRepository
from verifier.utils.exceptions import RpcError


USER_ID = "3f1c2a8e-5b7d-4c9a-9e2f-1a2b3c4d5e6f"
JWT_SECRET = "test_jwt_secret_for_testing_only_0123456789"


def make_token(sub: str = USER_ID, secret: str = JWT_SECRET, **claims) -> str:
    payload = {"sub": sub, "exp": int(time.time()) + 3600, **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(token: str | None = None) -> dict:
    return {"Authorization": f"Bearer {token or make_token()}"}


@pytest_asyncio.fixture
async def client(app_settings, session_factory, mock_rpc_client):
    """Test client for the verification app."""
    app = create_app(app_settings, session_factory, rpc_client=mock_rpc_client)
    async with TestClient(TestServer(app)) as test_client:
        yield test_client


class TestConfigMode:
    """Config mode needs neither auth nor chain access."""

    @pytest.mark.asyncio
    async def test_get_returns_config(self, client, deposit_address, mock_rpc_client):
        resp = await client.get("/verify-deposit")

        assert resp.status == 200
        assert await resp.json() == {
            "depositAddress": deposit_address,
            "tokenAddress": "0x1601c48f1178f1f9a9b0be5f5bd7bb20cfd157f3",
            "decimals": 18,
        }
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        mock_rpc_client.get_latest_block.assert_not_called()

    @pytest.mark.asyncio
    async def test_post_action_config(self, client, deposit_address):
        resp = await client.post("/verify-deposit", json={"action": "config"})

        assert resp.status == 200
        body = await resp.json()
        assert body["depositAddress"] == deposit_address

    @pytest.mark.asyncio
    async def test_missing_configuration(self, client, app_settings):
        app_settings.deposit_address = None

        resp = await client.get("/verify-deposit")

        assert resp.status == 500
        body = await resp.json()
        assert "DEPOSIT_ADDRESS" in body["error"]
        assert resp.headers["Access-Control-Allow-Origin"] == "*"


class TestCors:
    """CORS preflight."""

    @pytest.mark.asyncio
    async def test_preflight(self, client):
        resp = await client.options("/verify-deposit")

        assert resp.status == 200
        assert await resp.text() == "ok"
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert resp.headers["Access-Control-Allow-Headers"] == (
            "authorization, x-client-info, apikey, content-type"
        )


class TestVerifyMode:
    """Verify mode over HTTP."""

    @pytest.mark.asyncio
    async def test_requires_auth(self, client, sender_address, mock_rpc_client):
        resp = await client.post(
            "/verify-deposit", json={"fromAddress": sender_address}
        )

        assert resp.status == 401
        assert await resp.json() == {"error": "Unauthorized"}
        mock_rpc_client.get_latest_block.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_token_with_wrong_secret(self, client, sender_address):
        token = make_token(secret="another_secret_of_sufficient_length_000")

        resp = await client.post(
            "/verify-deposit",
            json={"fromAddress": sender_address},
            headers=auth_headers(token),
        )

        assert resp.status == 401

    @pytest.mark.asyncio
    async def test_rejects_expired_token(self, client, sender_address):
        token = make_token(exp=int(time.time()) - 60)

        resp = await client.post(
            "/verify-deposit",
            json={"fromAddress": sender_address},
            headers=auth_headers(token),
        )

        assert resp.status == 401

    @pytest.mark.asyncio
    async def test_invalid_address_makes_no_rpc_call(self, client, mock_rpc_client):
        resp = await client.post(
            "/verify-deposit",
            json={"fromAddress": "0x123"},
            headers=auth_headers(),
        )

        assert resp.status == 400
        assert "fromAddress" in (await resp.json())["error"]
        mock_rpc_client.get_latest_block.assert_not_called()
        mock_rpc_client.get_logs.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_json_body_reads_as_empty(self, client, mock_rpc_client):
        resp = await client.post(
            "/verify-deposit",
            data="{not json",
            headers={**auth_headers(), "Content-Type": "application/json"},
        )

        assert resp.status == 400
        mock_rpc_client.get_latest_block.assert_not_called()

    @pytest.mark.asyncio
    async def test_verify_credits_deposit(
        self, client, session_factory, fake_chain, make_log, make_tx_hash,
        sender_address,
    ):
        fake_chain.latest_block = 1000
        fake_chain.logs = [make_log(make_tx_hash(0xC0FFEE), 990, 15 * 10**17)]

        resp = await client.post(
            "/verify-deposit",
            json={
                "fromAddress": sender_address,
                "lookbackBlocks": 100,
                "minConfirmations": 5,
            },
            headers=auth_headers(),
        )

        assert resp.status == 200
        body = await resp.json()
        assert body["totalFound"] == "1.5"
        assert body["newlyCredited"] == "1.5"
        assert body["matchedCount"] == 1
        assert body["creditedTxs"] == [make_tx_hash(0xC0FFEE)]
        assert body["fromBlock"] == 900
        assert body["latestBlock"] == 1000

        async with session_factory() as session:
            balance = await BalanceRepository(session).get_balance(USER_ID)
        assert balance == Decimal("1.5")

        repeat = await client.post(
            "/verify-deposit",
            json={"fromAddress": sender_address, "lookbackBlocks": 100},
            headers=auth_headers(),
        )
        repeat_body = await repeat.json()
        assert repeat_body["newlyCredited"] == "0"
        assert repeat_body["creditedTxs"] == []
        assert repeat_body["duplicateCount"] == 1

    @pytest.mark.asyncio
    async def test_rpc_failure(self, client, mock_rpc_client, sender_address):
        mock_rpc_client.get_latest_block.side_effect = RpcError(
            "eth_blockNumber failed: connection refused"
        )

        resp = await client.post(
            "/verify-deposit",
            json={"fromAddress": sender_address},
            headers=auth_headers(),
        )

        assert resp.status == 500
        assert "connection refused" in (await resp.json())["error"]

    @pytest.mark.asyncio
    async def test_unexpected_error_is_generic(
        self, client, mock_rpc_client, sender_address
    ):
        mock_rpc_client.get_latest_block.side_effect = RuntimeError("boom")

        resp = await client.post(
            "/verify-deposit",
            json={"fromAddress": sender_address},
            headers=auth_headers(),
        )

        assert resp.status == 500
        assert await resp.json() == {"error": "Verification failed"}


class TestHealth:
    """Health endpoints."""

    @pytest.mark.asyncio
    async def test_liveness(self, client):
        resp = await client.get("/liveness")

        assert resp.status == 200
        assert (await resp.json())["alive"] is True

    @pytest.mark.asyncio
    async def test_readiness_pings_database(self, client):
        resp = await client.get("/readiness")

        assert resp.status == 200
        assert (await resp.json())["ready"] is True

    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")

        body = await resp.json()
        assert body["status"] == "healthy"
        assert body["chain_configured"] is True
