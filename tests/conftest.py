"""Shared fixtures: validated config, deterministic signer, fake relayer."""

from __future__ import annotations

import copy
import hashlib
import json
from typing import Any

import httpx
import pytest
import pytest_asyncio

from gasless_swap.config.settings import GaslessConfig
from gasless_swap.data.rest_client import GaslessRestClient

# Well-known development key (never funded on a real network)
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

SELL_TOKEN = "0x2416092f143378750bb29b79ed961ab195cceea5"
BUY_TOKEN = "0xdfc7c877a950e49d2610114102175a06c2e3167a"
TAKER = "0x8a6bfcae15e729fd1440574108437dea281a9b3e"
SELL_AMOUNT = "846925725410518"


def _typed_data(primary_type: str, message: dict[str, Any]) -> dict[str, Any]:
    return {
        "types": {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "chainId", "type": "uint256"},
                {"name": "verifyingContract", "type": "address"},
            ],
            primary_type: [{"name": k, "type": "uint256"} for k in message],
        },
        "domain": {
            "name": "Permit2",
            "chainId": 34443,
            "verifyingContract": "0x000000000022d473030f116ddee9f6b43ac78ba3",
        },
        "primaryType": primary_type,
        "message": message,
    }


QUOTE_BODY: dict[str, Any] = {
    "liquidityAvailable": True,
    "buyAmount": "1000",
    "approval": {
        "type": "permit",
        "hash": "0x" + "11" * 32,
        "eip712": _typed_data("Permit", {"value": 846925725410518, "nonce": 0}),
    },
    "trade": {
        "type": "settler_metatransaction",
        "hash": "0x" + "22" * 32,
        "eip712": _typed_data("MetaTransaction", {"nonce": 7, "deadline": 1700000000}),
    },
    "transaction": {
        "to": "0x0000000000000000000000000000000000000001",
        "data": "0x",
        "gas": "210000",
        "gasPrice": "1000",
        "value": "0",
    },
    "zid": "0xdeadbeef",
}


def quote_body() -> dict[str, Any]:
    return copy.deepcopy(QUOTE_BODY)


class FakeSigner:
    """Deterministic ``TypedDataSigner``: hashes the typed data, v = 27."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self._error = error

    @property
    def address(self) -> str:
        return TEST_ADDRESS

    async def sign_typed_data(self, typed_data: dict[str, Any]) -> str:
        self.calls.append(typed_data)
        if self._error is not None:
            raise self._error
        digest = hashlib.sha256(json.dumps(typed_data, sort_keys=True).encode()).digest()
        r = digest
        s = hashlib.sha256(digest).digest()
        return "0x" + (r + s + bytes([27])).hex()


class FakeRelayer:
    """Scripted 0x Gasless API served through ``httpx.MockTransport``.

    ``statuses`` are served in order; the last one repeats.  Each entry is
    either a status string (200), an ``httpx.Response`` or an exception
    raised as a transport failure.
    """

    def __init__(
        self,
        quote: httpx.Response | None = None,
        submit: httpx.Response | None = None,
        statuses: list[str | httpx.Response | Exception] | None = None,
    ) -> None:
        self.quote = quote or httpx.Response(200, json=quote_body())
        self.submit = submit or httpx.Response(200, json={"tradeHash": "0xabc123", "type": "settler_metatransaction"})
        self.statuses = list(statuses or ["confirmed"])
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/gasless/quote":
            return self.quote
        if path == "/gasless/submit":
            return self.submit
        if path.startswith("/gasless/status/"):
            item = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
            if isinstance(item, Exception):
                raise item
            if isinstance(item, httpx.Response):
                return item
            return httpx.Response(200, json={"status": item, "transactions": []})
        return httpx.Response(404, json={"reason": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def status_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/gasless/status/")]


@pytest.fixture
def config() -> GaslessConfig:
    return GaslessConfig(
        api_key="test-api-key",
        private_key=TEST_PRIVATE_KEY,
        api_url="https://api.0x.test",
        poll_interval_s=0.0,
        poll_timeout_s=None,
        poll_backoff_max_s=0.0,
    )


@pytest.fixture
def relayer() -> FakeRelayer:
    return FakeRelayer()


@pytest_asyncio.fixture
async def rest_client(config: GaslessConfig, relayer: FakeRelayer):
    client = GaslessRestClient(config, transport=relayer.transport)
    yield client
    await client.disconnect()
