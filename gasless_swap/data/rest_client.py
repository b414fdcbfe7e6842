"""GaslessRestClient — thin async HTTP layer for the 0x Gasless API.

Owns one ``httpx.AsyncClient`` with the API base URL and stamps the
``0x-api-key`` / ``0x-version`` headers on every request.  It never
raises on HTTP status: the calling component decides which error kind a
non-2xx response maps to.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog

from gasless_swap.config.settings import GaslessConfig

logger = structlog.get_logger("data.rest_client")

API_KEY_HEADER = "0x-api-key"
API_VERSION_HEADER = "0x-version"


def response_body(response: httpx.Response) -> Any:
    """Return the parsed JSON body, falling back to the raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text


class GaslessRestClient:
    """Async REST client for the relayer.

    Parameters
    ----------
    config:
        Validated run configuration (base URL, API key, version, chain).
    transport:
        Optional ``httpx`` transport; tests pass ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: GaslessConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._headers = {
            API_KEY_HEADER: config.api_key,
            API_VERSION_HEADER: config.api_version,
        }
        self._client: httpx.AsyncClient | None = None

    @property
    def chain_id(self) -> int:
        return self._config.chain_id

    @property
    def config(self) -> GaslessConfig:
        return self._config

    # ── Lifecycle ────────────────────────────────────────────────

    async def connect(self) -> None:
        """Open the underlying HTTP client.  Idempotent."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.api_url,
                timeout=httpx.Timeout(self._config.http_timeout_s),
                transport=self._transport,
            )
            logger.info(
                "rest_client.connected",
                base_url=self._config.api_url,
                api_version=self._config.api_version,
            )

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("rest_client.disconnected")

    async def __aenter__(self) -> GaslessRestClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.disconnect()

    # ── Requests ─────────────────────────────────────────────────

    async def get(self, path: str, params: dict[str, str] | None = None) -> httpx.Response:
        client = await self._get_client()
        response = await client.get(path, params=params, headers=self._headers)
        logger.debug(
            "rest_client.response",
            method="GET",
            path=path,
            status=response.status_code,
        )
        return response

    async def post(self, path: str, json: dict[str, Any]) -> httpx.Response:
        client = await self._get_client()
        response = await client.post(path, json=json, headers=self._headers)
        logger.debug(
            "rest_client.response",
            method="POST",
            path=path,
            status=response.status_code,
        )
        return response

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            await self.connect()
        assert self._client is not None
        return self._client
