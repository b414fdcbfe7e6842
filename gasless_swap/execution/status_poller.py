"""StatusPoller — wait for a submitted trade to settle.

An awaitable loop owned by the caller rather than a detached timer:

- waits ``interval`` before every status request
- returns on the first ``confirmed`` status
- logs and survives non-2xx responses, transport errors and malformed
  bodies, backing off exponentially while they persist
- stops with ``PollingTimeout`` when the attempt or time budget runs out
- stops with ``PollingCancelled`` as soon as ``cancel_event`` is set
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional

import httpx
import structlog
from pydantic import ValidationError

from gasless_swap.core.errors import (
    MalformedResponse,
    PollingCancelled,
    PollingTimeout,
    UpstreamError,
)
from gasless_swap.data.rest_client import GaslessRestClient, response_body
from gasless_swap.models.submission import TradeStatus

logger = structlog.get_logger("execution.status_poller")

STATUS_PATH = "/gasless/status/{trade_hash}"


class StatusPoller:
    """Polls ``/gasless/status/{tradeHash}`` until the trade is confirmed.

    Parameters
    ----------
    rest_client:
        Relayer transport.
    interval_s:
        Base delay between polls (reference cadence: 5s).
    max_attempts:
        Maximum number of status requests; ``None`` for no limit.
    timeout_s:
        Overall deadline in seconds; ``None`` for no deadline.
    backoff_max_s:
        Cap on the delay while consecutive polls keep failing.
    clock:
        Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        rest_client: GaslessRestClient,
        interval_s: float = 5.0,
        max_attempts: Optional[int] = None,
        timeout_s: Optional[float] = None,
        backoff_max_s: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._rest = rest_client
        self._interval_s = interval_s
        self._max_attempts = max_attempts
        self._timeout_s = timeout_s
        self._backoff_max_s = backoff_max_s
        self._clock = clock

    async def get_status(self, trade_hash: str) -> TradeStatus:
        """Issue a single status request."""
        path = STATUS_PATH.format(trade_hash=trade_hash)
        response = await self._rest.get(path, params={"chainId": str(self._rest.chain_id)})
        if not response.is_success:
            raise UpstreamError(
                "Failed to fetch trade status",
                status=response.status_code,
                status_text=response.reason_phrase,
                body=response_body(response),
            )

        body = response_body(response)
        if not isinstance(body, dict):
            raise MalformedResponse(path, "body is not a JSON object")
        try:
            return TradeStatus.model_validate(body)
        except ValidationError as exc:
            raise MalformedResponse(path, str(exc)) from exc

    async def poll_until_terminal(
        self,
        trade_hash: str,
        cancel_event: asyncio.Event | None = None,
    ) -> TradeStatus:
        """Poll until the first ``confirmed`` status and return it."""
        cancel_event = cancel_event or asyncio.Event()
        started = self._clock()
        attempts = 0
        consecutive_errors = 0

        logger.info(
            "status_poller.started",
            trade_hash=trade_hash,
            interval_s=self._interval_s,
            max_attempts=self._max_attempts,
            timeout_s=self._timeout_s,
        )

        while True:
            elapsed = self._clock() - started
            if self._max_attempts is not None and attempts >= self._max_attempts:
                raise PollingTimeout(trade_hash, attempts, elapsed)
            if self._timeout_s is not None and elapsed >= self._timeout_s:
                raise PollingTimeout(trade_hash, attempts, elapsed)

            delay = self._next_delay(consecutive_errors)
            if self._timeout_s is not None:
                delay = min(delay, self._timeout_s - elapsed)

            if await self._wait_cancelled(cancel_event, delay):
                logger.info("status_poller.cancelled", trade_hash=trade_hash, attempts=attempts)
                raise PollingCancelled(trade_hash, attempts)

            attempts += 1
            try:
                status = await self.get_status(trade_hash)
            except (UpstreamError, MalformedResponse, httpx.TransportError) as exc:
                consecutive_errors += 1
                logger.warning(
                    "status_poller.error",
                    trade_hash=trade_hash,
                    attempt=attempts,
                    consecutive_errors=consecutive_errors,
                    status=getattr(exc, "status", None),
                    error=str(exc),
                )
                continue

            consecutive_errors = 0
            if status.is_confirmed:
                logger.info(
                    "status_poller.confirmed",
                    trade_hash=trade_hash,
                    attempts=attempts,
                    elapsed_s=round(self._clock() - started, 3),
                )
                return status

            logger.debug(
                "status_poller.pending",
                trade_hash=trade_hash,
                attempt=attempts,
                status=status.status,
            )

    def _next_delay(self, consecutive_errors: int) -> float:
        """Base interval, doubled per consecutive error, capped."""
        if consecutive_errors == 0:
            return self._interval_s
        return min(self._interval_s * (2 ** consecutive_errors), self._backoff_max_s)

    @staticmethod
    async def _wait_cancelled(cancel_event: asyncio.Event, delay: float) -> bool:
        """Sleep for ``delay`` or until cancelled; True if cancelled."""
        if cancel_event.is_set():
            return True
        if delay <= 0:
            await asyncio.sleep(0)
            return cancel_event.is_set()
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=delay)
            return True
        except asyncio.TimeoutError:
            return False
