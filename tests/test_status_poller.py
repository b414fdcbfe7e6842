"""Tests for execution/status_poller.py."""

from __future__ import annotations

import asyncio
import itertools

import httpx
import pytest

from gasless_swap.core.errors import PollingCancelled, PollingTimeout, UpstreamError
from gasless_swap.data.rest_client import GaslessRestClient
from gasless_swap.execution.status_poller import StatusPoller

from conftest import FakeRelayer


def _poller(config, relayer: FakeRelayer, **kwargs) -> tuple[GaslessRestClient, StatusPoller]:
    rest = GaslessRestClient(config, transport=relayer.transport)
    kwargs.setdefault("interval_s", 0.0)
    kwargs.setdefault("backoff_max_s", 0.0)
    return rest, StatusPoller(rest, **kwargs)


class TestGetStatus:

    @pytest.mark.asyncio
    async def test_queries_trade_hash_with_chain_id(self, config) -> None:
        relayer = FakeRelayer(statuses=["pending"])
        rest, poller = _poller(config, relayer)
        async with rest:
            status = await poller.get_status("0xabc123")

        assert status.status == "pending"
        req = relayer.requests[0]
        assert req.url.path == "/gasless/status/0xabc123"
        assert dict(req.url.params) == {"chainId": "34443"}
        assert req.headers["0x-api-key"] == "test-api-key"

    @pytest.mark.asyncio
    async def test_non_2xx_raises(self, config) -> None:
        relayer = FakeRelayer(statuses=[httpx.Response(503, json={"reason": "busy"})])
        rest, poller = _poller(config, relayer)
        async with rest:
            with pytest.raises(UpstreamError) as exc_info:
                await poller.get_status("0xabc123")
        assert exc_info.value.status == 503


class TestPollUntilTerminal:

    @pytest.mark.asyncio
    async def test_terminates_on_first_confirmed(self, config) -> None:
        relayer = FakeRelayer(statuses=["pending", "pending", "confirmed", "pending"])
        rest, poller = _poller(config, relayer)
        async with rest:
            status = await poller.poll_until_terminal("0xabc123")

        assert status.is_confirmed
        assert len(relayer.status_requests()) == 3

    @pytest.mark.asyncio
    async def test_non_terminal_statuses_keep_polling(self, config) -> None:
        relayer = FakeRelayer(statuses=["pending", "submitted", "succeeded", "failed", "confirmed"])
        rest, poller = _poller(config, relayer)
        async with rest:
            await poller.poll_until_terminal("0xabc123")
        assert len(relayer.status_requests()) == 5

    @pytest.mark.asyncio
    async def test_errors_do_not_stop_polling(self, config) -> None:
        relayer = FakeRelayer(statuses=[
            httpx.Response(500, json={"reason": "oops"}),
            httpx.ConnectError("connection refused"),
            httpx.Response(200, json={"unexpected": True}),
            httpx.Response(200, text="not json"),
            "pending",
            "confirmed",
        ])
        rest, poller = _poller(config, relayer)
        async with rest:
            status = await poller.poll_until_terminal("0xabc123")

        assert status.status == "confirmed"
        assert len(relayer.status_requests()) == 6

    @pytest.mark.asyncio
    async def test_max_attempts(self, config) -> None:
        relayer = FakeRelayer(statuses=["pending"])
        rest, poller = _poller(config, relayer, max_attempts=3)
        async with rest:
            with pytest.raises(PollingTimeout) as exc_info:
                await poller.poll_until_terminal("0xabc123")

        assert exc_info.value.attempts == 3
        assert exc_info.value.trade_hash == "0xabc123"
        assert len(relayer.status_requests()) == 3

    @pytest.mark.asyncio
    async def test_deadline(self, config) -> None:
        ticks = itertools.count()
        relayer = FakeRelayer(statuses=["pending"])
        rest, poller = _poller(config, relayer, timeout_s=5.0, clock=lambda: float(next(ticks)))
        async with rest:
            with pytest.raises(PollingTimeout) as exc_info:
                await poller.poll_until_terminal("0xabc123")

        assert exc_info.value.elapsed_s >= 5.0
        assert exc_info.value.attempts == len(relayer.status_requests())
        assert exc_info.value.attempts > 0

    @pytest.mark.asyncio
    async def test_cancel_before_first_poll(self, config) -> None:
        relayer = FakeRelayer(statuses=["pending"])
        rest, poller = _poller(config, relayer)
        cancel = asyncio.Event()
        cancel.set()
        async with rest:
            with pytest.raises(PollingCancelled) as exc_info:
                await poller.poll_until_terminal("0xabc123", cancel_event=cancel)

        assert exc_info.value.attempts == 0
        assert relayer.status_requests() == []

    @pytest.mark.asyncio
    async def test_cancel_interrupts_wait(self, config) -> None:
        relayer = FakeRelayer(statuses=["pending"])
        rest, poller = _poller(config, relayer, interval_s=30.0)
        cancel = asyncio.Event()
        async with rest:
            task = asyncio.create_task(poller.poll_until_terminal("0xabc123", cancel_event=cancel))
            await asyncio.sleep(0.05)
            cancel.set()
            with pytest.raises(PollingCancelled):
                await asyncio.wait_for(task, timeout=2.0)

        assert relayer.status_requests() == []

    @pytest.mark.asyncio
    async def test_cancel_mid_polling(self, config) -> None:
        cancel = asyncio.Event()
        relayer = FakeRelayer(statuses=["pending"])
        handler = relayer.handler

        def cancelling_handler(request: httpx.Request) -> httpx.Response:
            response = handler(request)
            if len(relayer.status_requests()) == 2:
                cancel.set()
            return response

        rest = GaslessRestClient(config, transport=httpx.MockTransport(cancelling_handler))
        poller = StatusPoller(rest, interval_s=0.0)
        async with rest:
            with pytest.raises(PollingCancelled) as exc_info:
                await poller.poll_until_terminal("0xabc123", cancel_event=cancel)
        assert exc_info.value.attempts == 2


class TestBackoff:

    def test_delay_doubles_per_error_and_caps(self, config) -> None:
        rest = GaslessRestClient(config)
        poller = StatusPoller(rest, interval_s=5.0, backoff_max_s=60.0)
        assert [poller._next_delay(n) for n in range(5)] == [5.0, 10.0, 20.0, 40.0, 60.0]

    @pytest.mark.asyncio
    async def test_error_backoff_resets_after_success(self, config) -> None:
        relayer = FakeRelayer(statuses=[
            httpx.Response(500), httpx.Response(500), "pending", "confirmed",
        ])
        rest, poller = _poller(config, relayer)
        seen_errors: list[int] = []
        original = poller._next_delay

        def recording(consecutive_errors: int) -> float:
            seen_errors.append(consecutive_errors)
            return original(consecutive_errors)

        poller._next_delay = recording  # type: ignore[method-assign]
        async with rest:
            await poller.poll_until_terminal("0xabc123")
        assert seen_errors == [0, 1, 2, 0]
