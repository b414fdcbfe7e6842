"""Entrypoint — uvloop event-loop, one gasless trade, graceful shutdown."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import signal
import sys
from typing import NoReturn, Sequence

import httpx
import uvloop
from pydantic import ValidationError

from gasless_swap.config.settings import GaslessConfig, settings
from gasless_swap.core.errors import GaslessError, PollingCancelled, SubmissionRejected, UpstreamError
from gasless_swap.core.logger import get_logger, setup_logging
from gasless_swap.execution.orchestrator import TradeOrchestrator
from gasless_swap.models.trade_request import TradeRequest
from gasless_swap.web3_infra.eip712_signer import EIP712Signer

log = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CANCELLED = 130

# Sample trade on Mode mainnet
DEFAULT_SELL_TOKEN = "0x2416092f143378750bb29b79ed961ab195cceea5"
DEFAULT_BUY_TOKEN = "0xdfc7c877a950e49d2610114102175a06c2e3167a"
DEFAULT_SELL_AMOUNT = "846925725410518"


class GracefulShutdown:
    """Tracks shutdown signal; the event doubles as the poller's cancel token."""

    def __init__(self) -> None:
        self.event = asyncio.Event()

    @property
    def should_stop(self) -> bool:
        return self.event.is_set()

    def trigger(self) -> None:
        self.event.set()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gasless-swap",
        description="Quote, sign, submit and settle one 0x gasless swap",
    )
    parser.add_argument("--sell-token", default=DEFAULT_SELL_TOKEN)
    parser.add_argument("--buy-token", default=DEFAULT_BUY_TOKEN)
    parser.add_argument("--sell-amount", default=DEFAULT_SELL_AMOUNT,
                        help="Amount in base units of the sell token")
    parser.add_argument("--taker", default=None,
                        help="Taker address (default: the signing account)")
    parser.add_argument("--poll-interval", type=float, default=None,
                        help="Seconds between status polls")
    parser.add_argument("--poll-timeout", type=float, default=None,
                        help="Give up waiting for settlement after N seconds")
    return parser


async def main(argv: Sequence[str] | None = None) -> int:
    """Top-level orchestrator; returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = GaslessConfig.from_settings(settings)
    except GaslessError as exc:
        log.error("config_invalid", error=str(exc))
        return EXIT_FAILED

    overrides = {}
    if args.poll_interval is not None:
        overrides["poll_interval_s"] = args.poll_interval
    if args.poll_timeout is not None:
        overrides["poll_timeout_s"] = args.poll_timeout
    if overrides:
        config = dataclasses.replace(config, **overrides)

    shutdown = GracefulShutdown()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: _handle_signal(s, shutdown))

    try:
        async with EIP712Signer(config.private_key) as signer:
            request = TradeRequest(
                sell_token=args.sell_token,
                buy_token=args.buy_token,
                sell_amount=args.sell_amount,
                taker=args.taker or signer.address,
            )
            log.info("starting", app=settings.APP_NAME, chain_id=config.chain_id,
                     taker=request.taker)

            async with TradeOrchestrator.from_config(config, signer) as orchestrator:
                outcome = await orchestrator.run(request, cancel_event=shutdown.event)
    except PollingCancelled as exc:
        log.warning("trade_cancelled", trade_hash=exc.trade_hash, attempts=exc.attempts)
        return EXIT_CANCELLED
    except (UpstreamError, SubmissionRejected) as exc:
        log.error("trade_failed", error=str(exc), status=exc.status, body=exc.body)
        return EXIT_FAILED
    except ValidationError as exc:
        log.error("trade_request_invalid", error=str(exc))
        return EXIT_FAILED
    except httpx.TransportError as exc:
        log.error("relayer_unreachable", error_type=type(exc).__name__, error=str(exc))
        return EXIT_FAILED
    except GaslessError as exc:
        log.error("trade_failed", error_type=type(exc).__name__, error=str(exc))
        return EXIT_FAILED
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)

    log.info("trade_successful", trade_hash=outcome.trade_hash, status=outcome.status.status)
    return EXIT_OK


def _handle_signal(sig: signal.Signals, shutdown: GracefulShutdown) -> None:
    """Set the shutdown flag on SIGINT/SIGTERM."""
    log.info("signal_received", signal=sig.name)
    shutdown.trigger()


def run() -> NoReturn:
    """CLI entry: configure logging, run on uvloop and exit with the result."""
    setup_logging(settings.LOG_LEVEL, settings.APP_ENV)
    sys.exit(uvloop.run(main()))


if __name__ == "__main__":
    run()
