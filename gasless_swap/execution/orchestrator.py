"""TradeOrchestrator — quote → sign → submit → poll, run once, fail fast.

Each stage's output is the next stage's only input.  Any exception moves
the run to ``FAILED`` (``CANCELLED`` when the caller stopped polling) and
is re-raised unchanged; nothing is rolled back or retried except the
status poll, which retries by design.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx
import structlog

from gasless_swap.config.settings import GaslessConfig
from gasless_swap.core.errors import PollingCancelled
from gasless_swap.data.rest_client import GaslessRestClient
from gasless_swap.models.quote import Quote
from gasless_swap.models.signature import SignedAuthorization
from gasless_swap.models.submission import SubmissionResult, TradeStatus
from gasless_swap.models.trade_request import TradeRequest
from gasless_swap.web3_infra.eip712_signer import TypedDataSigner

from .authorization_signer import AuthorizationSigner
from .quote_client import QuoteClient
from .status_poller import StatusPoller
from .submission_client import SubmissionClient

logger = structlog.get_logger("execution.orchestrator")


class TradeState(str, Enum):
    """Pipeline state.  CONFIRMED, FAILED and CANCELLED are terminal."""

    IDLE = "IDLE"
    QUOTE_REQUESTED = "QUOTE_REQUESTED"
    AUTHORIZATIONS_SIGNED = "AUTHORIZATIONS_SIGNED"
    SUBMITTED = "SUBMITTED"
    POLLING = "POLLING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


_TRANSITIONS: dict[TradeState, set[TradeState]] = {
    TradeState.IDLE: {TradeState.QUOTE_REQUESTED},
    TradeState.QUOTE_REQUESTED: {TradeState.AUTHORIZATIONS_SIGNED},
    TradeState.AUTHORIZATIONS_SIGNED: {TradeState.SUBMITTED},
    TradeState.SUBMITTED: {TradeState.POLLING},
    TradeState.POLLING: {TradeState.CONFIRMED, TradeState.CANCELLED},
    TradeState.CONFIRMED: set(),
    TradeState.FAILED: set(),
    TradeState.CANCELLED: set(),
}

TERMINAL_STATES = frozenset({TradeState.CONFIRMED, TradeState.FAILED, TradeState.CANCELLED})


@dataclass(frozen=True)
class TradeOutcome:
    """Everything one successful run produced."""

    quote: Quote
    approval: SignedAuthorization
    trade: SignedAuthorization
    submission: SubmissionResult
    status: TradeStatus

    @property
    def trade_hash(self) -> str:
        return self.submission.trade_hash


class TradeOrchestrator:
    """Composes the four pipeline stages and owns the run's state machine.

    Usage::

        async with EIP712Signer(config.private_key) as signer:
            async with TradeOrchestrator.from_config(config, signer) as orch:
                outcome = await orch.run(request, cancel_event=shutdown)
    """

    def __init__(
        self,
        quote_client: QuoteClient,
        authorization_signer: AuthorizationSigner,
        submission_client: SubmissionClient,
        status_poller: StatusPoller,
        rest_client: Optional[GaslessRestClient] = None,
    ) -> None:
        self._quote_client = quote_client
        self._authorization_signer = authorization_signer
        self._submission_client = submission_client
        self._status_poller = status_poller
        self._rest = rest_client
        self._state = TradeState.IDLE
        self._history: list[TradeState] = [TradeState.IDLE]

    @classmethod
    def from_config(
        cls,
        config: GaslessConfig,
        signer: TypedDataSigner,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> TradeOrchestrator:
        """Wire every stage to one shared ``GaslessRestClient``."""
        rest = GaslessRestClient(config, transport=transport)
        return cls(
            quote_client=QuoteClient(rest),
            authorization_signer=AuthorizationSigner(signer),
            submission_client=SubmissionClient(rest),
            status_poller=StatusPoller(
                rest,
                interval_s=config.poll_interval_s,
                max_attempts=config.poll_max_attempts,
                timeout_s=config.poll_timeout_s,
                backoff_max_s=config.poll_backoff_max_s,
            ),
            rest_client=rest,
        )

    # ── State ────────────────────────────────────────────────────

    @property
    def state(self) -> TradeState:
        return self._state

    @property
    def history(self) -> list[TradeState]:
        """States visited during the current run, in order."""
        return list(self._history)

    def _transition(self, new_state: TradeState) -> None:
        old_state = self._state
        if new_state != TradeState.FAILED and new_state not in _TRANSITIONS[old_state]:
            raise RuntimeError(
                f"invalid trade state transition {old_state.value} -> {new_state.value}"
            )
        self._state = new_state
        self._history.append(new_state)
        logger.info(
            "orchestrator.state_transition",
            from_state=old_state.value,
            to_state=new_state.value,
        )

    # ── Pipeline ─────────────────────────────────────────────────

    async def run(
        self,
        request: TradeRequest,
        cancel_event: asyncio.Event | None = None,
    ) -> TradeOutcome:
        """Execute the full pipeline for ``request`` and return its outcome."""
        if self._state not in TERMINAL_STATES and self._state != TradeState.IDLE:
            raise RuntimeError(f"trade already in progress ({self._state.value})")
        self._state = TradeState.IDLE
        self._history = [TradeState.IDLE]

        try:
            quote = await self._quote_client.get_quote(request)
            self._transition(TradeState.QUOTE_REQUESTED)

            signed = await self._authorization_signer.sign(quote)
            self._transition(TradeState.AUTHORIZATIONS_SIGNED)

            submission = await self._submission_client.submit(signed.approval, signed.trade)
            self._transition(TradeState.SUBMITTED)

            self._transition(TradeState.POLLING)
            status = await self._status_poller.poll_until_terminal(
                submission.trade_hash, cancel_event=cancel_event,
            )
            self._transition(TradeState.CONFIRMED)
        except (PollingCancelled, asyncio.CancelledError):
            if self._state == TradeState.POLLING:
                self._transition(TradeState.CANCELLED)
            else:
                self._transition(TradeState.FAILED)
            raise
        except Exception as exc:
            logger.error(
                "orchestrator.failed",
                state=self._state.value,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            self._transition(TradeState.FAILED)
            raise

        logger.info("orchestrator.trade_successful", trade_hash=submission.trade_hash)
        return TradeOutcome(
            quote=quote,
            approval=signed.approval,
            trade=signed.trade,
            submission=submission,
            status=status,
        )

    # ── Lifecycle ────────────────────────────────────────────────

    async def close(self) -> None:
        if self._rest is not None:
            await self._rest.disconnect()

    async def __aenter__(self) -> TradeOrchestrator:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
