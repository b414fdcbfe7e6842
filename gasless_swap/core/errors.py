"""Error taxonomy for the gasless trade pipeline.

Everything raised on purpose derives from ``GaslessError`` so callers can
present any pipeline failure with a single ``except`` clause.  Transport
failures (``httpx.TransportError``) are not wrapped.
"""

from __future__ import annotations

from typing import Any


class GaslessError(Exception):
    """Base class for every pipeline failure."""
    pass


class ConfigurationError(GaslessError):
    """Raised when a required credential is missing."""
    pass


class UpstreamError(GaslessError):
    """Raised on a non-2xx response from the quote or status endpoint."""

    def __init__(
        self,
        message: str,
        status: int,
        status_text: str = "",
        body: Any = None,
    ) -> None:
        super().__init__(f"{message}: {status} {status_text}".rstrip())
        self.status = status
        self.status_text = status_text
        self.body = body


class SubmissionRejected(GaslessError):
    """Raised on a non-2xx response from the submit endpoint.

    ``body`` holds the relayer's response (parsed JSON when possible) so
    the rejection reason is available to whoever presents the error.
    """

    def __init__(self, status: int, status_text: str = "", body: Any = None) -> None:
        super().__init__(f"Failed to submit trade: {status} {status_text}".rstrip())
        self.status = status
        self.status_text = status_text
        self.body = body


class MalformedResponse(GaslessError):
    """Raised when a 2xx response body does not match the expected schema."""

    def __init__(self, endpoint: str, detail: str) -> None:
        super().__init__(f"Malformed response from {endpoint}: {detail}")
        self.endpoint = endpoint
        self.detail = detail


class MalformedAuthorization(GaslessError):
    """Raised when a quote lacks an authorization payload or its typed data."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Quote is missing '{field}'")
        self.field = field


class MalformedSignature(GaslessError):
    """Raised when a raw signature cannot be split into (v, r, s)."""
    pass


class SigningFailure(GaslessError):
    """Raised when the signing capability itself fails."""
    pass


class PollingTimeout(GaslessError):
    """Raised when the status poller exhausts its attempt or time budget."""

    def __init__(self, trade_hash: str, attempts: int, elapsed_s: float) -> None:
        super().__init__(
            f"Trade {trade_hash} not confirmed after {attempts} polls "
            f"({elapsed_s:.1f}s)"
        )
        self.trade_hash = trade_hash
        self.attempts = attempts
        self.elapsed_s = elapsed_s


class PollingCancelled(GaslessError):
    """Raised when the caller cancels status polling."""

    def __init__(self, trade_hash: str, attempts: int) -> None:
        super().__init__(f"Polling for trade {trade_hash} cancelled after {attempts} polls")
        self.trade_hash = trade_hash
        self.attempts = attempts
