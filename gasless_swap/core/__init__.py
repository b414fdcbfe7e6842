"""Gasless swap — core package."""

from .errors import (
    ConfigurationError,
    GaslessError,
    MalformedAuthorization,
    MalformedResponse,
    MalformedSignature,
    PollingCancelled,
    PollingTimeout,
    SigningFailure,
    SubmissionRejected,
    UpstreamError,
)

__all__ = [
    "ConfigurationError",
    "GaslessError",
    "MalformedAuthorization",
    "MalformedResponse",
    "MalformedSignature",
    "PollingCancelled",
    "PollingTimeout",
    "SigningFailure",
    "SubmissionRejected",
    "UpstreamError",
]
