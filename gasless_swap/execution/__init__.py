"""Gasless swap — execution package."""

from .authorization_signer import AuthorizationSigner, SignedAuthorizations
from .orchestrator import TradeOrchestrator, TradeOutcome, TradeState
from .quote_client import QuoteClient
from .status_poller import StatusPoller
from .submission_client import SubmissionClient

__all__ = [
    "AuthorizationSigner",
    "QuoteClient",
    "SignedAuthorizations",
    "StatusPoller",
    "SubmissionClient",
    "TradeOrchestrator",
    "TradeOutcome",
    "TradeState",
]
