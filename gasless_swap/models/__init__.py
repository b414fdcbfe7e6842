"""Gasless swap — models package."""

from .quote import AuthorizationPayload, Quote, QuoteTransaction, TypedDataDescriptor
from .signature import Signature, SignatureType, SignedAuthorization
from .submission import SubmissionResult, TradeStatus
from .trade_request import TradeRequest

__all__ = [
    "AuthorizationPayload",
    "Quote",
    "QuoteTransaction",
    "Signature",
    "SignatureType",
    "SignedAuthorization",
    "SubmissionResult",
    "TradeRequest",
    "TradeStatus",
    "TypedDataDescriptor",
]
