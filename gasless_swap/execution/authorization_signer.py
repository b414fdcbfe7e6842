"""AuthorizationSigner — sign the approval and trade payloads of a quote."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from gasless_swap.core.errors import GaslessError, MalformedAuthorization, SigningFailure
from gasless_swap.models.quote import AuthorizationPayload, Quote
from gasless_swap.models.signature import SignedAuthorization
from gasless_swap.web3_infra.eip712_signer import TypedDataSigner
from gasless_swap.web3_infra.signature_codec import encode_signature

logger = structlog.get_logger("execution.authorization_signer")


@dataclass(frozen=True)
class SignedAuthorizations:
    """Both signed payloads of one quote."""

    approval: SignedAuthorization
    trade: SignedAuthorization


class AuthorizationSigner:
    """Drives a ``TypedDataSigner`` over each payload of a quote.

    Parameters
    ----------
    signer:
        Signing capability.  Its errors surface as ``SigningFailure``.
    """

    def __init__(self, signer: TypedDataSigner) -> None:
        self._signer = signer

    async def sign(self, quote: Quote) -> SignedAuthorizations:
        """Sign ``approval`` then ``trade``; each payload is signed exactly once."""
        approval = await self._sign_payload("approval", quote.approval)
        trade = await self._sign_payload("trade", quote.trade)
        return SignedAuthorizations(approval=approval, trade=trade)

    async def _sign_payload(
        self, name: str, payload: AuthorizationPayload | None,
    ) -> SignedAuthorization:
        if payload is None:
            raise MalformedAuthorization(name)
        if payload.eip712 is None:
            raise MalformedAuthorization(f"{name}.eip712")

        typed_data = payload.eip712.to_signable()
        try:
            raw = await self._signer.sign_typed_data(typed_data)
        except GaslessError:
            raise
        except Exception as exc:
            raise SigningFailure(f"{name} signing failed: {exc}") from exc

        signed = SignedAuthorization.attach(payload, encode_signature(raw))
        logger.info(
            "authorization_signer.signed",
            payload=name,
            primary_type=payload.eip712.primary_type,
        )
        return signed
