"""Signature — (v, r, s) in the relayer's wire shape."""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field

from .quote import AuthorizationPayload


class SignatureType(IntEnum):
    """Signature scheme tag understood by the 0x settler."""

    ILLEGAL = 0
    INVALID = 1
    EIP712 = 2
    ETH_SIGN = 3


class Signature(BaseModel):
    """Decomposed recoverable signature.

    ``r`` and ``s`` are ``0x``-prefixed 32-byte hex strings; ``v`` is 27
    or 28.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    v: int = Field(..., ge=27, le=28)
    r: str
    s: str
    signature_type: SignatureType = Field(default=SignatureType.EIP712, alias="signatureType")

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, mode="json")


class SignedAuthorization(AuthorizationPayload):
    """An ``AuthorizationPayload`` with its ``signature`` attached."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    signature: Signature

    @classmethod
    def attach(cls, payload: AuthorizationPayload, signature: Signature) -> SignedAuthorization:
        """Copy every field of ``payload`` and set (or overwrite) ``signature``."""
        fields = payload.model_dump(by_alias=True, exclude_unset=True)
        fields["signature"] = signature
        return cls.model_validate(fields)

    def to_wire(self) -> dict[str, object]:
        wire = super().to_wire()
        wire["signature"] = self.signature.to_wire()
        return wire
