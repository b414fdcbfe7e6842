"""Quote — the relayer's priced offer and its typed-data payloads.

The relayer owns these schemas, so every model keeps unknown fields
(``extra="allow"``) and dumps them back untouched when payloads are
forwarded for submission.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TypedDataDescriptor(BaseModel):
    """EIP-712 request: ``{domain, types, primaryType, message}``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    domain: dict[str, Any]
    types: dict[str, Any]
    primary_type: str = Field(..., alias="primaryType")
    message: dict[str, Any]

    def to_signable(self) -> dict[str, Any]:
        """Return the wire dict handed to the signing capability."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class AuthorizationPayload(BaseModel):
    """One signable payload of a quote (``approval`` or ``trade``)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    eip712: Optional[TypedDataDescriptor] = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class QuoteTransaction(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    to: Optional[str] = None
    data: Optional[str] = None
    gas: Optional[str] = None
    gas_price: Optional[str] = Field(default=None, alias="gasPrice")
    value: Optional[str] = None


class Quote(BaseModel):
    """Gasless quote response.

    ``approval`` and ``trade`` stay optional here; their absence is
    reported by the signer as ``MalformedAuthorization``.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    approval: Optional[AuthorizationPayload] = None
    trade: Optional[AuthorizationPayload] = None
    transaction: Optional[QuoteTransaction] = None
    liquidity_available: Optional[bool] = Field(default=None, alias="liquidityAvailable")
    buy_amount: Optional[str] = Field(default=None, alias="buyAmount")
