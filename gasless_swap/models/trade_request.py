"""TradeRequest — the caller's swap intent."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class TradeRequest(BaseModel):
    """Sell ``sell_amount`` base units of ``sell_token`` for ``buy_token``.

    Values are forwarded to the relayer exactly as given; addresses are
    checked for shape but never re-cased.
    """

    model_config = ConfigDict(frozen=True)

    sell_token: str = Field(..., description="ERC-20 address being sold")
    buy_token: str = Field(..., description="ERC-20 address being bought")
    sell_amount: str = Field(..., description="Amount in base units, decimal string")
    taker: str = Field(..., description="Address the trade executes for")

    @field_validator("sell_token", "buy_token", "taker")
    @classmethod
    def check_address(cls, v: str) -> str:
        if not _ADDRESS_RE.match(v):
            raise ValueError(f"not a 20-byte hex address: {v!r}")
        return v

    @field_validator("sell_amount")
    @classmethod
    def check_amount(cls, v: str) -> str:
        """sell_amount must be a positive integer in base units."""
        if not v.isdigit() or int(v) == 0:
            raise ValueError(f"sell_amount must be a positive integer string: {v!r}")
        return v
