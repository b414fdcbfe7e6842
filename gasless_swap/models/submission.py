"""SubmissionResult and TradeStatus — relayer responses after submit."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

CONFIRMED = "confirmed"


class SubmissionResult(BaseModel):
    """Accepted submission; ``trade_hash`` keys every later status query."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    trade_hash: str = Field(..., min_length=1, alias="tradeHash")


class TradeStatus(BaseModel):
    """One status observation.  Only ``confirmed`` is terminal."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    status: str

    @property
    def is_confirmed(self) -> bool:
        return self.status == CONFIRMED
