"""Position models for the portfolio ledger."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Direction = Literal["long", "short"]
PositionStatus = Literal["open", "closed"]
Market = Literal["forex", "crypto", "stocks"]

MARKETS: tuple[Market, ...] = ("forex", "crypto", "stocks")

# Accept the dashboard's camelCase keys as well as field names
CAMEL_INPUT = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NewPosition(BaseModel):
    """Fields supplied when a position is added; P&L and id are assigned by the ledger."""

    model_config = CAMEL_INPUT

    pair: str
    direction: Direction
    entry_price: Decimal = Field(gt=0)
    current_price: Decimal = Field(gt=0)
    quantity: Decimal = Field(gt=0)
    entry_ts: datetime = Field(default_factory=_utcnow)
    status: PositionStatus = "open"
    stop_loss: Decimal | None = None
    take_profit: Decimal | None = None
    fees: Decimal = Field(default=Decimal("0"), ge=0)
    market: Market

    @field_validator("entry_ts")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        """Naive timestamps are taken as UTC; aware ones are converted to it."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Position(NewPosition):
    """An open or closed position held in the ledger.

    ``pnl`` is net of fees; ``pnl_percent`` is gross P&L over entry notional.
    """

    id: str
    pnl: Decimal = Decimal("0")
    pnl_percent: Decimal = Decimal("0")


class PositionUpdate(BaseModel):
    """Stop-loss / take-profit edit. Only explicitly set fields are applied."""

    model_config = CAMEL_INPUT

    stop_loss: Decimal | None = None
    take_profit: Decimal | None = None
