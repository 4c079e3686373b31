"""PositionLedger: the in-memory source of truth for all positions."""

from __future__ import annotations

import itertools
from collections.abc import Mapping
from datetime import datetime, timedelta
from decimal import Decimal

from dashboard_core.logging import get_logger
from dashboard_core.models.position import NewPosition, Position, PositionUpdate
from dashboard_core.portfolio.pnl import calculate_pnl, calculate_pnl_percent

log = get_logger("position_ledger")


def _positive_price(value, pair: str) -> Decimal:
    price = Decimal(str(value))
    if price <= 0:
        raise ValueError(f"price for {pair} must be positive, got {price}")
    return price


class PositionLedger:
    """Ordered, in-memory set of positions.

    Not thread-safe: callers must serialize mutations. Positions are mutated
    in place and never removed.
    """

    def __init__(self) -> None:
        self._positions: list[Position] = []
        self._by_id: dict[str, Position] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._positions)

    # ── Valuation ─────────────────────────────────────────────

    @staticmethod
    def _revalue(position: Position) -> None:
        """Recompute the derived P&L fields from the current price."""
        position.pnl = calculate_pnl(
            position.direction,
            position.entry_price,
            position.current_price,
            position.quantity,
            position.fees,
        )
        position.pnl_percent = calculate_pnl_percent(
            position.direction,
            position.entry_price,
            position.current_price,
            position.quantity,
        )

    # ── Mutations ─────────────────────────────────────────────

    def add_position(self, data: NewPosition) -> Position:
        """Store a new position with a fresh id and computed P&L."""
        position = Position(id=f"pos_{next(self._ids)}", **data.model_dump())
        self._revalue(position)
        self._positions.append(position)
        self._by_id[position.id] = position

        log.info(
            "position_added",
            position_id=position.id,
            pair=position.pair,
            direction=position.direction,
            entry_price=float(position.entry_price),
            quantity=float(position.quantity),
            status=position.status,
        )
        return position

    def close_position(self, position_id: str, exit_price: Decimal) -> Position | None:
        """Close at *exit_price* and freeze P&L. Returns None if the id is unknown.

        Closing an already-closed position leaves it untouched. Raises
        ValueError for a non-positive exit price.
        """
        position = self._by_id.get(position_id)
        if position is None:
            return None
        price = _positive_price(exit_price, position.pair)

        if position.status == "closed":
            log.warning("position_already_closed", position_id=position_id)
            return position

        position.status = "closed"
        position.current_price = price
        self._revalue(position)

        log.info(
            "position_closed",
            position_id=position_id,
            pair=position.pair,
            exit_price=float(position.current_price),
            pnl=float(position.pnl),
        )
        return position

    def update_position(self, position_id: str, update: PositionUpdate) -> Position | None:
        """Apply stop-loss / take-profit edits. Returns None if the id is unknown."""
        position = self._by_id.get(position_id)
        if position is None:
            return None

        changes = update.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(position, field, value)

        log.info(
            "position_updated",
            position_id=position_id,
            fields=sorted(changes),
        )
        return position

    def update_prices(self, prices: Mapping[str, Decimal]) -> list[Position]:
        """Mark open positions to the quoted prices, keyed by pair.

        Closed positions and pairs without a quote are skipped. A non-positive
        quote raises ValueError before any position is touched.
        """
        quotes = {
            pair: _positive_price(price, pair)
            for pair, price in prices.items()
            if price is not None
        }
        updated: list[Position] = []
        for position in self._positions:
            if position.status != "open" or position.pair not in quotes:
                continue
            position.current_price = quotes[position.pair]
            self._revalue(position)
            updated.append(position)

        if updated:
            log.info("prices_updated", count=len(updated))
        return updated

    # ── Queries ───────────────────────────────────────────────

    def get_positions(self, status: str | None = None) -> list[Position]:
        """All positions in insertion order, optionally filtered by status."""
        if status is None:
            return list(self._positions)
        return [p for p in self._positions if p.status == status]

    def get_position(self, position_id: str) -> Position | None:
        return self._by_id.get(position_id)


def sample_positions(now: datetime) -> list[NewPosition]:
    """The demo book shown on a fresh dashboard."""
    day = timedelta(days=1)
    return [
        NewPosition(
            pair="EUR/USD",
            direction="long",
            entry_price=Decimal("1.0825"),
            current_price=Decimal("1.0847"),
            quantity=Decimal("100000"),
            entry_ts=now - 2 * day,
            stop_loss=Decimal("1.078"),
            take_profit=Decimal("1.09"),
            fees=Decimal("15"),
            market="forex",
        ),
        NewPosition(
            pair="BTC/USD",
            direction="long",
            entry_price=Decimal("42000"),
            current_price=Decimal("43247"),
            quantity=Decimal("0.5"),
            entry_ts=now - 5 * day,
            stop_loss=Decimal("40000"),
            take_profit=Decimal("48000"),
            fees=Decimal("85"),
            market="crypto",
        ),
        NewPosition(
            pair="AAPL",
            direction="long",
            entry_price=Decimal("185.2"),
            current_price=Decimal("189.47"),
            quantity=Decimal("100"),
            entry_ts=now - 3 * day,
            stop_loss=Decimal("180.0"),
            take_profit=Decimal("200.0"),
            fees=Decimal("12"),
            market="stocks",
        ),
        NewPosition(
            pair="GBP/USD",
            direction="short",
            entry_price=Decimal("1.268"),
            current_price=Decimal("1.2634"),
            quantity=Decimal("50000"),
            entry_ts=now - day,
            stop_loss=Decimal("1.275"),
            take_profit=Decimal("1.255"),
            fees=Decimal("8"),
            market="forex",
        ),
        NewPosition(
            pair="TSLA",
            direction="short",
            entry_price=Decimal("255.0"),
            current_price=Decimal("248.91"),
            quantity=Decimal("50"),
            entry_ts=now - 4 * day,
            status="closed",
            fees=Decimal("18"),
            market="stocks",
        ),
    ]
