"""Portfolio aggregation — metrics, allocation and the synthetic equity curve.

Everything here is derived from a list of positions at call time; nothing is
cached between calls.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import numpy as np

from dashboard_core.models.portfolio import (
    PerformancePoint,
    PortfolioAllocation,
    PortfolioMetrics,
)
from dashboard_core.models.position import MARKETS, Position
from dashboard_core.portfolio.pnl import position_notional

_ZERO = Decimal("0")


def win_rate(wins: int, total: int) -> float:
    """Win rate as a percentage 0-100."""
    if total <= 0:
        return 0.0
    return wins / total * 100


def _mean(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return _ZERO
    return sum(values, _ZERO) / len(values)


def _pct_of(value: Decimal, base: Decimal) -> Decimal:
    if base <= 0:
        return _ZERO
    return value / base * 100


def _utc_date(ts: datetime):
    return ts.astimezone(timezone.utc).date()


def compute_portfolio_metrics(
    positions: Sequence[Position],
    starting_balance: Decimal,
    rng: np.random.Generator,
    now: datetime,
) -> PortfolioMetrics:
    """Summarize the whole book.

    Day P&L covers positions whose entry falls on the same UTC calendar date
    as *now*. Sharpe ratio and max drawdown are placeholder draws from *rng*.
    """
    open_count = sum(1 for p in positions if p.status == "open")
    closed = [p for p in positions if p.status == "closed"]

    total_pnl = sum((p.pnl for p in positions), _ZERO)
    today = _utc_date(now)
    day_pnl = sum((p.pnl for p in positions if _utc_date(p.entry_ts) == today), _ZERO)

    wins = [p.pnl for p in closed if p.pnl > 0]
    losses = [p.pnl for p in closed if p.pnl < 0]

    return PortfolioMetrics(
        total_value=starting_balance + total_pnl,
        total_pnl=total_pnl,
        total_pnl_percent=_pct_of(total_pnl, starting_balance),
        day_pnl=day_pnl,
        day_pnl_percent=_pct_of(day_pnl, starting_balance),
        open_positions=open_count,
        closed_positions=len(closed),
        win_rate=win_rate(len(wins), len(closed)),
        avg_win=_mean(wins),
        avg_loss=abs(_mean(losses)),
        sharpe_ratio=float(rng.uniform(1.2, 2.0)),
        max_drawdown=float(-5.2 - rng.uniform(0.0, 3.0)),
        total_fees=sum((p.fees for p in positions), _ZERO),
    )


def compute_portfolio_allocation(
    positions: Sequence[Position],
    total_value: Decimal,
) -> list[PortfolioAllocation]:
    """Open-position value per market, as a share of *total_value*.

    Always returns one row per market. The percentages do not have to add up
    to 100 because the denominator is the whole portfolio value.
    """
    rows = []
    for market in MARKETS:
        held = [p for p in positions if p.market == market and p.status == "open"]
        value = sum((p.entry_price * p.quantity for p in held), _ZERO)
        rows.append(PortfolioAllocation(
            market=market,
            value=value,
            percentage=_pct_of(value, total_value),
            pnl=sum((p.pnl for p in held), _ZERO),
            positions=len(held),
        ))
    return rows


def total_exposure(positions: Sequence[Position]) -> Decimal:
    """Sum of absolute entry notionals."""
    return sum((position_notional(p.entry_price, p.quantity) for p in positions), _ZERO)


def generate_performance_history(
    starting_balance: float,
    days: int,
    rng: np.random.Generator,
    now: datetime,
) -> list[PerformancePoint]:
    """Random-walk equity curve ending at *now*, one point per day, oldest first.

    This is display filler: daily returns are drawn uniformly from [-1%, 1%)
    and have no relation to the positions in the ledger.
    """
    if days < 0:
        raise ValueError(f"days must be >= 0, got {days}")

    returns = rng.uniform(-0.01, 0.01, size=days + 1)
    values = starting_balance * np.cumprod(1 + returns)
    peaks = np.maximum(np.maximum.accumulate(values), starting_balance)
    drawdowns = np.minimum(0.0, (values - peaks) / peaks * 100)

    return [
        PerformancePoint(
            date=now - timedelta(days=days - i),
            portfolio_value=float(values[i]),
            pnl=float(values[i] - starting_balance),
            drawdown=float(drawdowns[i]),
        )
        for i in range(days + 1)
    ]
