"""Portfolio-level snapshots derived from the ledger."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from dashboard_core.models.position import Market


class PortfolioMetrics(BaseModel):
    """Point-in-time portfolio summary. Recomputed on every query."""

    total_value: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal
    day_pnl: Decimal
    day_pnl_percent: Decimal
    open_positions: int
    closed_positions: int
    win_rate: float
    avg_win: Decimal
    avg_loss: Decimal
    sharpe_ratio: float
    max_drawdown: float
    total_fees: Decimal


class PortfolioAllocation(BaseModel):
    """Open-position value and P&L for one market."""

    market: Market
    value: Decimal
    percentage: Decimal
    pnl: Decimal
    positions: int


class PerformancePoint(BaseModel):
    """One day of the synthetic equity curve."""

    date: datetime
    portfolio_value: float
    pnl: float
    drawdown: float
