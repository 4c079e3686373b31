"""Portfolio ledger, P&L and aggregation."""

from dashboard_core.portfolio.analytics import (
    compute_portfolio_allocation,
    compute_portfolio_metrics,
    generate_performance_history,
    total_exposure,
    win_rate,
)
from dashboard_core.portfolio.ledger import PositionLedger, sample_positions
from dashboard_core.portfolio.pnl import (
    calculate_gross_pnl,
    calculate_pnl,
    calculate_pnl_percent,
    position_notional,
)

__all__ = [
    "PositionLedger",
    "calculate_gross_pnl",
    "calculate_pnl",
    "calculate_pnl_percent",
    "compute_portfolio_allocation",
    "compute_portfolio_metrics",
    "generate_performance_history",
    "position_notional",
    "sample_positions",
    "total_exposure",
    "win_rate",
]
