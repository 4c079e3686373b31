"""The single state object behind the dashboard routes."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from decimal import Decimal

import numpy as np

from dashboard_core.config.schema import AppConfig
from dashboard_core.logging import get_logger
from dashboard_core.models import (
    ExposureAnalysis,
    NewPosition,
    PerformancePoint,
    PortfolioAllocation,
    PortfolioMetrics,
    Position,
    PositionRisk,
    PositionSizing,
    PositionUpdate,
    RiskAlert,
    RiskLimits,
    RiskLimitsUpdate,
    RiskMetrics,
)
from dashboard_core.portfolio.analytics import (
    compute_portfolio_allocation,
    compute_portfolio_metrics,
    generate_performance_history,
)
from dashboard_core.portfolio.ledger import PositionLedger, sample_positions
from dashboard_core.risk.alerts import AlertRegistry, sample_alerts
from dashboard_core.risk.calculator import RiskCalculator

log = get_logger("dashboard_store")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DashboardStore:
    """Owns the ledger, risk calculator and alert registry for one process.

    Build one at startup and pass it to whoever needs it. Nothing is
    persisted and nothing is locked: callers must not mutate concurrently.
    """

    def __init__(self, config: AppConfig | None = None, now: datetime | None = None) -> None:
        self.config = config or AppConfig()
        now = now or _utcnow()

        self.rng = np.random.default_rng(self.config.analytics.random_seed)
        self.starting_balance = Decimal(str(self.config.portfolio.starting_balance))
        self.ledger = PositionLedger()
        self.risk = RiskCalculator(self.config.risk, self.rng)
        self.alerts = AlertRegistry()

        if self.config.portfolio.seed_sample_positions:
            for data in sample_positions(now):
                self.ledger.add_position(data)
        if self.config.alerts.seed_sample_alerts:
            for alert in sample_alerts(now, self.rng):
                self.alerts.add(alert)

        log.info(
            "store_initialised",
            starting_balance=float(self.starting_balance),
            positions=len(self.ledger),
            alerts=len(self.alerts),
        )

    # ── Ledger ────────────────────────────────────────────────

    def add_position(self, data: NewPosition) -> Position:
        return self.ledger.add_position(data)

    def close_position(self, position_id: str, exit_price: Decimal) -> Position | None:
        return self.ledger.close_position(position_id, exit_price)

    def update_position(self, position_id: str, update: PositionUpdate) -> Position | None:
        return self.ledger.update_position(position_id, update)

    def update_prices(self, prices: Mapping[str, Decimal]) -> list[Position]:
        return self.ledger.update_prices(prices)

    def get_positions(self, status: str | None = None) -> list[Position]:
        return self.ledger.get_positions(status)

    def get_position(self, position_id: str) -> Position | None:
        return self.ledger.get_position(position_id)

    # ── Portfolio metrics ─────────────────────────────────────

    def get_portfolio_metrics(self, now: datetime | None = None) -> PortfolioMetrics:
        return compute_portfolio_metrics(
            self.ledger.get_positions(),
            self.starting_balance,
            self.rng,
            now or _utcnow(),
        )

    def total_value(self) -> Decimal:
        """Starting balance plus the P&L of every position."""
        return self.get_portfolio_metrics().total_value

    def get_portfolio_allocation(self) -> list[PortfolioAllocation]:
        return compute_portfolio_allocation(self.ledger.get_positions(), self.total_value())

    def get_performance_history(
        self,
        days: int | None = None,
        now: datetime | None = None,
    ) -> list[PerformancePoint]:
        if days is None:
            days = self.config.portfolio.history_days
        return generate_performance_history(
            float(self.starting_balance), days, self.rng, now or _utcnow(),
        )

    # ── Risk calculator ───────────────────────────────────────

    def calculate_risk_metrics(
        self,
        portfolio_value: Decimal,
        positions: Sequence[Position],
    ) -> RiskMetrics:
        return self.risk.calculate_risk_metrics(portfolio_value, positions)

    def calculate_position_risk(
        self,
        position: Position,
        portfolio_value: Decimal,
        now: datetime | None = None,
    ) -> PositionRisk:
        return self.risk.calculate_position_risk(position, portfolio_value, now)

    def analyze_exposure(
        self,
        positions: Sequence[Position],
        portfolio_value: Decimal,
    ) -> ExposureAnalysis:
        return self.risk.analyze_exposure(positions, portfolio_value)

    def calculate_position_sizing(
        self,
        account_balance: Decimal,
        risk_percent: Decimal,
        entry_price: Decimal,
        stop_loss: Decimal,
        leverage: Decimal = Decimal("1"),
    ) -> PositionSizing:
        return self.risk.calculate_position_sizing(
            account_balance, risk_percent, entry_price, stop_loss, leverage,
        )

    def check_risk_limits(self, position: Position, portfolio_value: Decimal) -> list[str]:
        return self.risk.check_risk_limits(position, portfolio_value)

    def get_risk_limits(self) -> RiskLimits:
        return self.risk.get_risk_limits()

    def update_risk_limits(self, update: RiskLimitsUpdate) -> RiskLimits:
        return self.risk.update_risk_limits(update)

    # Book-wide views, computed over open positions at the current total value

    def get_risk_metrics(self) -> RiskMetrics:
        return self.risk.calculate_risk_metrics(
            self.total_value(), self.ledger.get_positions("open"),
        )

    def get_exposure(self) -> ExposureAnalysis:
        return self.risk.analyze_exposure(
            self.ledger.get_positions("open"), self.total_value(),
        )

    def get_position_risk(self, position_id: str) -> PositionRisk | None:
        position = self.ledger.get_position(position_id)
        if position is None:
            return None
        return self.risk.calculate_position_risk(position, self.total_value())

    def get_position_violations(self, position_id: str) -> list[str] | None:
        position = self.ledger.get_position(position_id)
        if position is None:
            return None
        return self.risk.check_risk_limits(position, self.total_value())

    # ── Alerts ────────────────────────────────────────────────

    def get_risk_alerts(self, severity: str | None = None) -> list[RiskAlert]:
        return self.alerts.get_risk_alerts(severity)

    def acknowledge_alert(self, alert_id: str) -> bool:
        return self.alerts.acknowledge_alert(alert_id)

    def generate_risk_alert(
        self,
        alert_type: str,
        severity: str,
        message: str | None = None,
        affected_positions: Sequence[str] | None = None,
    ) -> RiskAlert:
        return self.alerts.generate_risk_alert(alert_type, severity, message, affected_positions)
