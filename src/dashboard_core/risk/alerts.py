"""Advisory risk alerts, kept apart from live ledger state."""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

import numpy as np

from dashboard_core.logging import get_logger
from dashboard_core.models.risk import AlertType, RiskAlert, Severity

log = get_logger("alert_registry")

# type -> (title, default message, recommendation)
ALERT_TEMPLATES: dict[str, tuple[str, str, str]] = {
    "high_risk": (
        "High Risk Position Detected",
        "Position risk exceeds recommended levels",
        "Consider reducing position size or tightening stop loss",
    ),
    "margin_call": (
        "Margin Call Warning",
        "Account approaching margin call levels",
        "Add funds or close positions to maintain margin requirements",
    ),
    "correlation": (
        "High Correlation Risk",
        "Multiple positions showing high correlation",
        "Diversify positions to reduce correlation risk",
    ),
    "concentration": (
        "Concentration Risk Alert",
        "Portfolio concentration exceeds recommended limits",
        "Rebalance portfolio across different markets",
    ),
    "volatility": (
        "Volatility Alert",
        "Market volatility has increased significantly",
        "Monitor positions closely and consider risk adjustments",
    ),
    "drawdown": (
        "Drawdown Alert",
        "Portfolio drawdown approaching maximum limit",
        "Review and close losing positions",
    ),
}


class AlertRegistry:
    """Mutable list of alerts. Alerts are never removed; only acknowledged."""

    def __init__(self) -> None:
        self._alerts: list[RiskAlert] = []
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._alerts)

    def _next_id(self) -> str:
        return f"alert_{next(self._ids)}"

    def add(self, alert: RiskAlert) -> RiskAlert:
        """Insert a pre-built alert at the front, re-keyed with a registry id."""
        stored = alert.model_copy(update={"id": self._next_id()})
        self._alerts.insert(0, stored)
        return stored

    def get_risk_alerts(self, severity: Severity | None = None) -> list[RiskAlert]:
        """Newest first, optionally only one severity."""
        alerts = [a for a in self._alerts if severity is None or a.severity == severity]
        return sorted(alerts, key=lambda a: a.ts, reverse=True)

    def get_alert(self, alert_id: str) -> RiskAlert | None:
        return next((a for a in self._alerts if a.id == alert_id), None)

    def acknowledge_alert(self, alert_id: str) -> bool:
        """Mark an alert acknowledged. False if the id is unknown."""
        alert = self.get_alert(alert_id)
        if alert is None:
            return False
        if not alert.acknowledged:
            alert.acknowledged = True
            log.info("alert_acknowledged", alert_id=alert_id, type=alert.type)
        return True

    def generate_risk_alert(
        self,
        alert_type: AlertType,
        severity: Severity,
        message: str | None = None,
        affected_positions: Sequence[str] | None = None,
        now: datetime | None = None,
    ) -> RiskAlert:
        """Create an alert from the template for *alert_type*."""
        title, default_message, recommendation = ALERT_TEMPLATES[alert_type]
        alert = self.add(RiskAlert(
            id="",
            type=alert_type,
            severity=severity,
            title=title,
            message=message or default_message,
            recommendation=recommendation,
            ts=now or datetime.now(timezone.utc),
            affected_positions=list(affected_positions or []),
        ))
        log.info(
            "alert_generated",
            alert_id=alert.id,
            type=alert_type,
            severity=severity,
        )
        return alert


def sample_alerts(now: datetime, rng: np.random.Generator) -> list[RiskAlert]:
    """Seed alerts for a fresh dashboard, stamped at random within the last day."""

    def _ago() -> datetime:
        return now - timedelta(hours=float(rng.uniform(0.0, 24.0)))

    return [
        RiskAlert(
            id="",
            type="high_risk",
            severity="high",
            title="High Portfolio Risk Detected",
            message="Current portfolio risk exceeds recommended levels",
            recommendation="Consider reducing position sizes or closing some positions",
            ts=_ago(),
            affected_positions=["pos_1", "pos_2"],
        ),
        RiskAlert(
            id="",
            type="correlation",
            severity="medium",
            title="High Correlation Risk",
            message="Multiple positions show high correlation (>0.8)",
            recommendation="Diversify positions across different asset classes",
            ts=_ago(),
            affected_positions=["pos_1", "pos_3"],
        ),
        RiskAlert(
            id="",
            type="concentration",
            severity="medium",
            title="Market Concentration Risk",
            message="Over 40% of portfolio concentrated in crypto market",
            recommendation="Consider rebalancing across forex and stocks",
            ts=_ago(),
            acknowledged=True,
        ),
        RiskAlert(
            id="",
            type="volatility",
            severity="low",
            title="Increased Market Volatility",
            message="Market volatility has increased by 25% in the last 24 hours",
            recommendation="Monitor positions closely and consider tightening stop losses",
            ts=_ago(),
        ),
    ]
