"""Risk calculations, position sizing and advisory alerts."""

from dashboard_core.risk.alerts import ALERT_TEMPLATES, AlertRegistry, sample_alerts
from dashboard_core.risk.calculator import RiskCalculator, quote_currency
from dashboard_core.risk.sizing import InvalidSizingInput, calculate_position_sizing

__all__ = [
    "ALERT_TEMPLATES",
    "AlertRegistry",
    "InvalidSizingInput",
    "RiskCalculator",
    "calculate_position_sizing",
    "quote_currency",
    "sample_alerts",
]
