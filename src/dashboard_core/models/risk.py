"""Risk figures, limits and alerts."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from dashboard_core.models.position import CAMEL_INPUT

AlertType = Literal[
    "high_risk", "margin_call", "correlation", "concentration", "volatility", "drawdown",
]
Severity = Literal["low", "medium", "high", "critical"]


class RiskLimits(BaseModel):
    """Portfolio-wide risk limits. Percentages are 0-100."""

    max_position_size: float = 10.0
    max_daily_loss: float = 2.0
    max_drawdown: float = 15.0
    max_leverage: float = 10.0
    max_correlation: float = 0.7
    max_concentration: float = 30.0
    stop_loss_required: bool = True
    max_open_positions: int = 15


class RiskLimitsUpdate(BaseModel):
    """Partial update for :class:`RiskLimits`."""

    model_config = CAMEL_INPUT

    max_position_size: float | None = None
    max_daily_loss: float | None = None
    max_drawdown: float | None = None
    max_leverage: float | None = None
    max_correlation: float | None = None
    max_concentration: float | None = None
    stop_loss_required: bool | None = None
    max_open_positions: int | None = None


class RiskMetrics(BaseModel):
    portfolio_value: Decimal
    total_exposure: Decimal
    max_drawdown: float
    current_drawdown: float
    value_at_risk: float
    sharpe_ratio: float
    sortino_ratio: float
    volatility: float
    beta: float
    correlation: dict[str, float] = Field(default_factory=dict)


class PositionRisk(BaseModel):
    position_id: str
    pair: str
    market: str
    position_size: Decimal
    risk_amount: Decimal
    risk_percent: Decimal
    leverage_used: Decimal
    margin_required: Decimal
    liquidation_price: Decimal | None = None
    risk_reward_ratio: Decimal | None = None
    probability_of_loss: float
    max_loss: Decimal
    time_at_risk: float  # hours


class ExposureBucket(BaseModel):
    exposure: Decimal = Decimal("0")
    percentage: Decimal = Decimal("0")
    risk: Decimal = Decimal("0")


class ExposureAnalysis(BaseModel):
    by_market: dict[str, ExposureBucket] = Field(default_factory=dict)
    by_currency: dict[str, ExposureBucket] = Field(default_factory=dict)
    by_asset_class: dict[str, ExposureBucket] = Field(default_factory=dict)
    correlation_matrix: dict[str, dict[str, float]] = Field(default_factory=dict)
    concentration_risk: Decimal = Decimal("0")


class PositionSizing(BaseModel):
    recommended_size: Decimal
    max_size: Decimal
    risk_amount: Decimal
    risk_percent: Decimal
    stop_loss_distance: Decimal
    leverage_required: Decimal
    margin_required: Decimal
    reasoning: list[str] = Field(default_factory=list)


class RiskAlert(BaseModel):
    """An advisory alert. Only ``acknowledged`` changes after creation."""

    id: str
    type: AlertType
    severity: Severity
    title: str
    message: str
    recommendation: str
    ts: datetime
    acknowledged: bool = False
    affected_positions: list[str] = Field(default_factory=list)
