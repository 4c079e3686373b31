"""Pydantic domain models."""

from dashboard_core.models.portfolio import (
    PerformancePoint,
    PortfolioAllocation,
    PortfolioMetrics,
)
from dashboard_core.models.position import (
    MARKETS,
    NewPosition,
    Position,
    PositionUpdate,
)
from dashboard_core.models.risk import (
    ExposureAnalysis,
    ExposureBucket,
    PositionRisk,
    PositionSizing,
    RiskAlert,
    RiskLimits,
    RiskLimitsUpdate,
    RiskMetrics,
)

__all__ = [
    "MARKETS",
    "ExposureAnalysis",
    "ExposureBucket",
    "NewPosition",
    "PerformancePoint",
    "PortfolioAllocation",
    "PortfolioMetrics",
    "Position",
    "PositionRisk",
    "PositionSizing",
    "PositionUpdate",
    "RiskAlert",
    "RiskLimits",
    "RiskLimitsUpdate",
    "RiskMetrics",
]
