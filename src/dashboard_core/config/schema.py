"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from pydantic import BaseModel, Field

from dashboard_core.models.risk import RiskLimits


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class PortfolioConfig(BaseModel):
    starting_balance: float = 100000
    seed_sample_positions: bool = True
    history_days: int = Field(default=30, ge=0)


class RiskConfig(BaseModel):
    # Fraction of portfolio value posted as margin per position
    margin_rate: float = Field(default=0.1, gt=0)
    # Share of the margin that can be lost before liquidation
    liquidation_buffer: float = Field(default=0.8, gt=0, le=1)
    concentration_threshold_pct: float = 30.0
    limits: RiskLimits = Field(default_factory=RiskLimits)


class AlertsConfig(BaseModel):
    seed_sample_alerts: bool = True


class AnalyticsConfig(BaseModel):
    random_seed: int | None = None


class ApiConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    portfolio: PortfolioConfig = Field(default_factory=PortfolioConfig)
    risk: RiskConfig = Field(default_factory=RiskConfig)
    alerts: AlertsConfig = Field(default_factory=AlertsConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
