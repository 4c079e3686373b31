"""Risk calculations over ledger snapshots, plus the shared risk limits."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal

import numpy as np

from dashboard_core.config.schema import RiskConfig
from dashboard_core.logging import get_logger
from dashboard_core.models.position import Position
from dashboard_core.models.risk import (
    ExposureAnalysis,
    ExposureBucket,
    PositionRisk,
    PositionSizing,
    RiskLimits,
    RiskLimitsUpdate,
    RiskMetrics,
)
from dashboard_core.portfolio.analytics import total_exposure
from dashboard_core.portfolio.pnl import position_notional
from dashboard_core.risk.sizing import calculate_position_sizing

log = get_logger("risk_calculator")

_ZERO = Decimal("0")

ASSET_CLASSES = {"forex": "Currency", "crypto": "Crypto", "stocks": "Equity"}

# Benchmark -> (low, high) range for the placeholder correlations
_BENCHMARK_CORRELATION_RANGES = {
    "S&P 500": (0.3, 0.7),
    "USD Index": (-0.2, 0.2),
    "VIX": (-0.4, -0.1),
    "Gold": (0.1, 0.4),
}

# Only the first N distinct pairs appear in the correlation matrix
_MATRIX_PAIRS = 5


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def quote_currency(pair: str) -> str:
    """Bucket key for currency exposure: USD if the pair mentions it, else the quote leg."""
    if "USD" in pair:
        return "USD"
    parts = pair.split("/")
    if len(parts) > 1 and parts[1]:
        return parts[1]
    return pair


class RiskCalculator:
    """Stateless risk math apart from the mutable :class:`RiskLimits` record.

    Fields that would need a price history (VaR, Sharpe, correlations, loss
    probability) are sampled from *rng* within fixed ranges.
    """

    def __init__(self, config: RiskConfig, rng: np.random.Generator) -> None:
        self.config = config
        self.rng = rng
        self._limits = config.limits.model_copy()

    # ── Limits ────────────────────────────────────────────────

    def get_risk_limits(self) -> RiskLimits:
        return self._limits.model_copy()

    def update_risk_limits(self, update: RiskLimitsUpdate) -> RiskLimits:
        """Merge the explicitly set, non-null fields of *update*."""
        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        self._limits = self._limits.model_copy(update=changes)
        log.info("risk_limits_updated", **changes)
        return self.get_risk_limits()

    # ── Portfolio ─────────────────────────────────────────────

    def calculate_risk_metrics(
        self,
        portfolio_value: Decimal,
        positions: Sequence[Position],
    ) -> RiskMetrics:
        value = _dec(portfolio_value)
        rng = self.rng
        return RiskMetrics(
            portfolio_value=value,
            total_exposure=total_exposure(positions),
            max_drawdown=float(-12.5 - rng.uniform(0.0, 5.0)),
            current_drawdown=float(-3.2 - rng.uniform(0.0, 4.0)),
            value_at_risk=float(value) * float(rng.uniform(0.02, 0.05)),
            sharpe_ratio=float(rng.uniform(0.8, 2.0)),
            sortino_ratio=float(rng.uniform(1.1, 2.5)),
            volatility=float(rng.uniform(0.15, 0.25)),
            beta=float(rng.uniform(0.8, 1.4)),
            correlation={
                name: float(rng.uniform(low, high))
                for name, (low, high) in _BENCHMARK_CORRELATION_RANGES.items()
            },
        )

    def analyze_exposure(
        self,
        positions: Sequence[Position],
        portfolio_value: Decimal,
    ) -> ExposureAnalysis:
        """Group exposure three ways and flag market concentration.

        ``concentration_risk`` is the largest market share when it exceeds the
        configured threshold, otherwise 0.
        """
        value = _dec(portfolio_value)
        by_market: dict[str, ExposureBucket] = {}
        by_currency: dict[str, ExposureBucket] = {}
        by_asset_class: dict[str, ExposureBucket] = {}

        for pos in positions:
            exposure = position_notional(pos.entry_price, pos.quantity)
            risk = abs(pos.pnl)
            keys = (
                (by_market, pos.market),
                (by_currency, quote_currency(pos.pair)),
                (by_asset_class, ASSET_CLASSES[pos.market]),
            )
            for groups, key in keys:
                bucket = groups.setdefault(key, ExposureBucket())
                bucket.exposure += exposure
                bucket.risk += risk

        for groups in (by_market, by_currency, by_asset_class):
            for bucket in groups.values():
                bucket.percentage = bucket.exposure / value * 100 if value > 0 else _ZERO

        largest = max((b.percentage for b in by_market.values()), default=_ZERO)
        threshold = _dec(self.config.concentration_threshold_pct)

        return ExposureAnalysis(
            by_market=by_market,
            by_currency=by_currency,
            by_asset_class=by_asset_class,
            correlation_matrix=self._correlation_matrix(positions),
            concentration_risk=largest if largest > threshold else _ZERO,
        )

    def _correlation_matrix(self, positions: Sequence[Position]) -> dict[str, dict[str, float]]:
        pairs = list(dict.fromkeys(p.pair for p in positions))[:_MATRIX_PAIRS]
        matrix: dict[str, dict[str, float]] = {pair: {} for pair in pairs}
        for i, a in enumerate(pairs):
            matrix[a][a] = 1.0
            for b in pairs[i + 1:]:
                rho = float(self.rng.uniform(-0.5, 0.5))
                matrix[a][b] = rho
                matrix[b][a] = rho
        return matrix

    # ── Single position ───────────────────────────────────────

    def calculate_position_risk(
        self,
        position: Position,
        portfolio_value: Decimal,
        now: datetime | None = None,
    ) -> PositionRisk:
        """Risk, leverage and liquidation figures for one position.

        Without a stop loss the whole notional counts as at risk. Leverage
        assumes ``margin_rate`` of the portfolio is posted per position.
        """
        value = _dec(portfolio_value)
        if value <= 0:
            raise ValueError(f"portfolio_value must be positive, got {value}")
        now = now or datetime.now(timezone.utc)

        entry = position.entry_price
        size = position_notional(entry, position.quantity)
        if position.stop_loss is None:
            risk_amount = size
        else:
            risk_amount = abs(entry - position.stop_loss) * position.quantity

        leverage = size / (value * _dec(self.config.margin_rate))
        margin_required = size / leverage if leverage > 0 else _ZERO

        liquidation_price = None
        if leverage > 1:
            distance = (1 / leverage) * _dec(self.config.liquidation_buffer)
            if position.direction == "long":
                liquidation_price = entry * (1 - distance)
            else:
                liquidation_price = entry * (1 + distance)

        risk_reward = None
        if position.stop_loss is not None and position.take_profit is not None:
            stop_distance = abs(entry - position.stop_loss)
            if stop_distance > 0:
                risk_reward = abs(position.take_profit - entry) / stop_distance

        return PositionRisk(
            position_id=position.id,
            pair=position.pair,
            market=position.market,
            position_size=size,
            risk_amount=risk_amount,
            risk_percent=risk_amount / value * 100,
            leverage_used=leverage,
            margin_required=margin_required,
            liquidation_price=liquidation_price,
            risk_reward_ratio=risk_reward,
            probability_of_loss=float(self.rng.uniform(45.0, 65.0)),
            max_loss=risk_amount,
            time_at_risk=(now - position.entry_ts).total_seconds() / 3600,
        )

    def check_risk_limits(self, position: Position, portfolio_value: Decimal) -> list[str]:
        """Advisory check of one position against the limits. Blocks nothing."""
        limits = self._limits
        risk = self.calculate_position_risk(position, portfolio_value)
        violations: list[str] = []

        if risk.risk_percent > _dec(limits.max_position_size):
            violations.append(f"Position size exceeds limit ({limits.max_position_size:g}%)")
        if risk.leverage_used > _dec(limits.max_leverage):
            violations.append(f"Leverage exceeds limit ({limits.max_leverage:g}x)")
        if limits.stop_loss_required and position.stop_loss is None:
            violations.append("Stop loss is required but not set")

        return violations

    def calculate_position_sizing(
        self,
        account_balance: Decimal,
        risk_percent: Decimal,
        entry_price: Decimal,
        stop_loss: Decimal,
        leverage: Decimal = Decimal("1"),
    ) -> PositionSizing:
        """Size a trade against the current limits. See :func:`calculate_position_sizing`."""
        return calculate_position_sizing(
            account_balance,
            risk_percent,
            entry_price,
            stop_loss,
            leverage,
            max_position_size_pct=self._limits.max_position_size,
            max_leverage=self._limits.max_leverage,
            margin_rate=self.config.margin_rate,
        )
