"""Fixed-fractional position sizing. Pure functions, no state."""

from __future__ import annotations

from decimal import Decimal

from dashboard_core.models.risk import PositionSizing


class InvalidSizingInput(ValueError):
    """Sizing parameters that cannot produce a finite position size."""


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def calculate_position_sizing(
    account_balance: Decimal,
    risk_percent: Decimal,
    entry_price: Decimal,
    stop_loss: Decimal,
    leverage: Decimal = Decimal("1"),
    *,
    max_position_size_pct: float,
    max_leverage: float,
    margin_rate: float,
) -> PositionSizing:
    """Size a trade so that hitting the stop loses *risk_percent* of the account.

    risk_amount       = balance * risk_percent / 100
    stop_distance     = |entry - stop|
    size              = risk_amount / stop_distance
    value             = size * entry
    leverage_required = min(leverage, value / (balance * margin_rate))
    margin_required   = value / leverage_required
    max_size          = balance * max_position_size_pct / 100 / entry

    The recommended size is ``min(size, max_size)``.

    Raises:
        InvalidSizingInput: if entry equals stop, or balance, entry, risk or
            leverage is not positive.
    """
    balance = _dec(account_balance)
    risk_pct = _dec(risk_percent)
    entry = _dec(entry_price)
    stop = _dec(stop_loss)
    requested_leverage = _dec(leverage)

    if balance <= 0:
        raise InvalidSizingInput(f"account_balance must be positive, got {balance}")
    if entry <= 0:
        raise InvalidSizingInput(f"entry_price must be positive, got {entry}")
    if risk_pct <= 0:
        raise InvalidSizingInput(f"risk_percent must be positive, got {risk_pct}")
    if requested_leverage <= 0:
        raise InvalidSizingInput(f"leverage must be positive, got {requested_leverage}")

    stop_distance = abs(entry - stop)
    if stop_distance == 0:
        raise InvalidSizingInput("entry_price and stop_loss must differ")

    risk_amount = balance * risk_pct / 100
    position_size = risk_amount / stop_distance
    position_value = position_size * entry
    leverage_required = min(
        requested_leverage,
        position_value / (balance * _dec(margin_rate)),
    )
    margin_required = position_value / leverage_required
    max_size = balance * _dec(max_position_size_pct) / 100 / entry

    reasoning = [
        f"Risk amount: {risk_amount / balance * 100:.2f}% of account",
        f"Stop loss distance: {stop_distance / entry * 100:.2f}%",
        f"Position value: ${position_value:,.2f}",
        f"Margin required: ${margin_required:,.2f}",
    ]
    if leverage_required > _dec(max_leverage):
        reasoning.append(f"Warning: leverage exceeds limit ({max_leverage:g}x)")
    if position_size > max_size:
        reasoning.append(f"Size capped at max position size ({max_position_size_pct:g}% of account)")

    return PositionSizing(
        recommended_size=min(position_size, max_size),
        max_size=max_size,
        risk_amount=risk_amount,
        risk_percent=risk_pct,
        stop_loss_distance=stop_distance,
        leverage_required=leverage_required,
        margin_required=margin_required,
        reasoning=reasoning,
    )
