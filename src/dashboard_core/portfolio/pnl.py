"""P&L calculations. Pure functions, no ledger state."""

from __future__ import annotations

from decimal import Decimal


def position_notional(entry_price: Decimal, quantity: Decimal) -> Decimal:
    """Absolute entry notional: |entry_price * quantity|."""
    return abs(entry_price * quantity)


def calculate_gross_pnl(
    direction: str,
    entry_price: Decimal,
    current_price: Decimal,
    quantity: Decimal,
) -> Decimal:
    """P&L before fees.

    long:  (current - entry) * qty
    short: (entry - current) * qty
    """
    multiplier = 1 if direction == "long" else -1
    return (current_price - entry_price) * quantity * multiplier


def calculate_pnl(
    direction: str,
    entry_price: Decimal,
    current_price: Decimal,
    quantity: Decimal,
    fees: Decimal,
) -> Decimal:
    """P&L net of fees."""
    return calculate_gross_pnl(direction, entry_price, current_price, quantity) - fees


def calculate_pnl_percent(
    direction: str,
    entry_price: Decimal,
    current_price: Decimal,
    quantity: Decimal,
) -> Decimal:
    """Gross P&L as a percentage of entry notional.

    Fees are not deducted here, so ``pnl`` and ``pnl_percent`` of the same
    position disagree by the fee amount.
    """
    notional = entry_price * quantity
    if notional == 0:
        return Decimal("0")
    gross = calculate_gross_pnl(direction, entry_price, current_price, quantity)
    return gross / notional * 100
