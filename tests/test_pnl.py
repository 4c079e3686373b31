"""Tests for the pure P&L functions."""

from __future__ import annotations

from decimal import Decimal

import pytest

from dashboard_core.portfolio.pnl import (
    calculate_gross_pnl,
    calculate_pnl,
    calculate_pnl_percent,
    position_notional,
)

D = Decimal


class TestGrossPnl:
    def test_long_gain(self):
        assert calculate_gross_pnl("long", D("100"), D("110"), D("2")) == D("20")

    def test_long_loss(self):
        assert calculate_gross_pnl("long", D("100"), D("95"), D("2")) == D("-10")

    def test_short_gain_when_price_falls(self):
        assert calculate_gross_pnl("short", D("100"), D("95"), D("2")) == D("10")

    def test_short_loss_when_price_rises(self):
        assert calculate_gross_pnl("short", D("100"), D("110"), D("2")) == D("-20")


class TestNetPnl:
    def test_eurusd_long_scenario(self):
        pnl = calculate_pnl("long", D("1.0825"), D("1.0847"), D("100000"), D("15"))
        assert pnl == D("205")

    def test_gbpusd_short(self):
        pnl = calculate_pnl("short", D("1.268"), D("1.2634"), D("50000"), D("8"))
        assert pnl == D("222")

    def test_fees_turn_flat_trade_negative(self):
        assert calculate_pnl("long", D("50"), D("50"), D("10"), D("3")) == D("-3")


class TestPnlPercent:
    def test_eurusd_percent_excludes_fees(self):
        pct = calculate_pnl_percent("long", D("1.0825"), D("1.0847"), D("100000"))
        assert float(pct) == pytest.approx(0.20323, abs=1e-5)

    def test_short_percent(self):
        pct = calculate_pnl_percent("short", D("200"), D("190"), D("1"))
        assert pct == D("5")

    def test_zero_notional_is_zero(self):
        assert calculate_pnl_percent("long", D("0"), D("10"), D("1")) == D("0")


class TestNotional:
    def test_absolute_value(self):
        assert position_notional(D("1.5"), D("-4")) == D("6")
