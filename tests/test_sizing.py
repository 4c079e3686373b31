"""Tests for fixed-fractional position sizing."""

from __future__ import annotations

from decimal import Decimal

import pytest

from dashboard_core.risk.sizing import InvalidSizingInput, calculate_position_sizing

D = Decimal

LIMITS = dict(max_position_size_pct=10.0, max_leverage=10.0, margin_rate=0.1)


class TestReferenceScenario:
    @pytest.fixture
    def sizing(self):
        return calculate_position_sizing(D("100000"), D("2"), D("1.085"), D("1.08"), **LIMITS)

    def test_core_figures(self, sizing):
        assert sizing.risk_amount == D("2000")
        assert sizing.stop_loss_distance == D("0.005")
        assert sizing.risk_percent == D("2")

    def test_leverage_capped_by_request(self, sizing):
        # 434000 / (100000 * 0.1) = 43.4, but only 1x was requested
        assert sizing.leverage_required == D("1")
        assert sizing.margin_required == D("434000")

    def test_recommended_size_capped_by_limit(self, sizing):
        # uncapped size would be 400000 units
        expected_max = D("100000") * D("10") / 100 / D("1.085")
        assert sizing.max_size == expected_max
        assert sizing.recommended_size == expected_max

    def test_reasoning(self, sizing):
        assert sizing.reasoning[:4] == [
            "Risk amount: 2.00% of account",
            "Stop loss distance: 0.46%",
            "Position value: $434,000.00",
            "Margin required: $434,000.00",
        ]
        assert "Size capped at max position size (10% of account)" in sizing.reasoning
        assert not any("leverage exceeds" in line for line in sizing.reasoning)


class TestSizing:
    def test_uncapped_size(self):
        sizing = calculate_position_sizing(D("100000"), D("1"), D("100"), D("80"), **LIMITS)
        # risk 1000 / distance 20 = 50 units; max is 10000 / 100 = 100 units
        assert sizing.recommended_size == D("50")
        assert sizing.max_size == D("100")
        assert len(sizing.reasoning) == 4

    def test_stop_above_entry_for_shorts(self):
        sizing = calculate_position_sizing(D("100000"), D("1"), D("100"), D("120"), **LIMITS)
        assert sizing.stop_loss_distance == D("20")
        assert sizing.recommended_size == D("50")

    def test_leverage_warning(self):
        sizing = calculate_position_sizing(
            D("100000"), D("2"), D("1.085"), D("1.08"), D("50"), **LIMITS,
        )
        assert sizing.leverage_required == D("43.4")
        assert sizing.margin_required == D("10000")
        assert "Warning: leverage exceeds limit (10x)" in sizing.reasoning

    def test_accepts_plain_numbers(self):
        sizing = calculate_position_sizing(100000, 2, 1.085, 1.08, **LIMITS)
        assert sizing.risk_amount == D("2000")
        assert sizing.stop_loss_distance == D("0.005")

    def test_margin_rate_changes_leverage(self):
        sizing = calculate_position_sizing(
            D("100000"), D("2"), D("1.085"), D("1.08"), D("100"),
            max_position_size_pct=10.0, max_leverage=10.0, margin_rate=0.2,
        )
        assert sizing.leverage_required == D("21.7")


class TestInvalidInput:
    def test_entry_equal_to_stop_rejected(self):
        with pytest.raises(InvalidSizingInput, match="must differ"):
            calculate_position_sizing(D("100000"), D("2"), D("1.085"), D("1.085"), **LIMITS)

    def test_is_a_value_error(self):
        assert issubclass(InvalidSizingInput, ValueError)

    @pytest.mark.parametrize(
        "balance,risk,entry,stop,leverage",
        [
            ("0", "2", "100", "90", "1"),
            ("-5", "2", "100", "90", "1"),
            ("1000", "0", "100", "90", "1"),
            ("1000", "2", "0", "90", "1"),
            ("1000", "2", "100", "90", "0"),
        ],
    )
    def test_non_positive_inputs_rejected(self, balance, risk, entry, stop, leverage):
        with pytest.raises(InvalidSizingInput):
            calculate_position_sizing(D(balance), D(risk), D(entry), D(stop), D(leverage), **LIMITS)
