"""Tests for Pydantic domain models."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from dashboard_core.models import NewPosition, Position, PositionUpdate, RiskAlert, RiskLimitsUpdate

NOW = datetime.now(timezone.utc)


def _fields(**overrides):
    fields = dict(
        pair="BTC/USD",
        direction="long",
        entry_price=Decimal("42000"),
        current_price=Decimal("43000"),
        quantity=Decimal("0.5"),
        market="crypto",
    )
    fields.update(overrides)
    return fields


class TestNewPosition:
    def test_defaults(self):
        p = NewPosition(**_fields())
        assert p.status == "open"
        assert p.fees == Decimal("0")
        assert p.stop_loss is None
        assert p.entry_ts.tzinfo is not None

    def test_invalid_direction(self):
        with pytest.raises(ValidationError):
            NewPosition(**_fields(direction="up"))

    def test_invalid_market(self):
        with pytest.raises(ValidationError):
            NewPosition(**_fields(market="bonds"))

    @pytest.mark.parametrize("field", ["entry_price", "current_price", "quantity"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ValidationError):
            NewPosition(**_fields(**{field: Decimal("0")}))

    def test_negative_fees_rejected(self):
        with pytest.raises(ValidationError):
            NewPosition(**_fields(fees=Decimal("-1")))

    def test_float_input_coerced(self):
        p = NewPosition(**_fields(entry_price=1.0825))
        assert p.entry_price == Decimal("1.0825")

    def test_naive_entry_ts_taken_as_utc(self):
        p = NewPosition(**_fields(entry_ts="2025-06-14T10:00:00"))
        assert p.entry_ts == datetime(2025, 6, 14, 10, 0, tzinfo=timezone.utc)
        assert p.entry_ts.tzinfo is timezone.utc

    def test_offset_entry_ts_converted_to_utc(self):
        p = NewPosition(**_fields(entry_ts="2025-06-14T12:00:00+02:00"))
        assert p.entry_ts.tzinfo is timezone.utc
        assert p.entry_ts.hour == 10

    def test_camel_case_keys_accepted(self):
        p = NewPosition.model_validate({
            "pair": "ETH/USD",
            "direction": "long",
            "entryPrice": 3000,
            "currentPrice": 3100,
            "quantity": 2,
            "stopLoss": 2900,
            "market": "crypto",
        })
        assert p.entry_price == Decimal("3000")
        assert p.stop_loss == Decimal("2900")


class TestPosition:
    def test_requires_id(self):
        with pytest.raises(ValidationError):
            Position(**_fields())

    def test_pnl_defaults_to_zero(self):
        p = Position(id="pos_1", **_fields())
        assert p.pnl == 0
        assert p.pnl_percent == 0


class TestPartialUpdates:
    def test_position_update_tracks_set_fields(self):
        update = PositionUpdate(stop_loss=Decimal("41000"))
        assert update.model_dump(exclude_unset=True) == {"stop_loss": Decimal("41000")}

    def test_limits_update_tracks_set_fields(self):
        update = RiskLimitsUpdate(max_leverage=5)
        assert update.model_dump(exclude_unset=True) == {"max_leverage": 5.0}

    def test_camel_case_updates_dump_field_names(self):
        update = PositionUpdate.model_validate({"takeProfit": 45000})
        assert update.model_dump(exclude_unset=True) == {"take_profit": Decimal("45000")}
        limits = RiskLimitsUpdate.model_validate({"maxOpenPositions": 20})
        assert limits.model_dump(exclude_unset=True) == {"max_open_positions": 20}


class TestRiskAlert:
    def test_invalid_severity(self):
        with pytest.raises(ValidationError):
            RiskAlert(
                id="alert_1",
                type="drawdown",
                severity="extreme",
                title="t",
                message="m",
                recommendation="r",
                ts=NOW,
            )
