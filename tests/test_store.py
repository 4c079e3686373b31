"""Tests for the dashboard store wiring."""

from __future__ import annotations

from decimal import Decimal

from conftest import NOW, new_position
from dashboard_core.config.schema import AppConfig
from dashboard_core.models import PositionUpdate, RiskLimitsUpdate
from dashboard_core.store import DashboardStore

D = Decimal


class TestSeeding:
    def test_demo_book_and_alerts(self, store):
        assert len(store.get_positions()) == 5
        assert len(store.get_positions("open")) == 4
        assert len(store.get_risk_alerts()) == 4

    def test_reference_eurusd_position(self, store):
        pos = store.get_position("pos_1")
        assert pos.pair == "EUR/USD"
        assert pos.pnl == D("205")
        assert round(float(pos.pnl_percent), 4) == 0.2032

    def test_empty_store(self, empty_store):
        assert empty_store.get_positions() == []
        assert empty_store.get_risk_alerts() == []
        metrics = empty_store.get_portfolio_metrics(now=NOW)
        assert metrics.total_value == D("100000")
        assert metrics.win_rate == 0.0

    def test_starting_balance_from_config(self):
        config = AppConfig.model_validate({"portfolio": {"starting_balance": 250000}})
        store = DashboardStore(config, now=NOW)
        assert store.starting_balance == D("250000")

    def test_same_seed_same_placeholders(self, seeded_config):
        a = DashboardStore(seeded_config, now=NOW)
        b = DashboardStore(seeded_config, now=NOW)
        assert a.get_risk_metrics() == b.get_risk_metrics()
        assert a.get_risk_alerts() == b.get_risk_alerts()


class TestPortfolioFlow:
    def test_total_value_matches_ledger(self, store):
        metrics = store.get_portfolio_metrics(now=NOW)
        assert metrics.total_value == store.starting_balance + sum(p.pnl for p in store.get_positions())
        assert metrics.open_positions == 4
        assert metrics.closed_positions == 1
        assert metrics.win_rate == 100.0

    def test_close_feeds_metrics(self, store):
        store.close_position("pos_1", D("1.0700"))
        metrics = store.get_portfolio_metrics(now=NOW)
        assert metrics.closed_positions == 2
        assert metrics.win_rate == 50.0

    def test_update_and_add(self, store):
        store.update_position("pos_2", PositionUpdate(stop_loss=D("41000")))
        added = store.add_position(new_position(pair="USD/JPY"))
        assert store.get_position("pos_2").stop_loss == D("41000")
        assert added.id == "pos_6"

    def test_allocation_rows(self, store):
        rows = store.get_portfolio_allocation()
        assert [r.positions for r in rows] == [2, 1, 1]

    def test_history_default_days(self, store):
        assert len(store.get_performance_history(now=NOW)) == 31
        assert len(store.get_performance_history(7, now=NOW)) == 8


class TestRiskViews:
    def test_risk_metrics_cover_open_positions(self, store):
        open_exposure = sum(p.entry_price * p.quantity for p in store.get_positions("open"))
        assert store.get_risk_metrics().total_exposure == open_exposure

    def test_exposure_excludes_closed(self, store):
        exposure = store.get_exposure()
        assert exposure.by_market["stocks"].exposure == D("18520")

    def test_position_views_unknown_id(self, store):
        assert store.get_position_risk("pos_404") is None
        assert store.get_position_violations("pos_404") is None

    def test_position_views(self, store):
        risk = store.get_position_risk("pos_1")
        assert risk.pair == "EUR/USD"
        assert store.get_position_violations("pos_1") == ["Leverage exceeds limit (10x)"]

    def test_limits_round_trip(self, store):
        store.update_risk_limits(RiskLimitsUpdate(max_leverage=20))
        assert store.get_risk_limits().max_leverage == 20
        assert store.get_position_violations("pos_1") == []

    def test_alert_flow(self, store):
        alert = store.generate_risk_alert("concentration", "high")
        assert store.get_risk_alerts()[0].id == alert.id
        assert store.acknowledge_alert(alert.id) is True
        assert store.acknowledge_alert("alert_404") is False
