"""Shared test fixtures."""

from datetime import datetime, timezone
from decimal import Decimal

import numpy as np
import pytest

from dashboard_core.config.schema import AppConfig
from dashboard_core.models import NewPosition
from dashboard_core.store import DashboardStore

NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def new_position(**overrides) -> NewPosition:
    """EUR/USD long from the demo book; override any field."""
    fields = dict(
        pair="EUR/USD",
        direction="long",
        entry_price=Decimal("1.0825"),
        current_price=Decimal("1.0847"),
        quantity=Decimal("100000"),
        entry_ts=NOW,
        stop_loss=Decimal("1.078"),
        take_profit=Decimal("1.09"),
        fees=Decimal("15"),
        market="forex",
    )
    fields.update(overrides)
    return NewPosition(**fields)


@pytest.fixture
def rng():
    """Seeded generator so placeholder figures are reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def seeded_config():
    return AppConfig.model_validate({"analytics": {"random_seed": 7}})


@pytest.fixture
def empty_config():
    """No demo positions or alerts."""
    return AppConfig.model_validate({
        "portfolio": {"seed_sample_positions": False},
        "alerts": {"seed_sample_alerts": False},
        "analytics": {"random_seed": 7},
    })


@pytest.fixture
def store(seeded_config):
    """Store holding the demo book, positions dated relative to NOW."""
    return DashboardStore(seeded_config, now=NOW)


@pytest.fixture
def empty_store(empty_config):
    return DashboardStore(empty_config, now=NOW)
