"""Config loader: reads YAML, then applies DASHBOARD_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from dashboard_core.config.schema import AppConfig

# env var -> (section, key)
_ENV_OVERRIDES = {
    "DASHBOARD_LOG_LEVEL": ("logging", "level"),
    "DASHBOARD_LOG_FORMAT": ("logging", "format"),
    "DASHBOARD_STARTING_BALANCE": ("portfolio", "starting_balance"),
    "DASHBOARD_RANDOM_SEED": ("analytics", "random_seed"),
    "DASHBOARD_API_PORT": ("api", "port"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        DASHBOARD_LOG_LEVEL         -> logging.level
        DASHBOARD_LOG_FORMAT        -> logging.format
        DASHBOARD_STARTING_BALANCE  -> portfolio.starting_balance
        DASHBOARD_RANDOM_SEED       -> analytics.random_seed
        DASHBOARD_API_PORT          -> api.port

    Values arrive as strings; pydantic coerces them to the schema types.
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    for env_var, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            data.setdefault(section, {})[key] = value

    return AppConfig.model_validate(data)
