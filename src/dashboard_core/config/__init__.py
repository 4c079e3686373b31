"""Configuration system."""

from dashboard_core.config.loader import load_config
from dashboard_core.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
