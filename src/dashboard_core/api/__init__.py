"""HTTP API for the dashboard."""

from dashboard_core.api.app import create_app

__all__ = ["create_app"]
