"""FastAPI server runner."""

from __future__ import annotations

import uvicorn

from dashboard_core.api.app import create_app
from dashboard_core.config.loader import load_config
from dashboard_core.logging import get_logger, setup_logging_from_config
from dashboard_core.store import DashboardStore

logger = get_logger("api_runner")


def main(config_path: str | None = None) -> None:
    """Build the store from config and serve the API."""
    config = load_config(config_path)
    setup_logging_from_config(config.logging)

    app = create_app(DashboardStore(config))
    logger.info("Starting FastAPI server", host=config.api.host, port=config.api.port)

    try:
        uvicorn.run(
            app,
            host=config.api.host,
            port=config.api.port,
            log_config=None,  # Use our structlog setup
        )
    except Exception as e:
        logger.error("Failed to start server", error=str(e))
        raise
