"""Allow running the API as: python -m dashboard_core.api [--config path]."""

import argparse

from dashboard_core.api.runner import main

parser = argparse.ArgumentParser(description="Trading dashboard API server")
parser.add_argument("--config", default=None, help="Path to config.yaml")
args = parser.parse_args()
main(config_path=args.config)
