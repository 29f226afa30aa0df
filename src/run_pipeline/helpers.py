"""Helper functions for run_pipeline CLI."""

from __future__ import annotations

import argparse


def parse_run_pipeline_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for run_pipeline."""

    parser = argparse.ArgumentParser(description="Run a batch of raw articles through the full pipeline.")

    parser.add_argument("--input", required=True, help="JSONL file of raw article records")
    parser.add_argument(
        "--config",
        default=None,
        help="Config name under configs/ (default: PIPELINE_CONFIG env var or 'prod')",
    )

    return parser.parse_args(argv)
