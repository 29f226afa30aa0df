"""Helper functions for merge_articles CLI."""

from __future__ import annotations

import argparse


def parse_merge_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for merge_articles."""

    parser = argparse.ArgumentParser(description="Append a batch of articles to the topic store.")

    parser.add_argument("--input", required=True, help="JSONL file of classified article records")
    parser.add_argument(
        "--config",
        default=None,
        help="Config name under configs/ (default: PIPELINE_CONFIG env var or 'prod')",
    )

    return parser.parse_args(argv)
