"""Helper functions for classify_articles CLI."""

from __future__ import annotations

import argparse


def parse_classify_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for classify_articles."""

    parser = argparse.ArgumentParser(description="Assign articles to editorial sections.")

    # Input options
    parser.add_argument("--input", required=True, help="JSONL file of article records")

    # Section options
    parser.add_argument(
        "--no-cap",
        action="store_true",
        help="Keep every article instead of applying per-section limits",
    )

    # Output options
    parser.add_argument("--load-s3", action="store_true", help="Upload results to S3")
    parser.add_argument("--load-local", action="store_true", help="Save results to local file")

    return parser.parse_args(argv)
