"""Helper functions for cluster_articles CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import parse_fraction

DEFAULT_SIMILARITY_THRESHOLD = 0.75
DEFAULT_MAX_CLUSTER_SIZE = 10


def add_cluster_options(parser: argparse.ArgumentParser) -> None:
    """Add the clustering options shared by the CLI and the diagnostics harness."""
    parser.add_argument(
        "--similarity-threshold",
        type=lambda v: parse_fraction(v, "similarity-threshold"),
        default=DEFAULT_SIMILARITY_THRESHOLD,
        help=f"Minimum similarity to treat two articles as duplicates (default: {DEFAULT_SIMILARITY_THRESHOLD})",
    )
    parser.add_argument(
        "--max-cluster-size",
        type=int,
        default=DEFAULT_MAX_CLUSTER_SIZE,
        help=f"Maximum number of articles per cluster (default: {DEFAULT_MAX_CLUSTER_SIZE})",
    )
    parser.add_argument(
        "--preferred-publishers",
        default=None,
        help="Comma-separated publishers preferred as cluster representatives",
    )
    parser.add_argument(
        "--topic-aware",
        action="store_true",
        help="Cluster separately within each topic",
    )


def parse_cluster_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for cluster_articles."""

    parser = argparse.ArgumentParser(description="Deduplicate and cluster a batch of raw articles.")

    # Input options
    parser.add_argument("--input", required=True, help="JSONL file of raw article records")

    # Clustering options
    add_cluster_options(parser)

    # Output options
    parser.add_argument("--load-s3", action="store_true", help="Upload representatives to S3")
    parser.add_argument("--load-local", action="store_true", help="Save representatives to local file")

    return parser.parse_args(argv)
