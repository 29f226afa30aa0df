"""CLI for clustering articles."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from cluster_articles.cluster_articles import cluster_articles
from cluster_articles.helpers import parse_cluster_articles_args
from cluster_articles.models import ClusterConfig
from common.aws import upload_jsonl_records_to_s3
from common.cli_helpers import parse_csv_list, setup_logging
from common.local_io import read_jsonl_local, save_jsonl_records_local

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_cluster_articles_args(argv)

    config = ClusterConfig(
        similarity_threshold=args.similarity_threshold,
        max_cluster_size=args.max_cluster_size,
        preferred_publishers=frozenset(parse_csv_list(args.preferred_publishers)),
        topic_aware=args.topic_aware,
    )

    records = list(read_jsonl_local(args.input))
    if not records:
        logger.warning("No articles to cluster")
        return

    representatives, stats = cluster_articles(records, config)
    if not representatives:
        logger.warning("No representatives produced")
        return

    for article in representatives:
        logger.info("  %s | %s", article.publisher, article.title)

    output = [article.to_record() for article in representatives]

    if args.load_s3:
        upload_jsonl_records_to_s3(output, "clustered_articles")

    if args.load_local:
        save_jsonl_records_local(output, "clustered_articles")

    logger.info(
        "Kept %d of %d articles (%d%% reduction)",
        stats.representative_count,
        stats.original_count,
        stats.reduction_percent,
    )


if __name__ == "__main__":
    main()
