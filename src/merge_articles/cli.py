"""CLI for merging a batch of articles into the topic store."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from cluster_articles.cluster_articles import parse_articles
from common.cli_helpers import setup_logging
from common.local_io import read_jsonl_local
from merge_articles.helpers import parse_merge_articles_args
from merge_articles.merge_articles import group_by_slug, merge_topics, summarize
from merge_articles.store import build_store
from run_pipeline.config import load_config

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_merge_articles_args(argv)
    config = load_config(args.config)

    articles, malformed = parse_articles(read_jsonl_local(args.input))
    if malformed:
        logger.warning("Skipped %d malformed records", malformed)

    store = build_store(config.store)
    existing = store.load()
    merged, appended = merge_topics(existing, group_by_slug(articles))

    if appended:
        store.save(merged)

    summary = summarize(merged)
    logger.info(
        "Appended %d articles; store has %d articles in %d topics from %d publishers",
        appended,
        summary.total_articles,
        summary.total_topics,
        summary.total_publishers,
    )


if __name__ == "__main__":
    main()
