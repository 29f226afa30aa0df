"""CLI for classifying articles into editorial sections."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from classify_articles.classify_articles import cap_sections, classify_articles
from classify_articles.helpers import parse_classify_articles_args
from cluster_articles.cluster_articles import parse_articles
from common.aws import upload_jsonl_records_to_s3
from common.cli_helpers import setup_logging
from common.local_io import read_jsonl_local, save_jsonl_records_local

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_classify_articles_args(argv)

    articles, malformed = parse_articles(read_jsonl_local(args.input))
    if malformed:
        logger.warning("Skipped %d malformed records", malformed)

    results = classify_articles(articles)
    if not results:
        logger.warning("No articles classified")
        return

    if not args.no_cap:
        capped = cap_sections(results)
        results = [item for items in capped.values() for item in items]

    for result in results:
        logger.info("  %s | %s | hinted=%s", result.section, result.article.title, result.hinted)

    output = [result.article.to_record() for result in results]

    if args.load_s3:
        upload_jsonl_records_to_s3(output, "classified_articles")

    if args.load_local:
        save_jsonl_records_local(output, "classified_articles")


if __name__ == "__main__":
    main()
