"""CLI for running the full article pipeline on one batch."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.local_io import read_jsonl_local
from merge_articles.store import build_store
from run_pipeline.config import load_config
from run_pipeline.helpers import parse_run_pipeline_args
from run_pipeline.run_pipeline import run_pipeline

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_run_pipeline_args(argv)
    config = load_config(args.config)

    result = run_pipeline(read_jsonl_local(args.input), build_store(config.store), config)

    for section, count in result.sections.items():
        if count:
            logger.info("  %s: %d", section, count)
    logger.info(
        "Reduction %d%%, appended %d, store total %d",
        result.stats.reduction_percent,
        result.appended_articles,
        result.summary.total_articles,
    )


if __name__ == "__main__":
    main()
