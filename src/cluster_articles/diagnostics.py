"""Run the clustering stage on a generated batch and report stats and savings.

A debugging aid: it exercises ``cluster_articles`` exactly as the pipeline
does, on mock articles that repeat a handful of stories across publishers.
"""

from __future__ import annotations

import argparse
import logging
import re
from datetime import datetime, timedelta, timezone

from cluster_articles.cluster_articles import cluster_articles
from cluster_articles.helpers import add_cluster_options
from cluster_articles.models import ClusterConfig, PreprocessStats, RawArticle
from common.cli_helpers import parse_csv_list, setup_logging

logger = logging.getLogger(__name__)

MOCK_PUBLISHERS = [
    "BBC",
    "CNN",
    "NPR",
    "The Guardian",
    "Al Jazeera",
    "Reuters",
    "AP",
    "Bloomberg",
    "WSJ",
    "NYT",
    "Washington Post",
    "The Atlantic",
    "Vox",
    "Politico",
    "The Hill",
]

MOCK_TOPICS = [
    "Breaking News",
    "Politics",
    "World News",
    "Business",
    "Technology",
    "Science",
    "Health",
    "Climate",
    "Opinion",
    "Analysis",
]

STORY_TEMPLATES = [
    "President announces new policy on {subject}",
    "Breaking: Major development in {subject} sector",
    "Analysis: What {subject} means for the future",
    "Opinion: The truth about {subject}",
    "Experts weigh in on {subject} controversy",
    "{subject}: What you need to know",
    "In-depth: Understanding the {subject} crisis",
    "Investigation: Behind the {subject} scandal",
]

STORY_SUBJECTS = ["climate change", "economy", "elections", "tech regulation"]

DEFAULT_PREFERRED_PUBLISHERS = "BBC,CNN,NPR,The Guardian"

TOKENS_PER_ARTICLE = 150
LATENCY_MS_PER_ARTICLE = 50
COST_PER_MILLION_TOKENS = 0.15


def _slugify(value: str) -> str:
    return re.sub(r"\s+", "-", value.strip().lower())


def generate_mock_articles(count: int = 120, now: datetime | None = None) -> list[RawArticle]:
    """Build a deterministic batch where each story is covered by many publishers.

    Article ``i`` tells story ``i % 8`` and comes from a publisher chosen by
    ``i // 8``, so every story recurs across publishers. Every other round
    appends the publisher name to the title, the way many feeds do.
    """
    now = now or datetime.now(timezone.utc)
    stories = [
        template.format(subject=STORY_SUBJECTS[i % len(STORY_SUBJECTS)])
        for i, template in enumerate(STORY_TEMPLATES)
    ]

    articles = []
    for i in range(count):
        story = stories[i % len(stories)]
        round_number = i // len(stories)
        publisher = MOCK_PUBLISHERS[round_number % len(MOCK_PUBLISHERS)]
        topic = MOCK_TOPICS[i % len(MOCK_TOPICS)]
        title = f"{story} - {publisher}" if round_number % 2 else story

        articles.append(
            RawArticle(
                title=title,
                description=f"Lorem ipsum dolor sit amet, consectetur adipiscing elit. {story}",
                link=f"https://{publisher.lower().replace(' ', '')}.com/article-{i}?utm_source=test",
                publisher=publisher,
                topic=topic,
                slug=f"{_slugify(publisher)}-{_slugify(topic)}",
                source=f"{publisher} - {topic}",
                pub_date=now - timedelta(minutes=(i * 37) % 1440),
                section_hints=("international", "politics"),
            )
        )
    return articles


def estimate_savings(stats: PreprocessStats) -> dict[str, float]:
    """Rough downstream savings from the articles clustering removed."""
    dropped = max(0, stats.original_count - stats.representative_count)
    tokens = dropped * TOKENS_PER_ARTICLE
    return {
        "tokens_saved": tokens,
        "latency_saved_ms": dropped * LATENCY_MS_PER_ARTICLE,
        "cost_saved_usd": round(tokens / 1_000_000 * COST_PER_MILLION_TOKENS, 4),
    }


def run_diagnostics(
    count: int,
    config: ClusterConfig,
) -> tuple[PreprocessStats, dict[str, float]]:
    """Cluster a generated batch and return its stats with savings estimates."""
    articles = generate_mock_articles(count)
    _, stats = cluster_articles(articles, config)
    return stats, estimate_savings(stats)


def main(argv: list[str] | None = None) -> None:
    setup_logging()

    parser = argparse.ArgumentParser(description="Cluster a generated article batch and report savings.")
    parser.add_argument("--count", type=int, default=120, help="Number of articles to generate (default: 120)")
    add_cluster_options(parser)
    parser.set_defaults(preferred_publishers=DEFAULT_PREFERRED_PUBLISHERS)
    args = parser.parse_args(argv)

    config = ClusterConfig(
        similarity_threshold=args.similarity_threshold,
        max_cluster_size=args.max_cluster_size,
        preferred_publishers=frozenset(parse_csv_list(args.preferred_publishers)),
        topic_aware=args.topic_aware,
    )
    stats, savings = run_diagnostics(args.count, config)

    logger.info("Original articles:     %d", stats.original_count)
    logger.info("After deduplication:   %d", stats.after_dedupe_count)
    logger.info("Clusters found:        %d", stats.cluster_count)
    logger.info("Representatives:       %d", stats.representative_count)
    logger.info("Reduction:             %d%%", stats.reduction_percent)
    logger.info("Processing time:       %dms", stats.processing_time_ms)
    logger.info("Tokens saved:          ~%d", savings["tokens_saved"])
    logger.info("Latency saved:         ~%dms", savings["latency_saved_ms"])
    logger.info("Cost saved:            ~$%.4f", savings["cost_saved_usd"])


if __name__ == "__main__":
    main()
