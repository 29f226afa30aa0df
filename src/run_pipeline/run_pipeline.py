"""Run one fetched batch through clustering, classification and the store merge."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from classify_articles.classify_articles import cap_sections, classify_articles
from cluster_articles.cluster_articles import cluster_articles
from merge_articles.merge_articles import group_by_slug, merge_topics, summarize
from merge_articles.store import TopicStore
from run_pipeline.config import PipelineConfig
from run_pipeline.models import PipelineResult

logger = logging.getLogger(__name__)


def run_pipeline(
    raw_records: Iterable[Any],
    store: TopicStore,
    config: PipelineConfig | None = None,
) -> PipelineResult:
    """
    Cluster, classify and cap a batch, then merge it into the topic store.

    The store is loaded only after the batch has been processed, and saved
    only when at least one new article was merged. Store errors, including
    MergeConflictError, propagate unchanged.

    Args:
        raw_records: Article records (dicts) or RawArticles from one fetch.
        store: Where the topic groups live.
        config: Pipeline options; defaults apply when None.

    Returns:
        PipelineResult with clustering stats, per-section counts, the number
        of articles appended and a summary of the stored groups.
    """
    config = config or PipelineConfig()

    representatives, stats = cluster_articles(raw_records, config.cluster)
    classified = classify_articles(representatives)

    if config.cap_sections:
        capped = cap_sections(classified, config.section_limits)
        kept = [item for items in capped.values() for item in items]
        sections = {section: len(items) for section, items in capped.items()}
    else:
        kept = classified
        sections = {}
        for item in classified:
            sections[item.section] = sections.get(item.section, 0) + 1

    appended_topics = group_by_slug(item.article for item in kept)

    existing_topics = store.load()
    merged, appended = merge_topics(existing_topics, appended_topics)

    if appended:
        store.save(merged)
    else:
        logger.info("No new articles to store")

    summary = summarize(merged)
    logger.info(
        "Pipeline complete: %d records -> %d kept -> %d appended; store has %d articles in %d topics from %d publishers",
        stats.original_count,
        len(kept),
        appended,
        summary.total_articles,
        summary.total_topics,
        summary.total_publishers,
    )
    return PipelineResult(stats=stats, sections=sections, appended_articles=appended, summary=summary)
