"""Assign articles to editorial sections and cap each section's size."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Mapping

from classify_articles.models import ClassifiedArticle
from classify_articles.sections import (
    DEFAULT_SECTION,
    SECTION_KEYS,
    SECTION_LIMITS,
    SECTION_RULES,
    section_for_hint,
)
from cluster_articles.models import RawArticle
from common.urls import normalize_url

logger = logging.getLogger(__name__)


def _build_context(article: RawArticle) -> str:
    return " ".join(part for part in (article.title, article.description, article.topic) if part)


def classify_section(article: RawArticle) -> tuple[str, bool]:
    """Return the article's section and whether a feed hint decided it.

    Feed hints win (first one naming a known section), then the first keyword
    rule matching title, description and topic, then the default section.
    """
    for hint in article.section_hints:
        section = section_for_hint(hint)
        if section:
            return section, True

    context = _build_context(article)
    for section, patterns in SECTION_RULES:
        if any(pattern.search(context) for pattern in patterns):
            return section, False

    return DEFAULT_SECTION, False


def classify(article: RawArticle) -> str:
    """Section key for an article. Always returns one of SECTION_KEYS."""
    section, _ = classify_section(article)
    return section


def classify_articles(articles: list[RawArticle]) -> list[ClassifiedArticle]:
    """Classify a batch, returning articles tagged with their section."""
    if not articles:
        logger.warning("No articles to classify")
        return []

    results = []
    hinted_count = 0
    for article in articles:
        section, hinted = classify_section(article)
        hinted_count += hinted
        results.append(
            ClassifiedArticle(
                article=replace(article, section=section),
                section=section,
                hinted=hinted,
            )
        )

    logger.info(
        "Classified %d articles (%d by feed hints, %d by keywords or default)",
        len(results),
        hinted_count,
        len(results) - hinted_count,
    )
    return results


def cap_sections(
    classified: list[ClassifiedArticle],
    limits: Mapping[str, int] | None = None,
) -> dict[str, list[ClassifiedArticle]]:
    """Keep at most ``limits[section]`` articles per section.

    Within a section, hint-assigned articles rank first, then newer
    ``pub_date``, then input order. A normalized link is kept at most once
    across all sections.

    Returns:
        Section key -> kept articles, in SECTION_KEYS order (empty sections included).
    """
    effective_limits = {**SECTION_LIMITS, **(limits or {})}

    by_section: dict[str, list[tuple[int, ClassifiedArticle]]] = {key: [] for key in SECTION_KEYS}
    for index, item in enumerate(classified):
        by_section.setdefault(item.section, []).append((index, item))

    used_links: set[str] = set()
    capped: dict[str, list[ClassifiedArticle]] = {}
    for section, entries in by_section.items():
        ranked = sorted(
            entries,
            key=lambda entry: (not entry[1].hinted, -entry[1].article.pub_date.timestamp(), entry[0]),
        )
        limit = effective_limits.get(section, 0)
        selected = []
        for _, item in ranked:
            if len(selected) >= limit:
                break
            link_key = normalize_url(item.article.link)
            if link_key in used_links:
                continue
            used_links.add(link_key)
            selected.append(item)

        if len(entries) > len(selected):
            logger.info("Section %s: kept %d of %d articles", section, len(selected), len(entries))
        capped[section] = selected

    return capped
