"""Fold newly fetched articles into the stored topic groups."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from cluster_articles.models import RawArticle
from common.urls import normalize_url
from merge_articles.models import ArticlesSummary, TopicNewsGroup

logger = logging.getLogger(__name__)


def sort_items_by_recency(items: Iterable[RawArticle]) -> list[RawArticle]:
    """Newest first. Stable for equal timestamps."""
    return sorted(items, key=lambda item: item.pub_date, reverse=True)


def sort_topics(topics: Iterable[TopicNewsGroup]) -> list[TopicNewsGroup]:
    """Order groups by publisher, then topic, ignoring case."""
    return sorted(topics, key=lambda group: (group.publisher.casefold(), group.topic.casefold()))


def _dedupe_items(items: Iterable[RawArticle]) -> list[RawArticle]:
    seen: set[str] = set()
    unique = []
    for item in items:
        key = normalize_url(item.link)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def group_by_slug(articles: Iterable[RawArticle]) -> list[TopicNewsGroup]:
    """Bundle articles into one group per slug.

    Group metadata comes from the first article seen for each slug.
    """
    groups: dict[str, TopicNewsGroup] = {}
    for article in articles:
        group = groups.get(article.slug)
        if group is None:
            group = TopicNewsGroup(
                topic=article.topic,
                slug=article.slug,
                publisher=article.publisher,
                section_hints=tuple(article.section_hints),
            )
            groups[article.slug] = group
        group.items.append(article)

    for group in groups.values():
        group.items = sort_items_by_recency(group.items)
    return sort_topics(groups.values())


def merge_topics(
    existing_topics: list[TopicNewsGroup] | None,
    appended_topics: list[TopicNewsGroup],
) -> tuple[list[TopicNewsGroup], int]:
    """
    Merge appended topic groups into existing ones without repeating a link.

    Existing groups are deduplicated by normalized link and re-sorted by
    recency. Each appended item is dropped if its normalized link is already
    stored or was appended earlier in this call. Surviving items join the
    group with the same slug, or form a new group; appended groups left with
    no items are omitted. Neither input is modified.

    Args:
        existing_topics: Groups currently stored (None is treated as empty).
        appended_topics: Groups from the new batch.

    Returns:
        Tuple of (all groups sorted by publisher and topic, number of items added).
    """
    topics_by_slug: dict[str, TopicNewsGroup] = {}
    seen_links: set[str] = set()

    for group in existing_topics or []:
        current = topics_by_slug.get(group.slug)
        items = list(current.items) + list(group.items) if current else list(group.items)
        items = sort_items_by_recency(_dedupe_items(items))
        topics_by_slug[group.slug] = replace(current or group, items=items)
        seen_links.update(normalize_url(item.link) for item in items)

    appended_articles = 0
    for group in appended_topics:
        fresh = []
        for item in group.items:
            key = normalize_url(item.link)
            if key in seen_links:
                continue
            seen_links.add(key)
            fresh.append(item)

        if not fresh:
            continue

        current = topics_by_slug.get(group.slug)
        if current:
            topics_by_slug[group.slug] = replace(
                current, items=sort_items_by_recency(current.items + fresh)
            )
        else:
            topics_by_slug[group.slug] = replace(group, items=sort_items_by_recency(fresh))
        appended_articles += len(fresh)

    logger.info(
        "Merged %d new articles into %d topic groups",
        appended_articles,
        len(topics_by_slug),
    )
    return sort_topics(topics_by_slug.values()), appended_articles


def summarize(topics: list[TopicNewsGroup]) -> ArticlesSummary:
    """Count articles, groups and distinct publishers."""
    return ArticlesSummary(
        total_articles=sum(len(group.items) for group in topics),
        total_topics=len(topics),
        total_publishers=len({group.publisher for group in topics}),
    )
