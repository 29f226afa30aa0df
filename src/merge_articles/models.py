"""Data models for merge_articles pipeline stage."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from cluster_articles.models import RawArticle
from common.errors import MalformedRecordError
from common.utils import as_list, get_value

logger = logging.getLogger(__name__)


@dataclass
class TopicNewsGroup:
    """Stored articles from one feed, keyed by ``slug``. Items are newest first."""

    topic: str
    slug: str
    publisher: str
    section_hints: tuple[str, ...] = ()
    items: list[RawArticle] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: Any) -> TopicNewsGroup:
        """Build a group from a stored record, dropping items that fail to parse."""
        items = []
        for item in get_value(record, "items") or []:
            try:
                items.append(RawArticle.from_record(item))
            except MalformedRecordError as exc:
                logger.warning("Dropping malformed stored item: %s", exc)

        return cls(
            topic=get_value(record, "topic") or "",
            slug=get_value(record, "slug") or "",
            publisher=get_value(record, "publisher") or "",
            section_hints=tuple(as_list(get_value(record, "section_hints", "sectionHints"))),
            items=items,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "topic": self.topic,
            "slug": self.slug,
            "publisher": self.publisher,
            "sectionHints": list(self.section_hints),
            "items": [item.to_record() for item in self.items],
        }


@dataclass(frozen=True)
class ArticlesSummary:
    """Totals over a set of topic groups."""

    total_articles: int
    total_topics: int
    total_publishers: int
