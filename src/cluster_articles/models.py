"""Data models for cluster_articles pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from common.datetime import ensure_utc, parse_datetime
from common.errors import ConfigurationError, MalformedRecordError
from common.utils import as_list, get_value


@dataclass(frozen=True)
class RawArticle:
    """Article as fetched from an RSS feed. ``link`` is its identity key."""

    title: str
    description: str
    link: str
    publisher: str
    topic: str
    slug: str
    source: str
    pub_date: datetime
    section_hints: tuple[str, ...] = ()
    image_url: Optional[str] = None
    section: Optional[str] = None

    def __post_init__(self) -> None:
        # None is left for callers to report as a malformed record.
        if isinstance(self.pub_date, datetime):
            object.__setattr__(self, "pub_date", ensure_utc(self.pub_date))
        object.__setattr__(self, "section_hints", tuple(as_list(self.section_hints)))

    @classmethod
    def from_record(cls, record: Any) -> RawArticle:
        """Build an article from a dict or object using camelCase or snake_case keys.

        Raises:
            MalformedRecordError: If ``link`` or ``pubDate`` is missing or invalid.
        """
        link = (get_value(record, "link", "url") or "").strip()
        if not link:
            raise MalformedRecordError("link", get_value(record, "title"))

        try:
            pub_date = parse_datetime(get_value(record, "pub_date", "pubDate", "published_at"))
        except ValueError:
            pub_date = None
        if pub_date is None:
            raise MalformedRecordError("pubDate", link)

        hints = as_list(get_value(record, "section_hints", "sectionHints"))
        return cls(
            title=get_value(record, "title") or "",
            description=get_value(record, "description", "summary") or "",
            link=link,
            publisher=get_value(record, "publisher") or "",
            topic=get_value(record, "topic") or "",
            slug=get_value(record, "slug") or "",
            source=get_value(record, "source") or "",
            pub_date=pub_date,
            section_hints=tuple(hints),
            image_url=get_value(record, "image_url", "imageUrl"),
            section=get_value(record, "section"),
        )

    def to_record(self) -> dict[str, Any]:
        """Serialize to the camelCase record layout used in stored documents."""
        record: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "link": self.link,
            "pubDate": self.pub_date.isoformat(),
            "source": self.source,
            "publisher": self.publisher,
            "topic": self.topic,
            "slug": self.slug,
            "sectionHints": list(self.section_hints),
        }
        if self.image_url:
            record["imageUrl"] = self.image_url
        if self.section:
            record["section"] = self.section
        return record


@dataclass
class ClusterConfig:
    """Clustering options. Invalid values raise ConfigurationError on construction."""

    similarity_threshold: float = 0.75
    max_cluster_size: int = 10
    preferred_publishers: frozenset[str] = field(default_factory=frozenset)
    topic_aware: bool = False

    def __post_init__(self) -> None:
        self.preferred_publishers = frozenset(as_list(self.preferred_publishers))

        if isinstance(self.similarity_threshold, bool) or not isinstance(
            self.similarity_threshold, (int, float)
        ):
            raise ConfigurationError(
                f"similarity_threshold must be a number, got {self.similarity_threshold!r}"
            )
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ConfigurationError(
                f"similarity_threshold must be in [0, 1], got {self.similarity_threshold}"
            )

        if isinstance(self.max_cluster_size, bool) or not isinstance(self.max_cluster_size, int):
            raise ConfigurationError(
                f"max_cluster_size must be an integer, got {self.max_cluster_size!r}"
            )
        if self.max_cluster_size < 1:
            raise ConfigurationError(
                f"max_cluster_size must be >= 1, got {self.max_cluster_size}"
            )

        if not isinstance(self.topic_aware, bool):
            raise ConfigurationError(f"topic_aware must be true or false, got {self.topic_aware!r}")


@dataclass
class Cluster:
    """Near-duplicate articles. Members keep first-seen order."""

    members: list[RawArticle]
    representative: RawArticle
    first_index: int
    average_similarity: float = 1.0

    @property
    def size(self) -> int:
        return len(self.members)


@dataclass
class PreprocessStats:
    """Counts describing one clustering run."""

    original_count: int = 0
    after_dedupe_count: int = 0
    cluster_count: int = 0
    representative_count: int = 0
    reduction_percent: int = 0
    malformed_count: int = 0
    processing_time_ms: int = 0
