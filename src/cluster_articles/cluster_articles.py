"""Collapse near-duplicate articles into clusters and pick one representative each."""

from __future__ import annotations

import logging
import math
import time
from typing import Any, Iterable, Mapping

from cluster_articles.models import Cluster, ClusterConfig, PreprocessStats, RawArticle
from common.errors import MalformedRecordError
from common.text import article_similarity
from common.urls import normalize_url

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "general"


def _coerce_article(record: Any) -> RawArticle:
    if isinstance(record, RawArticle):
        if not record.link or not record.link.strip():
            raise MalformedRecordError("link", record.title)
        if record.pub_date is None:
            raise MalformedRecordError("pubDate", record.link)
        return record
    return RawArticle.from_record(record)


def parse_articles(records: Iterable[Any]) -> tuple[list[RawArticle], int]:
    """Convert records to RawArticles, skipping malformed ones.

    Returns:
        Tuple of (articles in input order, number of malformed records skipped).
    """
    articles = []
    malformed = 0
    for record in records:
        try:
            articles.append(_coerce_article(record))
        except MalformedRecordError as exc:
            malformed += 1
            logger.warning("Skipping malformed article: %s", exc)
    return articles, malformed


def dedupe_by_link(articles: list[RawArticle]) -> list[RawArticle]:
    """Drop articles whose normalized link was already seen, keeping the first."""
    seen: set[str] = set()
    unique = []
    for article in articles:
        key = normalize_url(article.link)
        if key in seen:
            continue
        seen.add(key)
        unique.append(article)
    return unique


def select_representative(
    members: list[RawArticle],
    preferred_publishers: frozenset[str] | set[str] = frozenset(),
) -> RawArticle:
    """Pick the member that stands in for the cluster.

    Order of preference: publisher in ``preferred_publishers``, most recent
    ``pub_date``, longest non-empty description, earliest member.
    """
    def rank(entry: tuple[int, RawArticle]) -> tuple:
        position, article = entry
        return (
            article.publisher not in preferred_publishers,
            -article.pub_date.timestamp(),
            -len((article.description or "").strip()),
            position,
        )

    return min(enumerate(members), key=rank)[1]


def _similarity(a: RawArticle, b: RawArticle) -> float:
    return article_similarity(
        a.title,
        a.description or "",
        b.title,
        b.description or "",
        a.pub_date,
        b.pub_date,
    )


def _greedy_clusters(
    indexed: list[tuple[int, RawArticle]],
    config: ClusterConfig,
) -> list[Cluster]:
    clusters: list[Cluster] = []
    threshold = config.similarity_threshold

    for index, article in indexed:
        best: Cluster | None = None
        best_score = -1.0

        for cluster in clusters:
            if cluster.size >= config.max_cluster_size:
                continue
            score = _similarity(article, cluster.representative)
            if score >= threshold:
                if score > best_score:
                    best, best_score = cluster, score
            elif score >= threshold - 0.1:
                logger.debug(
                    "Near-miss similarity %.3f between '%s' (%s) and '%s' (%s)",
                    score,
                    article.title,
                    article.publisher,
                    cluster.representative.title,
                    cluster.representative.publisher,
                )

        if best is None:
            clusters.append(Cluster(members=[article], representative=article, first_index=index))
            continue

        best.members.append(article)
        best.representative = select_representative(best.members, config.preferred_publishers)

    for cluster in clusters:
        if cluster.size > 1:
            scores = [_similarity(member, cluster.representative) for member in cluster.members]
            cluster.average_similarity = sum(scores) / len(scores)

    return clusters


def build_clusters(articles: list[RawArticle], config: ClusterConfig) -> list[Cluster]:
    """Greedy single-pass clustering in arrival order.

    Each article joins the highest-scoring open cluster whose representative
    scores at least ``similarity_threshold`` and which has fewer than
    ``max_cluster_size`` members; ties go to the earliest cluster. Otherwise it
    opens a new cluster. Clusters come back in first-seen order.
    """
    indexed = list(enumerate(articles))
    if not config.topic_aware:
        return _greedy_clusters(indexed, config)

    by_topic: dict[str, list[tuple[int, RawArticle]]] = {}
    for index, article in indexed:
        by_topic.setdefault(article.topic or DEFAULT_TOPIC, []).append((index, article))

    logger.info("Clustering within %d topic groups", len(by_topic))
    clusters: list[Cluster] = []
    for topic_articles in by_topic.values():
        clusters.extend(_greedy_clusters(topic_articles, config))
    return sorted(clusters, key=lambda cluster: cluster.first_index)


def _reduction_percent(original: int, remaining: int) -> int:
    if original == 0:
        return 0
    return math.floor((original - remaining) / original * 100 + 0.5)


def cluster_articles(
    articles: Iterable[Any],
    config: ClusterConfig | Mapping[str, Any] | None = None,
) -> tuple[list[RawArticle], PreprocessStats]:
    """
    Deduplicate a batch of articles and reduce each story to one representative.

    Args:
        articles: RawArticles or article records (dicts) from one fetch batch.
        config: ClusterConfig, or a mapping of its options.

    Returns:
        Tuple of (representatives in first-seen cluster order, stats).

    Raises:
        ConfigurationError: If the configuration is invalid. Raised before any
            article is looked at.
    """
    if config is None:
        config = ClusterConfig()
    elif not isinstance(config, ClusterConfig):
        config = cluster_config_from_mapping(config)

    started = time.perf_counter()
    records = list(articles)
    if not records:
        logger.warning("No articles to cluster")
        return [], PreprocessStats()

    valid, malformed = parse_articles(records)
    deduped = dedupe_by_link(valid)

    logger.info(
        "Clustering %d articles (similarity_threshold=%.2f, max_cluster_size=%d, topic_aware=%s)",
        len(deduped),
        config.similarity_threshold,
        config.max_cluster_size,
        config.topic_aware,
    )
    clusters = build_clusters(deduped, config)
    representatives = [cluster.representative for cluster in clusters]

    for cluster in clusters:
        if cluster.size > 1:
            logger.debug(
                "Cluster of %d articles, representative '%s' (%s), average similarity %.3f",
                cluster.size,
                cluster.representative.title,
                cluster.representative.publisher,
                cluster.average_similarity,
            )

    stats = PreprocessStats(
        original_count=len(records),
        after_dedupe_count=len(deduped),
        cluster_count=len(clusters),
        representative_count=len(representatives),
        reduction_percent=_reduction_percent(len(records), len(representatives)),
        malformed_count=malformed,
        processing_time_ms=int((time.perf_counter() - started) * 1000),
    )
    logger.info(
        "Clustering complete: %d -> %d (deduped) -> %d (representatives), %d%% reduction, %d malformed",
        stats.original_count,
        stats.after_dedupe_count,
        stats.representative_count,
        stats.reduction_percent,
        stats.malformed_count,
    )
    return representatives, stats


def cluster_config_from_mapping(options: Mapping[str, Any]) -> ClusterConfig:
    """Build a ClusterConfig from camelCase or snake_case option names."""
    def pick(*names: str, default: Any) -> Any:
        for name in names:
            if name in options and options[name] is not None:
                return options[name]
        return default

    defaults = ClusterConfig()
    return ClusterConfig(
        similarity_threshold=pick(
            "similarity_threshold", "similarityThreshold", default=defaults.similarity_threshold
        ),
        max_cluster_size=pick("max_cluster_size", "maxClusterSize", default=defaults.max_cluster_size),
        preferred_publishers=pick("preferred_publishers", "preferredPublishers", default=()),
        topic_aware=pick("topic_aware", "topicAware", default=defaults.topic_aware),
    )
