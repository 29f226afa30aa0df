"""Data models for classify_articles pipeline stage."""

from dataclasses import dataclass

from cluster_articles.models import RawArticle


@dataclass
class ClassifiedArticle:
    """Article tagged with its editorial section."""

    article: RawArticle
    section: str
    hinted: bool = False
