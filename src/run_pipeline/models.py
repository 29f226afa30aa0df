"""Data models for run_pipeline."""

from dataclasses import dataclass, field

from cluster_articles.models import PreprocessStats
from merge_articles.models import ArticlesSummary


@dataclass
class PipelineResult:
    """Outcome of one batch run."""

    stats: PreprocessStats
    sections: dict[str, int] = field(default_factory=dict)  # section -> kept count
    appended_articles: int = 0
    summary: ArticlesSummary = field(default_factory=lambda: ArticlesSummary(0, 0, 0))
