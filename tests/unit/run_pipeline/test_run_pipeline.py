"""Tests for run_pipeline.run_pipeline module."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cluster_articles.models import ClusterConfig
from common.errors import MergeConflictError
from merge_articles.store import LocalTopicStore, StoreConfig
from run_pipeline.config import PipelineConfig
from run_pipeline.run_pipeline import run_pipeline


def record(title: str, link: str, publisher: str, topic: str, hints: list[str], pub_date: str = "2024-05-01T10:00:00Z") -> dict:
    return {
        "title": title,
        "description": "",
        "link": link,
        "pubDate": pub_date,
        "publisher": publisher,
        "topic": topic,
        "slug": f"{publisher.lower()}-{topic.lower()}",
        "source": f"{publisher} - {topic}",
        "sectionHints": hints,
    }


@pytest.fixture
def records() -> list[dict]:
    return [
        record("Storm hits coast", "https://vox.com/storm", "Vox", "World", ["international"]),
        record("BBC: Storm hits the coast", "https://bbc.co.uk/storm", "BBC", "World", ["international"]),
        record("Parliament passes budget", "https://npr.org/budget", "NPR", "Politics", ["politics"]),
        {"title": "Missing date", "link": "https://npr.org/undated"},
    ]


@pytest.fixture
def config(tmp_path: Path) -> PipelineConfig:
    return PipelineConfig(
        cluster=ClusterConfig(preferred_publishers=frozenset({"BBC"})),
        store=StoreConfig(backend="local", path=str(tmp_path / "topics.json")),
    )


class TestRunPipeline:
    def test_end_to_end(self, records, config) -> None:
        path = Path(config.store.path)
        result = run_pipeline(records, LocalTopicStore(path), config)

        assert result.stats.original_count == 4
        assert result.stats.malformed_count == 1
        assert result.stats.representative_count == 2
        assert result.sections["international"] == 1
        assert result.sections["politics"] == 1
        assert result.appended_articles == 2
        assert result.summary.total_articles == 2
        assert result.summary.total_topics == 2
        assert result.summary.total_publishers == 2

        stored = json.loads(path.read_text(encoding="utf-8"))
        links = sorted(i["link"] for g in stored["topics"] for i in g["items"])
        assert links == ["https://bbc.co.uk/storm", "https://npr.org/budget"]
        sections = {i["link"]: i["section"] for g in stored["topics"] for i in g["items"]}
        assert sections["https://bbc.co.uk/storm"] == "international"

    def test_repeat_run_appends_nothing(self, records, config) -> None:
        path = Path(config.store.path)
        run_pipeline(records, LocalTopicStore(path), config)
        stored = path.read_bytes()

        result = run_pipeline(records, LocalTopicStore(path), config)

        assert result.appended_articles == 0
        assert result.summary.total_articles == 2
        assert path.read_bytes() == stored

    def test_new_batch_grows_store(self, records, config) -> None:
        path = Path(config.store.path)
        run_pipeline(records, LocalTopicStore(path), config)

        batch = [record("Museum reopens after repairs", "https://npr.org/museum", "NPR", "Culture", [])]
        result = run_pipeline(batch, LocalTopicStore(path), config)

        assert result.appended_articles == 1
        assert result.summary.total_articles == 3

    def test_empty_batch(self, config) -> None:
        store = MagicMock()
        store.load.return_value = []

        result = run_pipeline([], store, config)

        assert result.appended_articles == 0
        assert result.stats.original_count == 0
        store.save.assert_not_called()

    def test_uncapped(self, records, config) -> None:
        config.cap_sections = False
        store = MagicMock()
        store.load.return_value = []

        result = run_pipeline(records, store, config)

        assert result.sections == {"international": 1, "politics": 1}
        store.save.assert_called_once()

    def test_store_conflict_propagates(self, records, config) -> None:
        store = MagicMock()
        store.load.return_value = []
        store.save.side_effect = MergeConflictError("changed")

        with pytest.raises(MergeConflictError):
            run_pipeline(records, store, config)

    def test_load_failure_skips_save(self, records, config) -> None:
        store = MagicMock()
        store.load.side_effect = OSError("disk gone")

        with pytest.raises(OSError):
            run_pipeline(records, store, config)
        store.save.assert_not_called()
