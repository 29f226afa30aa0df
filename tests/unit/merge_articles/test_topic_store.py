"""Tests for merge_articles.store module."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from botocore.exceptions import ClientError

from common.errors import ConfigurationError, MergeConflictError
from merge_articles.models import TopicNewsGroup
from merge_articles.store import (
    LocalTopicStore,
    S3TopicStore,
    StoreConfig,
    build_store,
)


def make_group(link: str = "https://e.com/1") -> TopicNewsGroup:
    return TopicNewsGroup.from_record(
        {
            "topic": "Tech",
            "slug": "tech",
            "publisher": "Alpha News",
            "items": [{"title": "T", "link": link, "pubDate": "2024-10-01T08:00:00Z", "slug": "tech"}],
        }
    )


class TestStoreConfig:
    def test_invalid_backend(self) -> None:
        with pytest.raises(ConfigurationError):
            StoreConfig(backend="firestore")

    def test_s3_requires_bucket(self) -> None:
        with pytest.raises(ConfigurationError):
            StoreConfig(backend="s3", bucket="")

    def test_build_store(self) -> None:
        assert isinstance(build_store(StoreConfig(backend="local", path="x.json")), LocalTopicStore)
        store = build_store(StoreConfig(backend="s3", bucket="b", key="k.json"))
        assert isinstance(store, S3TopicStore)
        assert (store.bucket, store.key) == ("b", "k.json")


class TestLocalTopicStore:
    def test_missing_file_loads_empty(self, tmp_path: Path) -> None:
        assert LocalTopicStore(tmp_path / "topics.json").load() == []

    def test_save_then_load(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "topics.json"
        store = LocalTopicStore(path)
        store.load()
        store.save([make_group()])

        assert json.loads(path.read_text(encoding="utf-8"))["topics"][0]["slug"] == "tech"
        assert LocalTopicStore(path).load() == [make_group()]
        assert list(path.parent.glob("*.tmp")) == []

    def test_consecutive_saves(self, tmp_path: Path) -> None:
        store = LocalTopicStore(tmp_path / "topics.json")
        store.load()
        store.save([make_group()])
        store.save([make_group(), make_group("https://e.com/2")])
        assert len(LocalTopicStore(tmp_path / "topics.json").load()) == 2

    def test_concurrent_write_conflicts(self, tmp_path: Path) -> None:
        path = tmp_path / "topics.json"
        LocalTopicStore(path).save([make_group()])

        first = LocalTopicStore(path)
        second = LocalTopicStore(path)
        first.load()
        second.load()
        first.save([make_group("https://e.com/2")])
        stored = path.read_bytes()

        with pytest.raises(MergeConflictError):
            second.save([make_group("https://e.com/3")])
        assert path.read_bytes() == stored

    def test_created_by_other_writer_conflicts(self, tmp_path: Path) -> None:
        path = tmp_path / "topics.json"
        store = LocalTopicStore(path)
        store.load()
        LocalTopicStore(path).save([make_group()])

        with pytest.raises(MergeConflictError):
            store.save([make_group("https://e.com/2")])


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "PutObject")


class TestS3TopicStore:
    @patch("merge_articles.store.read_json_object")
    def test_load(self, mock_read) -> None:
        mock_read.return_value = ({"topics": [make_group().to_record()]}, '"etag-1"')
        store = S3TopicStore("bucket", "topics.json")

        assert store.load() == [make_group()]
        mock_read.assert_called_once_with("bucket", "topics.json")

    @patch("merge_articles.store.put_json_object")
    @patch("merge_articles.store.read_json_object")
    def test_save_uses_loaded_etag(self, mock_read, mock_put) -> None:
        mock_read.return_value = ({"topics": []}, '"etag-1"')
        mock_put.return_value = '"etag-2"'
        store = S3TopicStore("bucket", "topics.json")
        store.load()
        store.save([make_group()])
        store.save([make_group()])

        assert mock_put.call_args_list[0].args[3] == '"etag-1"'
        assert mock_put.call_args_list[1].args[3] == '"etag-2"'
        assert mock_put.call_args_list[0].args[2]["topics"][0]["slug"] == "tech"

    @patch("merge_articles.store.put_json_object")
    @patch("merge_articles.store.read_json_object")
    def test_missing_object_saved_create_only(self, mock_read, mock_put) -> None:
        mock_read.return_value = (None, None)
        store = S3TopicStore("bucket", "topics.json")

        assert store.load() == []
        store.save([make_group()])
        assert mock_put.call_args.args[3] is None

    @patch("merge_articles.store.put_json_object")
    @patch("merge_articles.store.read_json_object")
    def test_precondition_failure_is_conflict(self, mock_read, mock_put) -> None:
        mock_read.return_value = ({"topics": []}, '"etag-1"')
        mock_put.side_effect = _client_error("PreconditionFailed")
        store = S3TopicStore("bucket", "topics.json")
        store.load()

        with pytest.raises(MergeConflictError):
            store.save([make_group()])

    @patch("merge_articles.store.put_json_object")
    @patch("merge_articles.store.read_json_object")
    def test_other_errors_propagate(self, mock_read, mock_put) -> None:
        mock_read.return_value = ({"topics": []}, '"etag-1"')
        mock_put.side_effect = _client_error("AccessDenied")
        store = S3TopicStore("bucket", "topics.json")
        store.load()

        with pytest.raises(ClientError):
            store.save([make_group()])
