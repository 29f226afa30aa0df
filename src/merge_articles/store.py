"""Persistence for the topic store: a local JSON file or an S3 object.

Both backends guard ``save()`` with an optimistic-concurrency check against
the state observed by the last ``load()``. A lost race raises
MergeConflictError and leaves the stored document as the other writer left it.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from botocore.exceptions import ClientError

from common.aws import is_precondition_failure, put_json_object, read_json_object
from common.errors import ConfigurationError, MergeConflictError
from merge_articles.models import TopicNewsGroup

logger = logging.getLogger(__name__)


@dataclass
class StoreConfig:
    backend: str = "local"  # "local" or "s3"
    path: str = "output/topics.json"

    # S3 backend
    bucket: str = ""
    key: str = "topics/topics.json"

    def __post_init__(self) -> None:
        if self.backend not in ("local", "s3"):
            raise ConfigurationError(f"Invalid store backend: {self.backend}. Must be 'local' or 's3'")

        if self.backend == "local" and not self.path:
            raise ConfigurationError("Local store requires path")

        if self.backend == "s3" and not self.bucket:
            raise ConfigurationError("S3 store requires a bucket (store.bucket or S3_BUCKET_NAME)")


def topics_to_document(topics: list[TopicNewsGroup]) -> dict[str, Any]:
    return {
        "topics": [group.to_record() for group in topics],
        "updatedAt": datetime.now(timezone.utc).isoformat(),
    }


def topics_from_document(document: Any) -> list[TopicNewsGroup]:
    if not document:
        return []
    return [TopicNewsGroup.from_record(record) for record in document.get("topics") or []]


class TopicStore(ABC):
    """Load and save the full list of topic groups."""

    @abstractmethod
    def load(self) -> list[TopicNewsGroup]:
        ...

    @abstractmethod
    def save(self, topics: list[TopicNewsGroup]) -> None:
        ...


class LocalTopicStore(TopicStore):
    """Topic groups in one JSON file, replaced atomically on save."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._digest: str | None = None

    def _read_digest(self) -> str | None:
        if not self.path.exists():
            return None
        return hashlib.sha256(self.path.read_bytes()).hexdigest()

    def load(self) -> list[TopicNewsGroup]:
        if not self.path.exists():
            logger.info("No topic store at %s, starting empty", self.path)
            self._digest = None
            return []

        content = self.path.read_bytes()
        self._digest = hashlib.sha256(content).hexdigest()
        topics = topics_from_document(json.loads(content.decode("utf-8")))
        logger.info("Loaded %d topic groups from %s", len(topics), self.path)
        return topics

    def save(self, topics: list[TopicNewsGroup]) -> None:
        """Write all groups, failing if the file changed since ``load()``.

        Raises:
            MergeConflictError: If another writer changed the file.
        """
        if self._read_digest() != self._digest:
            raise MergeConflictError(f"Topic store {self.path} changed since it was loaded")

        body = json.dumps(topics_to_document(topics), ensure_ascii=False, indent=2).encode("utf-8")
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(body)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        self._digest = hashlib.sha256(body).hexdigest()
        logger.info("Saved %d topic groups to %s", len(topics), self.path)


class S3TopicStore(TopicStore):
    """Topic groups in one S3 JSON object, written with conditional puts."""

    def __init__(self, bucket: str, key: str):
        self.bucket = bucket
        self.key = key
        self._etag: str | None = None

    def load(self) -> list[TopicNewsGroup]:
        document, self._etag = read_json_object(self.bucket, self.key)
        topics = topics_from_document(document)
        logger.info("Loaded %d topic groups from s3://%s/%s", len(topics), self.bucket, self.key)
        return topics

    def save(self, topics: list[TopicNewsGroup]) -> None:
        """Write all groups if the object still matches the ETag seen by ``load()``.

        Raises:
            MergeConflictError: If the conditional write is rejected.
            ClientError: For any other S3 failure.
        """
        try:
            self._etag = put_json_object(self.bucket, self.key, topics_to_document(topics), self._etag)
        except ClientError as exc:
            if is_precondition_failure(exc):
                raise MergeConflictError(
                    f"Topic store s3://{self.bucket}/{self.key} changed since it was loaded"
                ) from exc
            raise

        logger.info("Saved %d topic groups to s3://%s/%s", len(topics), self.bucket, self.key)


def build_store(config: StoreConfig) -> TopicStore:
    """Create the store backend named by ``config.backend``."""
    if config.backend == "s3":
        return S3TopicStore(config.bucket, config.key)
    return LocalTopicStore(config.path)
