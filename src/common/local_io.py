"""Local file I/O utilities."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)


def read_jsonl_local(path: str | Path) -> Iterator[dict]:
    """Yield one dict per non-empty line of a local JSONL file."""
    with Path(path).open(encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                yield json.loads(line)


def save_jsonl_records_local(
    records: list[Any],
    prefix: str,
    output_dir: str = "output",
) -> Path:
    """
    Save a list of dataclass records to a local JSONL file.

    Handles serialization, builds the filename, and logs the result.

    Args:
        records: List of dataclass objects (or plain dicts) to save
        prefix: Filename prefix (e.g., "clustered_articles", "classified_articles")
        output_dir: Directory to save to (default: "output")

    Returns:
        Path to the created file.
    """
    now = datetime.now(timezone.utc)
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    filename = f"{prefix}_{now.strftime('%Y_%m_%d_%H_%M')}.jsonl"
    filepath = output_path / filename

    with filepath.open("w", encoding="utf-8") as f:
        for record in records:
            serialized = record if isinstance(record, dict) else serialize_dataclass(record)
            f.write(json.dumps(serialized, default=str, ensure_ascii=False) + "\n")

    logger.info("Saved %d records to %s", len(records), filepath)
    return filepath
