import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

import boto3
from botocore.exceptions import ClientError
from dotenv import load_dotenv

from common.serialization import serialize_dataclass

load_dotenv()

logger = logging.getLogger(__name__)

PRECONDITION_ERROR_CODES = frozenset({"PreconditionFailed", "ConditionalRequestConflict"})


def get_s3_client():
    """Create S3 client."""
    return boto3.client("s3")


def build_s3_key(prefix: str, timestamp: datetime, filename: str) -> str:
    """Build a partitioned S3 key path."""
    return (
        f"{prefix}/"
        f"year={timestamp.year:04d}/"
        f"month={timestamp.month:02d}/"
        f"day={timestamp.day:02d}/"
        f"{filename}"
    )


def upload_jsonl_to_s3(
    records: Iterable[Mapping[str, Any]],
    bucket: str,
    key: str,
) -> None:
    """Upload in-memory records to S3 as JSONL."""
    body = "\n".join(json.dumps(record, ensure_ascii=False) for record in records) + "\n"

    s3 = get_s3_client()
    s3.put_object(
        Bucket=bucket,
        Key=key,
        Body=body.encode("utf-8"),
        ContentType="application/jsonl",
    )


def upload_jsonl_records_to_s3(records: list[Any], prefix: str) -> str:
    """
    Upload a list of dataclass records to S3 as JSONL.

    Handles serialization, builds the S3 key, and logs the result.

    Args:
        records: List of dataclass objects (or plain dicts) to upload
        prefix: S3 prefix (e.g., "clustered_articles", "classified_articles")

    Returns:
        The S3 key written.
    """
    bucket = os.environ["S3_BUCKET_NAME"]
    now = datetime.now(timezone.utc)
    filename = f"{prefix}_{now.strftime('%Y_%m_%d_%H_%M')}.jsonl"
    key = build_s3_key(prefix, now, filename)

    serialized = [r if isinstance(r, dict) else serialize_dataclass(r) for r in records]
    upload_jsonl_to_s3(serialized, bucket, key)

    logger.info("Uploaded %d records to s3://%s/%s", len(records), bucket, key)
    return key


def read_json_object(bucket: str, key: str) -> tuple[Any, str | None]:
    """Read a JSON document from S3.

    Returns:
        Tuple of (parsed document, ETag). Both are None when the object does not exist.
    """
    s3 = get_s3_client()
    try:
        response = s3.get_object(Bucket=bucket, Key=key)
    except ClientError as exc:
        if exc.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
            return None, None
        raise

    content = response["Body"].read()
    return json.loads(content.decode("utf-8")), response.get("ETag")


def put_json_object(bucket: str, key: str, document: Any, etag: str | None) -> str | None:
    """Write a JSON document to S3 only if it is unchanged since it was read.

    With an ETag the write is conditional on it still matching; without one
    the write succeeds only if the object does not exist yet. A failed
    condition surfaces as a botocore ``ClientError``.

    Returns:
        ETag of the object just written.
    """
    body = json.dumps(document, ensure_ascii=False).encode("utf-8")
    condition = {"IfMatch": etag} if etag else {"IfNoneMatch": "*"}

    s3 = get_s3_client()
    response = s3.put_object(
        Bucket=bucket,
        Key=key,
        Body=body,
        ContentType="application/json",
        **condition,
    )
    return response.get("ETag")


def is_precondition_failure(exc: ClientError) -> bool:
    """Whether a ClientError reports a failed conditional write."""
    return exc.response.get("Error", {}).get("Code") in PRECONDITION_ERROR_CODES
