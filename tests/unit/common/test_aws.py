"""Tests for common.aws module."""

import json
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from common.aws import (
    build_s3_key,
    is_precondition_failure,
    put_json_object,
    read_json_object,
    upload_jsonl_records_to_s3,
)


def _client_error(code: str, operation: str = "PutObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestBuildS3Key:
    def test_partitioned_key(self) -> None:
        key = build_s3_key("clustered_articles", datetime(2024, 3, 5), "f.jsonl")
        assert key == "clustered_articles/year=2024/month=03/day=05/f.jsonl"


class TestUploadJsonlRecordsToS3:
    @patch("common.aws.get_s3_client")
    def test_uploads_jsonl_body(self, mock_client, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("S3_BUCKET_NAME", "bucket")
        s3 = MagicMock()
        mock_client.return_value = s3

        key = upload_jsonl_records_to_s3([{"a": 1}, {"a": 2}], "classified_articles")

        kwargs = s3.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "bucket"
        assert kwargs["Key"] == key
        assert key.startswith("classified_articles/year=")
        assert kwargs["Body"].decode("utf-8") == '{"a": 1}\n{"a": 2}\n'


class TestReadJsonObject:
    @patch("common.aws.get_s3_client")
    def test_returns_document_and_etag(self, mock_client) -> None:
        body = MagicMock()
        body.read.return_value = json.dumps({"topics": []}).encode("utf-8")
        mock_client.return_value.get_object.return_value = {"Body": body, "ETag": '"abc"'}

        assert read_json_object("bucket", "key") == ({"topics": []}, '"abc"')

    @patch("common.aws.get_s3_client")
    def test_missing_object(self, mock_client) -> None:
        mock_client.return_value.get_object.side_effect = _client_error("NoSuchKey", "GetObject")
        assert read_json_object("bucket", "key") == (None, None)

    @patch("common.aws.get_s3_client")
    def test_other_errors_propagate(self, mock_client) -> None:
        mock_client.return_value.get_object.side_effect = _client_error("AccessDenied", "GetObject")
        with pytest.raises(ClientError):
            read_json_object("bucket", "key")


class TestPutJsonObject:
    @patch("common.aws.get_s3_client")
    def test_conditional_on_etag(self, mock_client) -> None:
        mock_client.return_value.put_object.return_value = {"ETag": '"new"'}

        etag = put_json_object("bucket", "key", {"topics": []}, '"old"')

        kwargs = mock_client.return_value.put_object.call_args.kwargs
        assert kwargs["IfMatch"] == '"old"'
        assert "IfNoneMatch" not in kwargs
        assert etag == '"new"'

    @patch("common.aws.get_s3_client")
    def test_create_only_without_etag(self, mock_client) -> None:
        mock_client.return_value.put_object.return_value = {}

        put_json_object("bucket", "key", {"topics": []}, None)

        kwargs = mock_client.return_value.put_object.call_args.kwargs
        assert kwargs["IfNoneMatch"] == "*"
        assert "IfMatch" not in kwargs


class TestIsPreconditionFailure:
    def test_precondition_codes(self) -> None:
        assert is_precondition_failure(_client_error("PreconditionFailed"))
        assert is_precondition_failure(_client_error("ConditionalRequestConflict"))

    def test_other_code(self) -> None:
        assert not is_precondition_failure(_client_error("AccessDenied"))
