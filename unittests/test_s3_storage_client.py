"""Unit tests for db/clients/s3_storage_client.py, S3 used as a key/value blob store."""

import io

import pytest
from unittest.mock import MagicMock
from botocore.exceptions import ClientError, EndpointConnectionError

from db.clients.s3_storage_client import S3StorageClient
from errors import NotFoundError, StoreUnavailableError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


def _make_mock_s3(pages=None):
    """Return a mock boto3 S3 client whose paginator yields the given pages."""
    s3 = MagicMock()

    def _fake_presign(ClientMethod, Params, ExpiresIn):
        return f"https://presigned.example.com/{Params['Bucket']}/{Params['Key']}?expires={ExpiresIn}"

    s3.generate_presigned_url.side_effect = _fake_presign
    s3.get_paginator.return_value.paginate.return_value = pages or []
    return s3


def _make_client(s3) -> S3StorageClient:
    client = S3StorageClient(bucket="catalog-bucket", client=s3)
    client.connect()
    return client


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:

    def test_bucket_is_required(self):
        with pytest.raises(ValueError):
            S3StorageClient()

    def test_injected_client_survives_reconnect(self):
        s3 = _make_mock_s3()
        client = _make_client(s3)
        client.disconnect()
        client.connect()
        assert client.s3 is s3


# ---------------------------------------------------------------------------
# put / get / delete
# ---------------------------------------------------------------------------

class TestReadWrite:

    def test_put_passes_content_type(self):
        s3 = _make_mock_s3()
        _make_client(s3).put("videos/a.mp4", b"data", "video/mp4")
        s3.put_object.assert_called_once_with(
            Bucket="catalog-bucket", Key="videos/a.mp4", Body=b"data", ContentType="video/mp4"
        )

    def test_get_reads_body(self):
        s3 = _make_mock_s3()
        s3.get_object.return_value = {"Body": io.BytesIO(b'{"id": "1"}')}
        assert _make_client(s3).get("metadata/1.json") == b'{"id": "1"}'

    def test_get_missing_key_is_not_found(self):
        s3 = _make_mock_s3()
        s3.get_object.side_effect = _client_error("NoSuchKey")
        with pytest.raises(NotFoundError):
            _make_client(s3).get("metadata/missing.json")

    def test_get_access_denied_is_store_unavailable(self):
        s3 = _make_mock_s3()
        s3.get_object.side_effect = _client_error("AccessDenied")
        with pytest.raises(StoreUnavailableError):
            _make_client(s3).get("metadata/1.json")

    def test_transport_failure_is_store_unavailable(self):
        s3 = _make_mock_s3()
        s3.put_object.side_effect = EndpointConnectionError(endpoint_url="https://s3.example.com")
        with pytest.raises(StoreUnavailableError):
            _make_client(s3).put("videos/a.mp4", b"data")

    def test_exists_uses_head_object(self):
        s3 = _make_mock_s3()
        client = _make_client(s3)
        assert client.exists("videos/a.mp4") is True
        s3.head_object.side_effect = _client_error("404", "HeadObject")
        assert client.exists("videos/a.mp4") is False

    def test_delete(self):
        s3 = _make_mock_s3()
        _make_client(s3).delete("videos/a.mp4")
        s3.delete_object.assert_called_once_with(Bucket="catalog-bucket", Key="videos/a.mp4")


# ---------------------------------------------------------------------------
# list / total_size
# ---------------------------------------------------------------------------

class TestListing:

    def test_list_follows_every_page(self):
        s3 = _make_mock_s3(pages=[
            {"Contents": [{"Key": "metadata/1.json", "Size": 10}, {"Key": "metadata/2.json", "Size": 20}]},
            {"Contents": [{"Key": "metadata/3.json", "Size": 30}]},
            {},
        ])
        client = _make_client(s3)
        assert client.list("metadata/") == ["metadata/1.json", "metadata/2.json", "metadata/3.json"]
        s3.get_paginator.assert_called_with("list_objects_v2")

    def test_total_size(self):
        s3 = _make_mock_s3(pages=[
            {"Contents": [{"Key": "videos/a", "Size": 1024}, {"Key": "videos/b", "Size": 512}]},
        ])
        assert _make_client(s3).total_size("videos/") == 1536

    def test_missing_bucket_lists_nothing(self):
        s3 = _make_mock_s3()
        s3.get_paginator.return_value.paginate.side_effect = _client_error("NoSuchBucket", "ListObjectsV2")
        assert _make_client(s3).list("metadata/") == []


# ---------------------------------------------------------------------------
# signed_url
# ---------------------------------------------------------------------------

class TestSignedUrl:

    def test_signed_url_uses_expiry(self):
        s3 = _make_mock_s3()
        url = _make_client(s3).signed_url("videos/a.mp4", 3600)
        assert url == "https://presigned.example.com/catalog-bucket/videos/a.mp4?expires=3600"
        s3.generate_presigned_url.assert_called_once_with(
            ClientMethod="get_object",
            Params={"Bucket": "catalog-bucket", "Key": "videos/a.mp4"},
            ExpiresIn=3600,
        )

    def test_every_call_mints_a_new_url(self):
        s3 = _make_mock_s3()
        client = _make_client(s3)
        client.signed_url("videos/a.mp4")
        client.signed_url("videos/a.mp4")
        assert s3.generate_presigned_url.call_count == 2
