import io
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
from minio.datatypes import Object
from minio.error import MinioException
from urllib3.exceptions import ProtocolError

from app.storage.base import StorageDriverError
from app.storage.minio import MinIOStorage


class FakeResponse(io.BytesIO):
    def __init__(self, content, headers):
        super().__init__(content)
        self.headers = headers
        self.released = False

    def release_conn(self):
        self.released = True


@pytest.fixture
def minio(settings):
    settings = settings.model_copy(update={"storage_driver": "minio", "bucket_name": "images"})
    driver = MinIOStorage(settings)
    driver.client = Mock()
    return driver


def test_listing_uses_s3_field_names(minio):
    modified = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    minio.client.list_objects.return_value = iter([
        Object("images", "original/a.png", last_modified=modified, etag="abc123", size=42),
    ])

    entries = minio.list_objects("original/")

    assert entries == [{"Key": "original/a.png", "Size": 42, "LastModified": modified, "ETag": "abc123"}]
    minio.client.list_objects.assert_called_once_with("images", prefix="original/", recursive=True)


def test_put_object(minio):
    assert minio.put_object("a.txt", b"hello", "text/plain") == "a.txt"

    args, kwargs = minio.client.put_object.call_args
    assert args[0] == "images"
    assert args[1] == "a.txt"
    assert args[2].read() == b"hello"
    assert kwargs == {"length": 5, "content_type": "text/plain"}


def test_get_object_reads_metadata_from_headers(minio):
    response = FakeResponse(b"pixels", {"Content-Type": "image/png", "Content-Length": "6"})
    minio.client.get_object.return_value = response

    obj = minio.get_object("a.png")

    assert obj.content_type == "image/png"
    assert obj.content_length == 6
    assert b"".join(obj.iter_chunks(4)) == b"pixels"
    obj.close()
    assert response.released


def test_get_object_without_headers_uses_defaults(minio):
    minio.client.get_object.return_value = FakeResponse(b"", {})

    obj = minio.get_object("blob")

    assert obj.content_type == "application/octet-stream"
    assert obj.content_length is None


@pytest.mark.parametrize("error", [MinioException("Access Denied"), ProtocolError("connection reset")])
def test_sdk_errors_are_wrapped(minio, error):
    minio.client.list_objects.side_effect = error
    minio.client.put_object.side_effect = error
    minio.client.get_object.side_effect = error

    with pytest.raises(StorageDriverError):
        minio.list_objects()
    with pytest.raises(StorageDriverError):
        minio.put_object("a.txt", b"a", "text/plain")
    with pytest.raises(StorageDriverError):
        minio.get_object("a.txt")
