from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from slugdrop.config import settings
from slugdrop.services.s3 import (
    HtmlStorage,
    ObjectNotFound,
    StorageError,
    create_s3_client,
)

HTML_TYPE = "text/html; charset=utf-8"


def client_error(code, operation="GetObject"):
    return ClientError({"Error": {"Code": code, "Message": "boom"}}, operation)


def test_put_and_get(storage):
    content = b"<h1>hello world</h1>"

    storage.put("happy-cat-0001.html", content, HTML_TYPE, {"original-filename": "hello.html"})
    stored = storage.get("happy-cat-0001.html")

    assert stored.body == content
    assert stored.content_type == HTML_TYPE
    assert stored.metadata["original-filename"] == "hello.html"


def test_put_overwrites_same_key(storage):
    storage.put("happy-cat-0001.html", b"first", HTML_TYPE)
    storage.put("happy-cat-0001.html", b"second", HTML_TYPE)

    assert storage.get("happy-cat-0001.html").body == b"second"


def test_get_missing_key_raises_not_found(storage):
    with pytest.raises(ObjectNotFound):
        storage.get("zippy-otter-0007.html")


def test_not_found_is_a_storage_error():
    assert issubclass(ObjectNotFound, StorageError)


def test_exists(storage):
    assert storage.exists("happy-cat-0001.html") is False
    storage.put("happy-cat-0001.html", b"x", HTML_TYPE)
    assert storage.exists("happy-cat-0001.html") is True


def test_get_other_client_error_is_storage_error():
    client = MagicMock()
    client.get_object.side_effect = client_error("InternalError")
    storage = HtmlStorage(client=client, bucket="b")

    with pytest.raises(StorageError) as excinfo:
        storage.get("happy-cat-0001.html")
    assert not isinstance(excinfo.value, ObjectNotFound)


def test_get_connection_error_is_storage_error():
    client = MagicMock()
    client.get_object.side_effect = EndpointConnectionError(endpoint_url="http://minio:9000")
    storage = HtmlStorage(client=client, bucket="b")

    with pytest.raises(StorageError):
        storage.get("happy-cat-0001.html")


def test_put_failure_is_storage_error():
    client = MagicMock()
    client.put_object.side_effect = client_error("AccessDenied", "PutObject")
    storage = HtmlStorage(client=client, bucket="b")

    with pytest.raises(StorageError):
        storage.put("happy-cat-0001.html", b"x", HTML_TYPE)


def test_exists_propagates_non_404_errors():
    client = MagicMock()
    client.head_object.side_effect = client_error("403", "HeadObject")
    storage = HtmlStorage(client=client, bucket="b")

    with pytest.raises(StorageError):
        storage.exists("happy-cat-0001.html")


def test_ensure_bucket_creates_missing_bucket(s3_client):
    storage = HtmlStorage(client=s3_client, bucket="fresh-bucket")

    assert storage.ensure_bucket() is True
    assert storage.ensure_bucket() is False
    s3_client.head_bucket(Bucket="fresh-bucket")


def test_ensure_bucket_existing(storage):
    assert storage.ensure_bucket() is False


def test_client_uses_configured_endpoint_and_timeouts():
    client = create_s3_client()

    assert client.meta.endpoint_url == settings.S3_ENDPOINT_URL
    assert client.meta.config.connect_timeout == settings.S3_CONNECT_TIMEOUT
    assert client.meta.config.read_timeout == settings.S3_READ_TIMEOUT
    assert client.meta.config.retries["total_max_attempts"] == settings.S3_MAX_ATTEMPTS
    assert client.meta.config.retries["mode"] == "standard"
