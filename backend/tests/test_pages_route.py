from unittest.mock import MagicMock

import pytest

from slugdrop.config import settings
from slugdrop.dependencies import get_storage
from slugdrop.main import app
from slugdrop.services.s3 import StorageError

HTML_TYPE = "text/html; charset=utf-8"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_fetch_existing_page(client, storage):
    content = "<h1>¡Hola!</h1>".encode("utf-8")
    storage.put("zippy-otter-0007.html", content, HTML_TYPE)

    response = client.get("/zippy-otter-0007")

    assert response.status_code == 200
    assert response.content == content
    assert response.headers["content-type"] == HTML_TYPE
    assert response.headers["cache-control"] == "public, max-age=3600"


def test_fetch_unknown_slug(client):
    response = client.get("/zippy-otter-0007")
    assert response.status_code == 404


@pytest.mark.parametrize(
    "path",
    [
        "/Foo-Bar-12",
        "/cat-1234",
        "/HAPPY-cat-0001",
        "/happy-cat-00011",
        "/happy-cat-0001.html",
        "/..%2Fetc%2Fpasswd",
        "/happy-cat-0001/extra",
    ],
)
def test_malformed_slug_never_reaches_storage(client, path):
    spy = MagicMock()
    app.dependency_overrides[get_storage] = lambda: spy

    response = client.get(path)

    assert response.status_code == 404
    spy.get.assert_not_called()


def test_storage_failure_returns_500(client):
    broken = MagicMock()
    broken.get.side_effect = StorageError("socket closed: internal-detail")
    app.dependency_overrides[get_storage] = lambda: broken

    response = client.get("/happy-cat-0001")

    assert response.status_code == 500
    assert response.json() == {"error": "Error retrieving file"}
    assert "internal-detail" not in response.text


def test_fetch_rate_limit_returns_error_body(client, monkeypatch):
    monkeypatch.setattr(settings, "FETCH_RATE_LIMIT", "2/minute")

    statuses = [client.get("/zippy-otter-0007").status_code for _ in range(3)]
    limited = client.get("/zippy-otter-0007")

    assert statuses == [404, 404, 429]
    assert limited.status_code == 429
    assert limited.json()["error"].startswith("Rate limit exceeded")
    assert "detail" not in limited.json()


def test_fetch_429_is_documented_in_openapi(client):
    responses = client.get("/openapi.json").json()["paths"]["/{slug}"]["get"]["responses"]
    assert {"404", "429", "500"} <= set(responses)
