from datetime import datetime, timezone

import boto3
import pytest
import time_machine
from fastapi.testclient import TestClient
from moto import mock_aws

from slugdrop.config import settings
from slugdrop.dependencies import get_deploy_limiter, get_storage
from slugdrop.limiter import limiter as fetch_limiter
from slugdrop.main import app
from slugdrop.services.rate_limiter import LimitsRateLimiter
from slugdrop.services.s3 import HtmlStorage


@pytest.fixture
def clock():
    """Freeze wall-clock time; tests move it forward with clock.shift(seconds)."""
    with time_machine.travel(datetime(2026, 1, 1, tzinfo=timezone.utc), tick=False) as traveller:
        yield traveller


@pytest.fixture
def s3_client():
    """Provide a mocked S3 client with a test bucket."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=settings.S3_BUCKET)
        yield client


@pytest.fixture
def storage(s3_client):
    return HtmlStorage(client=s3_client, bucket=settings.S3_BUCKET)


@pytest.fixture
def deploy_limiter():
    return LimitsRateLimiter(
        max_requests=1,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        storage_uri="memory://",
    )


@pytest.fixture
def client(storage, deploy_limiter):
    """TestClient with moto-backed storage and a fresh deploy limiter."""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_deploy_limiter] = lambda: deploy_limiter
    fetch_limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
