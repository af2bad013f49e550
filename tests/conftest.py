import os

# Keep test runs from writing log files; must be set before core is imported
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("STORAGE_BACKEND", "memory")

import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from adapters.memory.storage import InMemoryStorageAdapter
from core.config import Settings
from core.container import Container
from domain.entities import MediaConfig
from internal.api.app import create_app
from ports.storage import StoragePort
from services.media_service import MediaService

TEST_MAX_FILE_SIZE = 10 * 1024 * 1024
TEST_CONTENT_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})

SIGNED_FORM_FIELDS = {
    "bucket": "mediatest",
    "key": "users/avatars/avatar.jpg",
    "Content-Type": "image/jpeg",
    "policy": "eyJleHBpcmF0aW9uIjogIjIwMjUifQ==",
    "x-amz-algorithm": "AWS4-HMAC-SHA256",
    "x-amz-credential": "minioadmin/20250101/us-east-1/s3/aws4_request",
    "x-amz-date": "20250101T000000Z",
    "x-amz-signature": "abc123",
}


@pytest.fixture
def settings():
    return Settings(
        STORAGE_BACKEND="memory",
        MAX_FILE_SIZE=TEST_MAX_FILE_SIZE,
        ALLOWED_CONTENT_TYPES=",".join(sorted(TEST_CONTENT_TYPES)),
        LOG_TO_FILE=False,
        BOOTSTRAP_BUCKETS="",
    )


@pytest.fixture
def media_config():
    return MediaConfig(
        max_file_size=TEST_MAX_FILE_SIZE,
        allowed_content_types=TEST_CONTENT_TYPES,
    )


@pytest.fixture
def stub_storage():
    """Storage port stub; every method is an AsyncMock recording its calls."""
    storage = AsyncMock(spec=StoragePort)
    storage.issue_upload_policy.return_value = (
        "http://localhost:9000/mediatest",
        dict(SIGNED_FORM_FIELDS),
    )
    storage.issue_download_url.return_value = (
        "http://localhost:9000/mediatest/users/avatars/avatar.jpg?X-Amz-Signature=abc"
    )
    storage.object_exists.return_value = True
    storage.delete_object.return_value = None
    storage.create_bucket_if_absent.return_value = None
    storage.set_bucket_policy.return_value = None
    return storage


@pytest.fixture
def media_service(stub_storage, media_config):
    return MediaService(storage=stub_storage, config=media_config)


@pytest.fixture
def memory_storage():
    return InMemoryStorageAdapter(signing_key=b"test-signing-key")


@pytest.fixture
def client(settings, memory_storage):
    Container.clear()
    app = create_app(settings, storage=memory_storage)
    with TestClient(app) as test_client:
        yield test_client
    Container.clear()


@pytest.fixture
def stub_client(settings, stub_storage):
    """API client wired to the stub storage, for asserting backend calls."""
    Container.clear()
    app = create_app(settings, storage=stub_storage)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    Container.clear()
