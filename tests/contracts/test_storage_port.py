import inspect

import pytest

from adapters.memory.storage import InMemoryStorageAdapter
from adapters.minio.storage import MinioStorageAdapter
from adapters.s3.storage import S3StorageAdapter
from ports.storage import StoragePort

PORT_METHODS = [
    "issue_upload_policy",
    "issue_download_url",
    "delete_object",
    "object_exists",
    "create_bucket_if_absent",
    "set_bucket_policy",
    "put_object",
    "get_object",
]


@pytest.mark.parametrize(
    "adapter_cls", [MinioStorageAdapter, S3StorageAdapter, InMemoryStorageAdapter]
)
def test_adapter_implements_port(adapter_cls):
    """Verify each adapter implements StoragePort with async methods."""
    assert issubclass(adapter_cls, StoragePort)
    assert not inspect.isabstract(adapter_cls)

    for name in PORT_METHODS:
        assert inspect.iscoroutinefunction(getattr(adapter_cls, name)), name


def test_port_cannot_be_instantiated():
    with pytest.raises(TypeError):
        StoragePort()
