import json

import pytest

from domain.entities import (
    Bucket,
    BucketVisibility,
    DownloadRequest,
    MediaConfig,
    UploadPolicyRequest,
)
from domain.exceptions import (
    BackendUnavailable,
    InvalidContentType,
    InvalidObjectKey,
    ObjectNotFound,
    PolicyApplicationFailed,
    SizeExceeded,
)
from services.media_service import (
    DEFAULT_DOWNLOAD_EXPIRY,
    DEFAULT_UPLOAD_EXPIRY,
    MediaService,
)

TEST_MAX_FILE_SIZE = 10 * 1024 * 1024


def _assert_no_backend_calls(storage):
    assert storage.mock_calls == []


# ---------------------------------------------------------------------------
# Presign upload
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content_type", ["text/plain", "image/gif", "image/*", "IMAGE/JPEG", ""]
)
async def test_presign_upload_rejects_content_type(media_service, stub_storage, content_type):
    request = UploadPolicyRequest(
        bucket_name="mediatest", content_type=content_type, max_file_size=1024
    )

    with pytest.raises(InvalidContentType):
        await media_service.presign_upload(request)

    _assert_no_backend_calls(stub_storage)


@pytest.mark.asyncio
@pytest.mark.parametrize("max_file_size", [TEST_MAX_FILE_SIZE + 1, TEST_MAX_FILE_SIZE * 10])
async def test_presign_upload_rejects_size_above_ceiling(
    media_service, stub_storage, max_file_size
):
    request = UploadPolicyRequest(
        bucket_name="mediatest", content_type="image/jpeg", max_file_size=max_file_size
    )

    with pytest.raises(SizeExceeded) as excinfo:
        await media_service.presign_upload(request)

    assert excinfo.value.details["maximum"] == str(TEST_MAX_FILE_SIZE)
    _assert_no_backend_calls(stub_storage)


@pytest.mark.asyncio
async def test_content_type_checked_before_size(media_service, stub_storage):
    request = UploadPolicyRequest(
        bucket_name="mediatest",
        content_type="text/plain",
        max_file_size=TEST_MAX_FILE_SIZE + 1,
    )

    with pytest.raises(InvalidContentType):
        await media_service.presign_upload(request)


@pytest.mark.asyncio
async def test_presign_upload_end_to_end_shape(media_service, stub_storage):
    request = UploadPolicyRequest(
        bucket_name="mediatest",
        content_type="image/jpeg",
        max_file_size=5242880,
        path="users/avatars",
        file_name="avatar.jpg",
    )

    result = await media_service.presign_upload(request)

    assert result.object_key == "users/avatars/avatar.jpg"
    assert result.expires_in == 60
    assert result.presigned_url == "http://localhost:9000/mediatest"
    for field_name in ("policy", "x-amz-algorithm", "x-amz-credential", "x-amz-date", "x-amz-signature"):
        assert result.form_data[field_name]

    # The requested size, not the server ceiling, is forwarded
    stub_storage.issue_upload_policy.assert_awaited_once_with(
        "mediatest",
        "users/avatars/avatar.jpg",
        "image/jpeg",
        DEFAULT_UPLOAD_EXPIRY,
        5242880,
    )


@pytest.mark.asyncio
async def test_presign_upload_at_exact_ceiling(media_service, stub_storage):
    request = UploadPolicyRequest(
        bucket_name="mediatest", content_type="image/png", max_file_size=TEST_MAX_FILE_SIZE
    )

    result = await media_service.presign_upload(request)

    assert result.object_key.endswith(".png")
    stub_storage.issue_upload_policy.assert_awaited_once()


@pytest.mark.asyncio
async def test_presign_upload_preserves_form_field_order(media_service, stub_storage):
    fields = {"bucket": "b", "key": "k", "Content-Type": "image/png", "x-extra": "1"}
    stub_storage.issue_upload_policy.return_value = ("http://store/b", fields)

    result = await media_service.presign_upload(
        UploadPolicyRequest(bucket_name="b", content_type="image/png", max_file_size=1)
    )

    assert list(result.form_data) == ["bucket", "key", "Content-Type", "x-extra"]


@pytest.mark.asyncio
async def test_presign_upload_rejects_traversal(media_service, stub_storage):
    request = UploadPolicyRequest(
        bucket_name="mediatest",
        content_type="image/jpeg",
        max_file_size=1024,
        path="../../etc",
        file_name="passwd",
    )

    with pytest.raises(InvalidObjectKey):
        await media_service.presign_upload(request)

    _assert_no_backend_calls(stub_storage)


@pytest.mark.asyncio
async def test_presign_upload_allows_traversal_when_check_disabled(stub_storage):
    service = MediaService(
        storage=stub_storage,
        config=MediaConfig(
            max_file_size=1024,
            allowed_content_types=frozenset({"image/jpeg"}),
            reject_unsafe_keys=False,
        ),
    )

    result = await service.presign_upload(
        UploadPolicyRequest(
            bucket_name="mediatest",
            content_type="image/jpeg",
            max_file_size=1024,
            path="../../etc",
            file_name="passwd",
        )
    )

    assert result.object_key == "../../etc/passwd"


@pytest.mark.asyncio
async def test_presign_upload_propagates_backend_failure(media_service, stub_storage):
    stub_storage.issue_upload_policy.side_effect = BackendUnavailable(
        "signing failed", operation="issue_upload_policy", bucket="mediatest"
    )

    with pytest.raises(BackendUnavailable) as excinfo:
        await media_service.presign_upload(
            UploadPolicyRequest(
                bucket_name="mediatest", content_type="image/jpeg", max_file_size=1
            )
        )

    assert excinfo.value.details["operation"] == "issue_upload_policy"
    assert excinfo.value.details["bucket"] == "mediatest"


# ---------------------------------------------------------------------------
# Presign download
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_presign_download_missing_object(media_service, stub_storage):
    stub_storage.object_exists.return_value = False

    with pytest.raises(ObjectNotFound) as excinfo:
        await media_service.presign_download(
            DownloadRequest(bucket_name="mediatest", object_key="missing.jpg")
        )

    assert excinfo.value.details == {"bucket": "mediatest", "key": "missing.jpg"}
    stub_storage.issue_download_url.assert_not_called()


@pytest.mark.asyncio
async def test_presign_download_existing_object(media_service, stub_storage):
    result = await media_service.presign_download(
        DownloadRequest(bucket_name="mediatest", object_key="users/avatars/avatar.jpg")
    )

    assert result.expires_in == 3600
    assert result.presigned_url.startswith("http://localhost:9000/mediatest/")
    stub_storage.object_exists.assert_awaited_once_with(
        "mediatest", "users/avatars/avatar.jpg"
    )
    stub_storage.issue_download_url.assert_awaited_once_with(
        "mediatest", "users/avatars/avatar.jpg", DEFAULT_DOWNLOAD_EXPIRY
    )


@pytest.mark.asyncio
async def test_presign_download_existence_check_failure(media_service, stub_storage):
    stub_storage.object_exists.side_effect = BackendUnavailable(
        "access denied", operation="object_exists", bucket="mediatest", key="a.jpg"
    )

    with pytest.raises(BackendUnavailable):
        await media_service.presign_download(
            DownloadRequest(bucket_name="mediatest", object_key="a.jpg")
        )

    stub_storage.issue_download_url.assert_not_called()


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_delete_object(media_service, stub_storage):
    assert await media_service.delete_object("mediatest", "a.jpg") is True
    stub_storage.delete_object.assert_awaited_once_with("mediatest", "a.jpg")


@pytest.mark.asyncio
async def test_delete_object_failure(media_service, stub_storage):
    stub_storage.delete_object.side_effect = BackendUnavailable(
        "timeout", operation="delete_object"
    )

    with pytest.raises(BackendUnavailable):
        await media_service.delete_object("mediatest", "a.jpg")


# ---------------------------------------------------------------------------
# Buckets
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_public_bucket_sets_read_policy(media_service, stub_storage):
    bucket = Bucket(name="mediatest", visibility=BucketVisibility.PUBLIC_READ)

    assert await media_service.create_bucket(bucket) is True

    stub_storage.create_bucket_if_absent.assert_awaited_once_with("mediatest")
    stub_storage.set_bucket_policy.assert_awaited_once()

    bucket_name, policy = stub_storage.set_bucket_policy.await_args.args
    document = json.loads(policy)
    assert bucket_name == "mediatest"
    assert document["Statement"][0]["Resource"] == ["arn:aws:s3:::mediatest/*"]
    assert document["Statement"][0]["Action"] == ["s3:GetObject"]


@pytest.mark.asyncio
async def test_create_private_bucket_sets_no_policy(media_service, stub_storage):
    assert await media_service.create_bucket(Bucket(name="mediatest")) is True

    stub_storage.create_bucket_if_absent.assert_awaited_once_with("mediatest")
    stub_storage.set_bucket_policy.assert_not_called()


@pytest.mark.asyncio
async def test_create_private_bucket_twice(media_service, stub_storage):
    bucket = Bucket(name="mediatest")

    assert await media_service.create_bucket(bucket) is True
    assert await media_service.create_bucket(bucket) is True

    assert stub_storage.create_bucket_if_absent.await_count == 2
    stub_storage.set_bucket_policy.assert_not_called()


@pytest.mark.asyncio
async def test_create_bucket_failure_is_not_policy_failure(media_service, stub_storage):
    stub_storage.create_bucket_if_absent.side_effect = BackendUnavailable(
        "denied", operation="create_bucket", bucket="mediatest"
    )

    with pytest.raises(BackendUnavailable) as excinfo:
        await media_service.create_bucket(
            Bucket(name="mediatest", visibility=BucketVisibility.PUBLIC_READ)
        )

    assert not isinstance(excinfo.value, PolicyApplicationFailed)
    stub_storage.set_bucket_policy.assert_not_called()


@pytest.mark.asyncio
async def test_policy_failure_surfaces_distinctly(media_service, stub_storage):
    cause = BackendUnavailable("policy rejected", operation="set_bucket_policy")
    stub_storage.set_bucket_policy.side_effect = cause

    with pytest.raises(PolicyApplicationFailed) as excinfo:
        await media_service.create_bucket(
            Bucket(name="mediatest", visibility=BucketVisibility.PUBLIC_READ)
        )

    assert excinfo.value.bucket == "mediatest"
    assert excinfo.value.operation == "set_bucket_policy"
    assert excinfo.value.__cause__ is cause
    # No rollback: the bucket stays created
    stub_storage.create_bucket_if_absent.assert_awaited_once_with("mediatest")
    stub_storage.delete_object.assert_not_called()


@pytest.mark.asyncio
async def test_ping(media_service, stub_storage):
    assert await media_service.ping("hello") == "Its fine here...!"
    _assert_no_backend_calls(stub_storage)
