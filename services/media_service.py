"""
Media service: validates requests and brokers presigned access to storage.
Payload bytes never pass through this service.
"""

from core.logger import logger
from domain.bucket_policy import build_public_read_policy
from domain.entities import (
    Bucket,
    DownloadRequest,
    DownloadResult,
    MediaConfig,
    UploadPolicyRequest,
    UploadPolicyResult,
)
from domain.exceptions import (
    BackendUnavailable,
    InvalidContentType,
    ObjectNotFound,
    PolicyApplicationFailed,
    SizeExceeded,
)
from domain.object_keys import check_object_key_safety, generate_object_key
from domain.validation import is_allowed_content_type, is_within_size_limit
from ports.storage import StoragePort

# Default expiry durations (seconds)
DEFAULT_UPLOAD_EXPIRY = 60
DEFAULT_DOWNLOAD_EXPIRY = 3600

PING_REPLY = "Its fine here...!"


class MediaService:
    """Stateless per call; holds only the storage port and immutable config."""

    def __init__(self, storage: StoragePort, config: MediaConfig):
        self.storage = storage
        self.config = config
        logger.debug(
            f"MediaService initialized: max_file_size={config.max_file_size}, "
            f"allowed_content_types={sorted(config.allowed_content_types)}"
        )

    async def ping(self, message: str = "") -> str:
        logger.debug(f"Ping request received, {message}")
        return PING_REPLY

    async def presign_upload(self, request: UploadPolicyRequest) -> UploadPolicyResult:
        """
        Issue a presigned POST policy for a direct client upload.

        Args:
            request: Bucket, content type, requested max size and optional
                path / file name

        Returns:
            UploadPolicyResult with the URL, object key, expiry and form fields

        Raises:
            InvalidContentType: content type not in the allow-list
            SizeExceeded: requested max size above the server ceiling
            InvalidObjectKey: derived key is unsafe (when enabled)
            BackendUnavailable: the storage backend failed to sign
        """
        logger.debug(
            f"PresignUpload request received, bucket: {request.bucket_name}, "
            f"content_type: {request.content_type}, max_file_size: {request.max_file_size}"
        )

        if not is_allowed_content_type(
            request.content_type, self.config.allowed_content_types
        ):
            raise InvalidContentType(
                f"invalid content type: {request.content_type}",
                {"content_type": request.content_type},
            )

        if not is_within_size_limit(request.max_file_size, self.config.max_file_size):
            raise SizeExceeded(
                f"requested max file size {request.max_file_size} exceeds server "
                f"maximum allowed size {self.config.max_file_size}",
                {
                    "requested": str(request.max_file_size),
                    "maximum": str(self.config.max_file_size),
                },
            )

        object_key = generate_object_key(
            request.path, request.file_name, request.content_type
        )
        if self.config.reject_unsafe_keys:
            check_object_key_safety(object_key)

        # The requested limit, not the ceiling, is what the store enforces
        try:
            presigned_url, form_data = await self.storage.issue_upload_policy(
                request.bucket_name,
                object_key,
                request.content_type,
                DEFAULT_UPLOAD_EXPIRY,
                request.max_file_size,
            )
        except BackendUnavailable as e:
            logger.error(f"Failed to generate presigned upload URL: {e}")
            raise

        logger.debug(
            f"Presigned upload URL generated successfully for object: {object_key} "
            f"in bucket: {request.bucket_name}"
        )

        return UploadPolicyResult(
            presigned_url=presigned_url,
            object_key=object_key,
            expires_in=DEFAULT_UPLOAD_EXPIRY,
            form_data=form_data,
        )

    async def presign_download(self, request: DownloadRequest) -> DownloadResult:
        """
        Issue a presigned GET URL for an existing object.

        Raises:
            ObjectNotFound: the object does not exist; no URL is signed
            BackendUnavailable: existence check or signing failed
        """
        logger.debug(
            f"PresignDownload request received, bucket: {request.bucket_name}, "
            f"object_key: {request.object_key}"
        )

        try:
            exists = await self.storage.object_exists(
                request.bucket_name, request.object_key
            )
        except BackendUnavailable as e:
            logger.error(f"Failed to check object existence: {e}")
            raise

        if not exists:
            raise ObjectNotFound(
                f"object not found: {request.object_key} in bucket: {request.bucket_name}",
                {"bucket": request.bucket_name, "key": request.object_key},
            )

        try:
            presigned_url = await self.storage.issue_download_url(
                request.bucket_name, request.object_key, DEFAULT_DOWNLOAD_EXPIRY
            )
        except BackendUnavailable as e:
            logger.error(f"Failed to generate presigned download URL: {e}")
            raise

        logger.debug(
            f"Presigned download URL generated successfully for object: {request.object_key}"
        )

        return DownloadResult(
            presigned_url=presigned_url, expires_in=DEFAULT_DOWNLOAD_EXPIRY
        )

    async def delete_object(self, bucket_name: str, object_key: str) -> bool:
        logger.debug(
            f"DeleteObject request received, bucket: {bucket_name}, object_key: {object_key}"
        )

        try:
            await self.storage.delete_object(bucket_name, object_key)
        except BackendUnavailable as e:
            logger.error(f"Failed to delete object: {e}")
            raise

        logger.debug(f"Object deleted successfully: {object_key}")
        return True

    async def create_bucket(self, bucket: Bucket) -> bool:
        """
        Create a bucket if absent and, for public buckets, apply a read-only policy.

        The two steps are not atomic. If the policy step fails the bucket
        still exists and ``PolicyApplicationFailed`` is raised so the caller
        retries the policy, not the creation.

        Raises:
            BackendUnavailable: bucket creation failed
            PolicyApplicationFailed: bucket created, public policy not applied
        """
        logger.debug(
            f"CreateBucket request received, bucket_name: {bucket.name}, "
            f"is_public: {bucket.is_public}"
        )

        try:
            await self.storage.create_bucket_if_absent(bucket.name)
        except BackendUnavailable as e:
            logger.error(f"Failed to create bucket: {e}")
            raise

        if not bucket.is_public:
            logger.debug(f"Bucket created with private policy: {bucket.name}")
            return True

        policy = build_public_read_policy(bucket.name)
        try:
            await self.storage.set_bucket_policy(bucket.name, policy)
        except BackendUnavailable as e:
            logger.error(f"Failed to set bucket policy: {e}")
            raise PolicyApplicationFailed(
                f"bucket {bucket.name} created but setting public read policy failed: {e.message}",
                operation="set_bucket_policy",
                bucket=bucket.name,
            ) from e

        logger.debug(f"Bucket created and policy set to public read: {bucket.name}")
        return True
