"""
MinIO Storage Adapter.
"""

import io
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Dict, Optional, Tuple

import urllib3
from minio import Minio
from minio.datatypes import PostPolicy
from minio.error import S3Error

from adapters.base import BlockingStorageAdapter
from core.logger import logger
from domain.exceptions import ObjectNotFound

NOT_FOUND_CODES = ("NoSuchKey", "NoSuchObject")
BUCKET_OWNED_CODES = ("BucketAlreadyOwnedByYou",)


def _strip_http(endpoint: str) -> str:
    # Minio client expects "host:port" (no scheme)
    endpoint = (endpoint or "").strip()
    endpoint = endpoint.replace("http://", "").replace("https://", "")
    return endpoint.rstrip("/")


class MinioStorageAdapter(BlockingStorageAdapter):
    """Adapter for MinIO and other S3-compatible stores, via the minio SDK."""

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        secure: bool = False,
        region: Optional[str] = None,
        timeout: float = 10.0,
        max_pool_size: int = 10,
        client: Optional[Minio] = None,
    ):
        super().__init__(timeout=timeout)

        host = _strip_http(endpoint)
        if not host:
            raise RuntimeError("STORAGE_ENDPOINT is empty or invalid")

        scheme = "https" if secure else "http"
        self.endpoint_url = f"{scheme}://{host}"

        if client is None:
            # Pooled, thread-safe transport; no retries at this layer
            http_client = urllib3.PoolManager(
                timeout=urllib3.Timeout(connect=timeout, read=timeout),
                maxsize=max_pool_size,
                retries=urllib3.Retry(total=0),
            )
            # Region is fixed up front so signing never needs a location lookup
            client = Minio(
                host,
                access_key=access_key,
                secret_key=secret_key,
                secure=secure,
                region=region,
                http_client=http_client,
            )
        self.client = client

        logger.info(f"MinIO storage adapter initialized: {self.endpoint_url}")

    @classmethod
    def from_settings(cls, settings) -> "MinioStorageAdapter":
        return cls(
            endpoint=settings.storage_endpoint,
            access_key=settings.storage_access_key,
            secret_key=settings.storage_secret_key,
            secure=settings.storage_use_ssl,
            region=settings.storage_region or None,
            timeout=settings.backend_timeout_seconds,
            max_pool_size=settings.storage_max_pool_size,
        )

    # ------------------------------------------------------------------
    # Presigned paths
    # ------------------------------------------------------------------

    def _issue_upload_policy(
        self,
        bucket_name: str,
        object_key: str,
        content_type: str,
        expires_in: int,
        max_size: int,
    ) -> Tuple[str, Dict[str, str]]:
        expiration = datetime.now(timezone.utc) + timedelta(seconds=expires_in)

        policy = PostPolicy(bucket_name, expiration)
        policy.add_equals_condition("key", object_key)
        policy.add_equals_condition("Content-Type", content_type)
        # Size limit is enforced by the store, not by this service
        policy.add_content_length_range_condition(0, max_size)

        signed_fields = self.client.presigned_post_policy(policy)

        form_data: Dict[str, str] = {
            "bucket": bucket_name,
            "key": object_key,
            "Content-Type": content_type,
        }
        for name, value in signed_fields.items():
            form_data[name] = str(value)

        return f"{self.endpoint_url}/{bucket_name}", form_data

    async def issue_upload_policy(
        self,
        bucket_name: str,
        object_key: str,
        content_type: str,
        expires_in: int,
        max_size: int,
    ) -> Tuple[str, Dict[str, str]]:
        url, form_data = await self._run(
            "issue_upload_policy",
            partial(
                self._issue_upload_policy,
                bucket_name,
                object_key,
                content_type,
                expires_in,
                max_size,
            ),
            bucket_name=bucket_name,
            object_key=object_key,
        )
        logger.debug(f"Generated presigned POST policy for: {bucket_name}/{object_key}")
        return url, form_data

    async def issue_download_url(
        self, bucket_name: str, object_key: str, expires_in: int
    ) -> str:
        url = await self._run(
            "issue_download_url",
            partial(
                self.client.presigned_get_object,
                bucket_name=bucket_name,
                object_name=object_key,
                expires=timedelta(seconds=expires_in),
            ),
            bucket_name=bucket_name,
            object_key=object_key,
        )
        logger.debug(f"Generated presigned URL for: {bucket_name}/{object_key}")
        return url

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def _delete_object(self, bucket_name: str, object_key: str) -> None:
        try:
            self.client.remove_object(bucket_name=bucket_name, object_name=object_key)
        except S3Error as e:
            if e.code in NOT_FOUND_CODES:
                return
            raise

    async def delete_object(self, bucket_name: str, object_key: str) -> None:
        await self._run(
            "delete_object",
            partial(self._delete_object, bucket_name, object_key),
            bucket_name=bucket_name,
            object_key=object_key,
        )
        logger.info(f"Deleted object from MinIO: {bucket_name}/{object_key}")

    def _object_exists(self, bucket_name: str, object_key: str) -> bool:
        try:
            self.client.stat_object(bucket_name=bucket_name, object_name=object_key)
            return True
        except S3Error as e:
            if e.code in NOT_FOUND_CODES:
                return False
            raise

    async def object_exists(self, bucket_name: str, object_key: str) -> bool:
        return await self._run(
            "object_exists",
            partial(self._object_exists, bucket_name, object_key),
            bucket_name=bucket_name,
            object_key=object_key,
        )

    async def put_object(
        self, bucket_name: str, object_key: str, data: bytes, content_type: str
    ) -> None:
        await self._run(
            "put_object",
            partial(
                self.client.put_object,
                bucket_name=bucket_name,
                object_name=object_key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            ),
            bucket_name=bucket_name,
            object_key=object_key,
        )
        logger.info(
            f"Uploaded file to MinIO: {bucket_name}/{object_key} ({len(data)} bytes)"
        )

    def _get_object(self, bucket_name: str, object_key: str) -> bytes:
        try:
            response = self.client.get_object(
                bucket_name=bucket_name, object_name=object_key
            )
        except S3Error as e:
            if e.code in NOT_FOUND_CODES:
                raise ObjectNotFound(
                    f"Object not found: {object_key} in bucket: {bucket_name}",
                    {"bucket": bucket_name, "key": object_key},
                ) from e
            raise

        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()

    async def get_object(self, bucket_name: str, object_key: str) -> bytes:
        return await self._run(
            "get_object",
            partial(self._get_object, bucket_name, object_key),
            bucket_name=bucket_name,
            object_key=object_key,
        )

    # ------------------------------------------------------------------
    # Buckets
    # ------------------------------------------------------------------

    def _create_bucket_if_absent(self, bucket_name: str) -> None:
        if self.client.bucket_exists(bucket_name=bucket_name):
            logger.debug(f"MinIO bucket exists: {bucket_name}")
            return

        try:
            self.client.make_bucket(bucket_name=bucket_name)
            logger.info(f"Created MinIO bucket: {bucket_name}")
        except S3Error as e:
            # Lost a creation race with another request
            if e.code in BUCKET_OWNED_CODES:
                return
            raise

    async def create_bucket_if_absent(self, bucket_name: str) -> None:
        await self._run(
            "create_bucket",
            partial(self._create_bucket_if_absent, bucket_name),
            bucket_name=bucket_name,
        )

    async def set_bucket_policy(self, bucket_name: str, policy: str) -> None:
        await self._run(
            "set_bucket_policy",
            partial(self.client.set_bucket_policy, bucket_name=bucket_name, policy=policy),
            bucket_name=bucket_name,
        )
        logger.debug(f"Bucket policy replaced: {bucket_name}")
