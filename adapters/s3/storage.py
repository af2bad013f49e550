"""
AWS S3 Storage Adapter.

Uses boto3 so the same service can run against native S3 (or any endpoint
boto3 can sign for) instead of MinIO.
"""

from functools import partial
from typing import Dict, Optional, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from adapters.base import BlockingStorageAdapter
from core.logger import logger
from domain.exceptions import ObjectNotFound

NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")
BUCKET_OWNED_CODES = ("BucketAlreadyOwnedByYou",)


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class S3StorageAdapter(BlockingStorageAdapter):
    """Adapter for AWS S3 via boto3. boto3 clients are thread-safe."""

    def __init__(
        self,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        timeout: float = 10.0,
        max_pool_size: int = 10,
        client=None,
    ):
        super().__init__(timeout=timeout)
        self.region = region

        if client is None:
            boto_config = Config(
                signature_version="s3v4",
                region_name=region,
                connect_timeout=timeout,
                read_timeout=timeout,
                max_pool_connections=max_pool_size,
                retries={"max_attempts": 0, "mode": "standard"},
            )
            # Empty credentials fall back to boto3's resolution chain
            client = boto3.client(
                "s3",
                endpoint_url=endpoint_url or None,
                aws_access_key_id=access_key or None,
                aws_secret_access_key=secret_key or None,
                config=boto_config,
            )
        self.client = client

        logger.info(f"S3 storage adapter initialized: region={region}")

    @classmethod
    def from_settings(cls, settings) -> "S3StorageAdapter":
        # Leave endpoint unset for native AWS; set it for other S3-compatible stores
        endpoint_url = None
        if settings.storage_endpoint and "amazonaws.com" not in settings.storage_endpoint:
            endpoint_url = settings.storage_endpoint_url
        return cls(
            access_key=settings.storage_access_key,
            secret_key=settings.storage_secret_key,
            region=settings.storage_region or None,
            endpoint_url=endpoint_url,
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
        response = self.client.generate_presigned_post(
            Bucket=bucket_name,
            Key=object_key,
            Fields={"Content-Type": content_type},
            Conditions=[
                {"Content-Type": content_type},
                ["content-length-range", 0, max_size],
            ],
            ExpiresIn=expires_in,
        )

        # The generated policy already pins the bucket; sending it is harmless
        form_data: Dict[str, str] = {
            "bucket": bucket_name,
            "key": object_key,
            "Content-Type": content_type,
        }
        for name, value in response["fields"].items():
            form_data[name] = str(value)

        return response["url"], form_data

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
        return await self._run(
            "issue_download_url",
            partial(
                self.client.generate_presigned_url,
                "get_object",
                Params={"Bucket": bucket_name, "Key": object_key},
                ExpiresIn=expires_in,
            ),
            bucket_name=bucket_name,
            object_key=object_key,
        )

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    async def delete_object(self, bucket_name: str, object_key: str) -> None:
        # S3 answers 204 for missing keys as well
        await self._run(
            "delete_object",
            partial(self.client.delete_object, Bucket=bucket_name, Key=object_key),
            bucket_name=bucket_name,
            object_key=object_key,
        )
        logger.info(f"Deleted object from S3: {bucket_name}/{object_key}")

    def _object_exists(self, bucket_name: str, object_key: str) -> bool:
        try:
            self.client.head_object(Bucket=bucket_name, Key=object_key)
            return True
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
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
                Bucket=bucket_name,
                Key=object_key,
                Body=data,
                ContentType=content_type,
            ),
            bucket_name=bucket_name,
            object_key=object_key,
        )
        logger.info(f"Uploaded file to S3: {bucket_name}/{object_key} ({len(data)} bytes)")

    def _get_object(self, bucket_name: str, object_key: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=bucket_name, Key=object_key)
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                raise ObjectNotFound(
                    f"Object not found: {object_key} in bucket: {bucket_name}",
                    {"bucket": bucket_name, "key": object_key},
                ) from e
            raise
        return response["Body"].read()

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

    def _bucket_exists(self, bucket_name: str) -> bool:
        try:
            self.client.head_bucket(Bucket=bucket_name)
            return True
        except ClientError as e:
            if _error_code(e) in ("404", "NoSuchBucket", "NotFound"):
                return False
            raise

    def _create_bucket_if_absent(self, bucket_name: str) -> None:
        if self._bucket_exists(bucket_name):
            logger.debug(f"S3 bucket exists: {bucket_name}")
            return

        kwargs = {"Bucket": bucket_name}
        # us-east-1 rejects an explicit LocationConstraint
        if self.region and self.region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self.region}

        try:
            self.client.create_bucket(**kwargs)
            logger.info(f"Created S3 bucket: {bucket_name}")
        except ClientError as e:
            if _error_code(e) in BUCKET_OWNED_CODES:
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
            partial(self.client.put_bucket_policy, Bucket=bucket_name, Policy=policy),
            bucket_name=bucket_name,
        )
        logger.debug(f"Bucket policy replaced: {bucket_name}")
