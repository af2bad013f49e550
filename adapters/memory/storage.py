"""
In-memory Storage Adapter.

Enables running the full API flow without provisioning object storage.
Objects, buckets and policies live in dictionaries; presigned URLs are
``memory://`` URIs signed with a process-local key.

Not suitable for production, but perfect for development and testing.
"""

import base64
import hashlib
import hmac
import json
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple

from core.logger import logger
from domain.exceptions import BackendUnavailable, ObjectNotFound
from ports.storage import StoragePort

ALGORITHM = "MEMORY-HMAC-SHA256"


class InMemoryStorageAdapter(StoragePort):
    """Storage port backed by process memory."""

    def __init__(self, signing_key: Optional[bytes] = None) -> None:
        # {bucket_name: {object_key: (data, content_type)}}
        self._buckets: Dict[str, Dict[str, Tuple[bytes, str]]] = {}
        self._policies: Dict[str, str] = {}
        self._signing_key = signing_key or secrets.token_bytes(32)
        logger.info("Initialized in-memory storage adapter")

    def _sign(self, payload: str) -> str:
        return hmac.new(
            self._signing_key, payload.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    def _bucket(self, bucket_name: str, operation: str) -> Dict[str, Tuple[bytes, str]]:
        if bucket_name not in self._buckets:
            raise BackendUnavailable(
                f"Bucket does not exist: {bucket_name}",
                operation=operation,
                bucket=bucket_name,
            )
        return self._buckets[bucket_name]

    # ------------------------------------------------------------------
    # Presigned paths
    # ------------------------------------------------------------------

    async def issue_upload_policy(
        self,
        bucket_name: str,
        object_key: str,
        content_type: str,
        expires_in: int,
        max_size: int,
    ) -> Tuple[str, Dict[str, str]]:
        expiration = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        document = {
            "expiration": expiration.strftime("%Y-%m-%dT%H:%M:%S.000Z"),
            "conditions": [
                ["eq", "$bucket", bucket_name],
                ["eq", "$key", object_key],
                ["eq", "$Content-Type", content_type],
                ["content-length-range", 0, max_size],
            ],
        }
        encoded_policy = base64.b64encode(json.dumps(document).encode("utf-8")).decode()
        amz_date = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

        form_data = {
            "bucket": bucket_name,
            "key": object_key,
            "Content-Type": content_type,
            "policy": encoded_policy,
            "x-amz-algorithm": ALGORITHM,
            "x-amz-credential": f"memory/{amz_date[:8]}/local/s3/aws4_request",
            "x-amz-date": amz_date,
            "x-amz-signature": self._sign(encoded_policy),
        }
        return f"memory://{bucket_name}", form_data

    async def issue_download_url(
        self, bucket_name: str, object_key: str, expires_in: int
    ) -> str:
        expires_at = int(time.time()) + expires_in
        signature = self._sign(f"{bucket_name}/{object_key}:{expires_at}")
        return f"memory://{bucket_name}/{object_key}?expires={expires_at}&signature={signature}"

    def accept_post_upload(
        self, form_data: Dict[str, str], data: bytes, content_type: str
    ) -> None:
        """
        Emulate the store receiving a multipart POST built from ``form_data``.

        Enforces the signed policy the way a real backend would.

        Raises:
            PermissionError: if the signature, expiry, key, content type or
                size does not satisfy the policy
        """
        encoded_policy = form_data.get("policy", "")
        expected = self._sign(encoded_policy)
        if not hmac.compare_digest(expected, form_data.get("x-amz-signature", "")):
            raise PermissionError("Signature does not match")

        document = json.loads(base64.b64decode(encoded_policy))
        expiration = datetime.strptime(
            document["expiration"], "%Y-%m-%dT%H:%M:%S.000Z"
        ).replace(tzinfo=timezone.utc)
        if datetime.now(timezone.utc) > expiration:
            raise PermissionError("Policy expired")

        submitted = dict(form_data)
        submitted["Content-Type"] = content_type
        for condition in document["conditions"]:
            if condition[0] == "eq":
                field_name = condition[1].lstrip("$")
                if submitted.get(field_name) != condition[2]:
                    raise PermissionError(f"Policy condition failed: {field_name}")
            elif condition[0] == "content-length-range":
                if not condition[1] <= len(data) <= condition[2]:
                    raise PermissionError("Your proposed upload exceeds the maximum allowed size")

        bucket = self._bucket(submitted["bucket"], "post_upload")
        bucket[submitted["key"]] = (data, content_type)

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    async def delete_object(self, bucket_name: str, object_key: str) -> None:
        self._buckets.get(bucket_name, {}).pop(object_key, None)
        logger.debug(f"Deleted object from memory: {bucket_name}/{object_key}")

    async def object_exists(self, bucket_name: str, object_key: str) -> bool:
        return object_key in self._buckets.get(bucket_name, {})

    async def put_object(
        self, bucket_name: str, object_key: str, data: bytes, content_type: str
    ) -> None:
        bucket = self._bucket(bucket_name, "put_object")
        bucket[object_key] = (data, content_type)
        logger.debug(
            f"Stored object in memory: {bucket_name}/{object_key} ({len(data)} bytes)"
        )

    async def get_object(self, bucket_name: str, object_key: str) -> bytes:
        stored = self._buckets.get(bucket_name, {}).get(object_key)
        if stored is None:
            raise ObjectNotFound(
                f"Object not found: {object_key} in bucket: {bucket_name}",
                {"bucket": bucket_name, "key": object_key},
            )
        return stored[0]

    # ------------------------------------------------------------------
    # Buckets
    # ------------------------------------------------------------------

    async def create_bucket_if_absent(self, bucket_name: str) -> None:
        if bucket_name not in self._buckets:
            self._buckets[bucket_name] = {}
            logger.debug(f"Created in-memory bucket: {bucket_name}")

    async def set_bucket_policy(self, bucket_name: str, policy: str) -> None:
        self._bucket(bucket_name, "set_bucket_policy")
        self._policies[bucket_name] = policy

    def get_bucket_policy(self, bucket_name: str) -> Optional[str]:
        return self._policies.get(bucket_name)
