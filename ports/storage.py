"""
Storage Ports.
"""

from abc import ABC, abstractmethod
from typing import Dict, Tuple


class StoragePort(ABC):
    """
    Abstract interface for Object Storage.

    Implementations hold their own credentials and connections and must be
    safe for concurrent use. Every failure other than the documented
    not-found cases surfaces as ``BackendUnavailable``.
    """

    @abstractmethod
    async def issue_upload_policy(
        self,
        bucket_name: str,
        object_key: str,
        content_type: str,
        expires_in: int,
        max_size: int,
    ) -> Tuple[str, Dict[str, str]]:
        """
        Create a presigned POST policy.

        The returned form fields, submitted verbatim ahead of the file part,
        make the backend reject bodies larger than ``max_size`` or declared
        with any content type other than ``content_type``.

        Returns:
            (upload URL, ordered form fields)
        """
        pass

    @abstractmethod
    async def issue_download_url(
        self, bucket_name: str, object_key: str, expires_in: int
    ) -> str:
        """Create a presigned GET URL. Does not check that the object exists."""
        pass

    @abstractmethod
    async def delete_object(self, bucket_name: str, object_key: str) -> None:
        """Remove an object. Removing a missing object is not an error."""
        pass

    @abstractmethod
    async def object_exists(self, bucket_name: str, object_key: str) -> bool:
        """Return False for a missing object; raise on any other failure."""
        pass

    @abstractmethod
    async def create_bucket_if_absent(self, bucket_name: str) -> None:
        """Create the bucket unless it already exists."""
        pass

    @abstractmethod
    async def set_bucket_policy(self, bucket_name: str, policy: str) -> None:
        """Replace the bucket's access policy with the given JSON document."""
        pass

    @abstractmethod
    async def put_object(
        self, bucket_name: str, object_key: str, data: bytes, content_type: str
    ) -> None:
        """Upload bytes directly (non-presigned path)."""
        pass

    @abstractmethod
    async def get_object(self, bucket_name: str, object_key: str) -> bytes:
        """Download bytes directly (non-presigned path). Raises ObjectNotFound."""
        pass
