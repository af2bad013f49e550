"""
Domain entities for the media brokering layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional


class BucketVisibility(str, Enum):
    """Bucket visibility enumeration."""

    PRIVATE = "private"
    PUBLIC_READ = "public-read"


@dataclass(frozen=True)
class MediaConfig:
    """Immutable policy configuration, built once at start-up."""

    max_file_size: int
    allowed_content_types: FrozenSet[str]
    reject_unsafe_keys: bool = True


@dataclass(frozen=True)
class Bucket:
    """Bucket entity."""

    name: str
    visibility: BucketVisibility = BucketVisibility.PRIVATE

    @property
    def is_public(self) -> bool:
        return self.visibility is BucketVisibility.PUBLIC_READ


@dataclass(frozen=True)
class UploadPolicyRequest:
    """Request for a presigned upload policy."""

    bucket_name: str
    content_type: str
    max_file_size: int
    path: Optional[str] = None
    file_name: Optional[str] = None


@dataclass(frozen=True)
class UploadPolicyResult:
    """Presigned POST policy issued for a single upload."""

    presigned_url: str
    object_key: str
    expires_in: int
    # Ordered: submitted verbatim, in this order, ahead of the file part
    form_data: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DownloadRequest:
    """Request for a presigned download URL."""

    bucket_name: str
    object_key: str


@dataclass(frozen=True)
class DownloadResult:
    """Presigned GET URL for an existing object."""

    presigned_url: str
    expires_in: int
