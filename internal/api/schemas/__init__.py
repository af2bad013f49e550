"""
API Schemas (Request/Response Models).
"""

from .common_schemas import (
    StandardResponse,
    HealthResponse,
)
from .media_schemas import (
    CreateBucketRequest,
    PingData,
    PresignDownloadData,
    PresignDownloadRequest,
    PresignUploadData,
    PresignUploadRequest,
    SuccessData,
)

__all__ = [
    # Common schemas
    "StandardResponse",
    "HealthResponse",
    # Media schemas
    "CreateBucketRequest",
    "PingData",
    "PresignDownloadData",
    "PresignDownloadRequest",
    "PresignUploadData",
    "PresignUploadRequest",
    "SuccessData",
]
