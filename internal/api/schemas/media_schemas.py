"""
Media API schemas (request/response models).
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.entities import (
    Bucket,
    BucketVisibility,
    DownloadRequest,
    DownloadResult,
    UploadPolicyRequest,
    UploadPolicyResult,
)


class CreateBucketRequest(BaseModel):
    """Request to create a bucket."""

    bucket_name: str = Field(..., min_length=3, max_length=63, description="Bucket name")
    is_public: bool = Field(
        default=False, description="Grant anonymous read on all objects"
    )

    def to_entity(self) -> Bucket:
        visibility = BucketVisibility.PUBLIC_READ if self.is_public else BucketVisibility.PRIVATE
        return Bucket(name=self.bucket_name, visibility=visibility)


class SuccessData(BaseModel):
    success: bool


class PresignUploadRequest(BaseModel):
    """Request for a presigned POST upload policy."""

    bucket_name: str = Field(..., min_length=1, description="Target bucket")
    content_type: str = Field(..., min_length=1, description="MIME type of the file")
    max_file_size: int = Field(
        ..., gt=0, description="Maximum upload size in bytes, enforced by the store"
    )
    path: Optional[str] = Field(default=None, description="Optional key prefix")
    file_name: Optional[str] = Field(
        default=None, description="Optional explicit object name; generated when omitted"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "bucket_name": "mediatest",
                    "content_type": "image/jpeg",
                    "max_file_size": 5242880,
                    "path": "users/avatars",
                    "file_name": "avatar.jpg",
                }
            ]
        }
    )

    def to_entity(self) -> UploadPolicyRequest:
        return UploadPolicyRequest(
            bucket_name=self.bucket_name,
            content_type=self.content_type,
            max_file_size=self.max_file_size,
            path=self.path,
            file_name=self.file_name,
        )


class PresignUploadData(BaseModel):
    """Presigned POST policy. Submit form_data fields, in order, then the file."""

    presigned_url: str
    object_key: str
    expires_in: int
    form_data: Dict[str, str]

    @classmethod
    def from_entity(cls, result: UploadPolicyResult) -> "PresignUploadData":
        return cls(
            presigned_url=result.presigned_url,
            object_key=result.object_key,
            expires_in=result.expires_in,
            form_data=dict(result.form_data),
        )


class PresignDownloadRequest(BaseModel):
    """Request for a presigned download URL."""

    bucket_name: str = Field(..., min_length=1, description="Bucket holding the object")
    object_key: str = Field(..., min_length=1, description="Key of an existing object")

    def to_entity(self) -> DownloadRequest:
        return DownloadRequest(bucket_name=self.bucket_name, object_key=self.object_key)


class PresignDownloadData(BaseModel):
    presigned_url: str
    expires_in: int

    @classmethod
    def from_entity(cls, result: DownloadResult) -> "PresignDownloadData":
        return cls(presigned_url=result.presigned_url, expires_in=result.expires_in)


class PingData(BaseModel):
    message: str
