"""
Media API Routes.
Bucket management and presigned upload/download issuance.
"""

from fastapi import APIRouter, Depends, Query, status

from core.logger import logger
from internal.api.dependencies import get_media_service
from internal.api.schemas import (
    CreateBucketRequest,
    PingData,
    PresignDownloadData,
    PresignDownloadRequest,
    PresignUploadData,
    PresignUploadRequest,
    StandardResponse,
    SuccessData,
)
from internal.api.utils import success_response
from services.media_service import MediaService

ERROR_RESPONSES = {
    400: {"description": "Invalid content type, size above the server limit, or unsafe key"},
    422: {"description": "Malformed request body"},
    503: {"description": "Storage backend unavailable"},
}


def create_media_routes(prefix: str = "/mediabase/v1") -> APIRouter:
    """
    Factory function to create media routes.

    Args:
        prefix: URL prefix for every media endpoint

    Returns:
        APIRouter: Configured router with media endpoints
    """
    router = APIRouter(prefix=prefix, tags=["Media"])

    @router.get(
        "/ping",
        response_model=StandardResponse,
        summary="Ping",
        operation_id="ping",
    )
    async def ping(
        message: str = Query(default="", description="Echoed into the debug log"),
        media_service: MediaService = Depends(get_media_service),
    ):
        reply = await media_service.ping(message)
        return success_response(data=PingData(message=reply).model_dump())

    @router.post(
        "/buckets",
        response_model=StandardResponse,
        status_code=status.HTTP_200_OK,
        summary="Create Bucket",
        description="Create a bucket if it does not exist, optionally with anonymous read access.",
        operation_id="create_bucket",
        responses={
            **ERROR_RESPONSES,
            502: {"description": "Bucket created but the public read policy was not applied"},
        },
    )
    async def create_bucket(
        request: CreateBucketRequest,
        media_service: MediaService = Depends(get_media_service),
    ):
        """
        Create a bucket.

        **Parameters:**
        - **bucket_name**: Bucket to create (no error if it exists)
        - **is_public**: Apply a read-only public policy to all objects

        **Note:**
        Visibility is set at creation time. A 502 means the bucket exists but
        the policy step failed; repeat the request to retry it.
        """
        success = await media_service.create_bucket(request.to_entity())
        return success_response(
            message="Bucket ready", data=SuccessData(success=success).model_dump()
        )

    @router.post(
        "/presign/upload",
        response_model=StandardResponse,
        summary="Presign Upload",
        description="Issue a presigned POST policy for a direct upload to storage.",
        operation_id="presign_upload",
        responses={
            200: {
                "description": "Policy issued",
                "content": {
                    "application/json": {
                        "example": {
                            "error_code": 0,
                            "message": "Presigned upload issued",
                            "data": {
                                "presigned_url": "http://localhost:9000/mediatest",
                                "object_key": "users/avatars/avatar.jpg",
                                "expires_in": 60,
                                "form_data": {
                                    "bucket": "mediatest",
                                    "key": "users/avatars/avatar.jpg",
                                    "Content-Type": "image/jpeg",
                                    "x-amz-algorithm": "AWS4-HMAC-SHA256",
                                    "x-amz-credential": "minioadmin/20250101/us-east-1/s3/aws4_request",
                                    "x-amz-date": "20250101T000000Z",
                                    "policy": "eyJleHBpcmF0aW9uIjo...",
                                    "x-amz-signature": "5d1f...",
                                },
                            },
                        }
                    }
                },
            },
            **ERROR_RESPONSES,
        },
    )
    async def presign_upload(
        request: PresignUploadRequest,
        media_service: MediaService = Depends(get_media_service),
    ):
        """
        Issue a presigned upload policy.

        **Usage:**
        POST a multipart form to `presigned_url` with every `form_data` field,
        in order, followed by the `file` field. The store rejects bodies above
        `max_file_size` or with a different content type.
        """
        result = await media_service.presign_upload(request.to_entity())
        logger.info(
            f"API: Presigned upload issued: bucket={request.bucket_name}, key={result.object_key}"
        )
        return success_response(
            message="Presigned upload issued",
            data=PresignUploadData.from_entity(result).model_dump(),
        )

    @router.post(
        "/presign/download",
        response_model=StandardResponse,
        summary="Presign Download",
        description="Issue a presigned GET URL for an existing object.",
        operation_id="presign_download",
        responses={
            404: {"description": "Object not found"},
            **ERROR_RESPONSES,
        },
    )
    async def presign_download(
        request: PresignDownloadRequest,
        media_service: MediaService = Depends(get_media_service),
    ):
        result = await media_service.presign_download(request.to_entity())
        return success_response(
            message="Presigned download issued",
            data=PresignDownloadData.from_entity(result).model_dump(),
        )

    @router.delete(
        "/buckets/{bucket_name}/objects/{object_key:path}",
        response_model=StandardResponse,
        summary="Delete Object",
        operation_id="delete_object",
        responses={503: ERROR_RESPONSES[503]},
    )
    async def delete_object(
        bucket_name: str,
        object_key: str,
        media_service: MediaService = Depends(get_media_service),
    ):
        success = await media_service.delete_object(bucket_name, object_key)
        return success_response(
            message="Object deleted", data=SuccessData(success=success).model_dump()
        )

    return router
