"""
Common API schemas shared across different endpoints.
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional, Any


class StandardResponse(BaseModel):
    """
    Standard API response format for all endpoints.

    - error_code: 0 = success, 1 = error
    - message: Success or error message
    - data: Response data (optional, only present on success)
    """

    error_code: int = 0
    message: str
    data: Optional[Any] = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "error_code": 0,
                    "message": "Success",
                    "data": {"success": True},
                },
                {"error_code": 1, "message": "invalid content type: text/plain", "data": None},
            ]
        }
    )


class HealthResponse(BaseModel):
    """Response model for health check (internal use)."""

    status: str
    service: str
    version: str
    storage_backend: str

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "status": "healthy",
                    "service": "Mediabase",
                    "version": "1.0.0",
                    "storage_backend": "minio",
                }
            ]
        }
    )
