"""
Health Check API Routes.
"""

from fastapi import APIRouter

from core.config import Settings
from internal.api.schemas import HealthResponse
from internal.api.schemas.common_schemas import StandardResponse
from internal.api.utils import success_response


def create_health_routes(settings: Settings) -> APIRouter:
    """
    Factory function to create health routes.

    Args:
        settings: Application settings reported by the endpoints

    Returns:
        APIRouter: Configured router with health endpoints
    """
    router = APIRouter(tags=["Health"])

    @router.get(
        "/",
        response_model=StandardResponse,
        summary="Root Endpoint",
        description="Get basic API information",
        operation_id="get_root",
    )
    async def root():
        """
        Root endpoint.

        Returns service name, version, and current status.
        """
        return success_response(
            message="API service is running",
            data={
                "service": settings.app_name,
                "version": settings.app_version,
                "status": "running",
            },
        )

    @router.get(
        "/health",
        response_model=StandardResponse,
        summary="Health Check",
        description="Check service health",
        operation_id="health_check",
    )
    async def health_check():
        health_data = HealthResponse(
            status="healthy",
            service=settings.app_name,
            version=settings.app_version,
            storage_backend=settings.storage_backend,
        )

        return success_response(message="Service is healthy", data=health_data.model_dump())

    return router
