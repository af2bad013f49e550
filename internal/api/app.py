"""
FastAPI application factory for the Mediabase API.
- Routes are separated into modules
- Storage backend is selected from settings and injected into MediaService
- Domain exceptions are mapped to the standard response format
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import Settings, get_settings
from core.container import bootstrap_container
from core.logger import logger
from domain.entities import Bucket, BucketVisibility
from internal.api.exception_handlers import register_exception_handlers
from internal.api.routes import create_health_routes, create_media_routes
from ports.storage import StoragePort
from services.media_service import MediaService


async def provision_buckets(media_service: MediaService, settings: Settings) -> None:
    """Create the buckets listed in BOOTSTRAP_BUCKETS."""
    for name, is_public in settings.bootstrap_buckets_list:
        visibility = BucketVisibility.PUBLIC_READ if is_public else BucketVisibility.PRIVATE
        logger.info(f"Provisioning bucket: {name} ({visibility.value})")
        await media_service.create_bucket(Bucket(name=name, visibility=visibility))


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[StoragePort] = None,
) -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to cached environment settings)
        storage: Pre-built storage port, bypassing STORAGE_BACKEND

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()
    logger.info("Creating FastAPI application...")

    media_service = bootstrap_container(settings, storage)
    logger.info("DI Container initialized")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan - startup and shutdown."""
        logger.info(
            f"========== Starting {settings.app_name} v{settings.app_version} API service =========="
        )
        logger.info(f"Environment: {settings.environment}")
        logger.info(f"API: {settings.api_host}:{settings.api_port}{settings.api_prefix}")
        logger.info(f"Storage backend: {settings.storage_backend}")

        try:
            await provision_buckets(media_service, settings)
        except Exception as e:
            logger.error(f"Failed to provision buckets: {e}")
            logger.exception("Bucket provisioning error details:")
            raise

        logger.info(
            f"========== {settings.app_name} API service started successfully =========="
        )

        yield

        logger.info("========== API service stopped ==========")

    description = """
## Mediabase API

Issues presigned upload policies and download URLs so clients transfer files
directly to and from S3-compatible object storage.

### Processing Flow

1. **Bucket** - Create a bucket via `POST /mediabase/v1/buckets`
2. **Upload** - Request a policy via `POST /mediabase/v1/presign/upload`, then POST the
   returned form fields plus the file directly to `presigned_url`
3. **Download** - Request a URL via `POST /mediabase/v1/presign/download`
    """

    tags_metadata = [
        {
            "name": "Media",
            "description": "Bucket management and presigned upload/download issuance.",
        },
        {
            "name": "Health",
            "description": "Health check endpoints for monitoring API status.",
        },
    ]

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=description,
        lifespan=lifespan,
        openapi_tags=tags_metadata,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )
    app.state.settings = settings
    app.state.media_service = media_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_origins_list != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.debug("CORS middleware added")

    register_exception_handlers(app)

    app.include_router(create_media_routes(settings.api_prefix))
    logger.info("Media routes registered")

    app.include_router(create_health_routes(settings))
    logger.info("Health routes registered")

    logger.info("FastAPI application created successfully")
    return app
