"""FastAPI exception handlers for domain exceptions."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from core.logger import logger
from domain.exceptions import (
    BackendUnavailable,
    MediabaseError,
    ObjectNotFound,
    PolicyApplicationFailed,
    ValidationError,
)
from internal.api.utils import error_response


def status_code_for(exc: MediabaseError) -> int:
    """Map exception types to HTTP status codes."""
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, ObjectNotFound):
        return status.HTTP_404_NOT_FOUND
    # Checked before BackendUnavailable, its base class
    if isinstance(exc, PolicyApplicationFailed):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, BackendUnavailable):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def mediabase_exception_handler(request: Request, exc: MediabaseError) -> JSONResponse:
    """Handle Mediabase-specific exceptions."""
    status_code = status_code_for(exc)

    if status_code >= 500:
        logger.error(
            f"{type(exc).__name__} on {request.method} {request.url.path}: "
            f"{exc.message} {exc.details}"
        )
    else:
        logger.warning(
            f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}"
        )

    return JSONResponse(
        status_code=status_code,
        content=error_response(
            message=exc.message,
            data={"error": type(exc).__name__, "details": exc.details},
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all so unexpected failures keep the standard response shape."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    logger.exception("Unhandled error details:")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(message="Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MediabaseError, mediabase_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
