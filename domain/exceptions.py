"""Custom exception hierarchy for the media brokering layer."""

from __future__ import annotations


class MediabaseError(Exception):
    """Base exception for all Mediabase-specific errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(MediabaseError):
    """Base class for request validation errors. Raised before any backend call."""
    pass


class InvalidContentType(ValidationError):
    """Raised when the requested content type is not in the allow-list."""
    pass


class SizeExceeded(ValidationError):
    """Raised when the requested max size is above the server ceiling."""
    pass


class InvalidObjectKey(ValidationError):
    """Raised when a derived object key contains unsafe segments."""
    pass


class ObjectNotFound(MediabaseError):
    """Raised when an object does not exist in the bucket."""
    pass


class BackendUnavailable(MediabaseError):
    """Raised when a storage backend call fails (network, auth, signing, timeout)."""

    def __init__(
        self,
        message: str,
        operation: str,
        bucket: str | None = None,
        key: str | None = None,
        details: dict[str, str] | None = None,
    ) -> None:
        context = {"operation": operation}
        if bucket is not None:
            context["bucket"] = bucket
        if key is not None:
            context["key"] = key
        context.update(details or {})
        super().__init__(message, context)
        self.operation = operation
        self.bucket = bucket
        self.key = key


class PolicyApplicationFailed(BackendUnavailable):
    """
    Raised when a bucket was created but its public policy could not be set.

    The bucket exists; its visibility is indeterminate. Retry the policy step,
    not the bucket creation.
    """
    pass
