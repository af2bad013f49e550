"""
Request gates applied before any storage call.
"""

from typing import Iterable


def is_allowed_content_type(content_type: str, allowed_content_types: Iterable[str]) -> bool:
    """Exact match against the allow-list. No wildcards, no MIME parameters."""
    return content_type in allowed_content_types


def is_within_size_limit(requested_max_size: int, server_max_size: int) -> bool:
    """The requested limit may be tighter than the server ceiling, never looser."""
    return requested_max_size <= server_max_size
