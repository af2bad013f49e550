"""
API dependencies.
"""

from .media_dependencies import get_media_service

__all__ = ["get_media_service"]
