"""
Service layer implementing business logic.
Follows Service Layer Pattern and Single Responsibility Principle.
"""

from .media_service import MediaService

__all__ = [
    "MediaService",
]
