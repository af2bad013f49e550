"""
Dependencies for media endpoints.
"""

from core.container import Container
from services.media_service import MediaService


def get_media_service() -> MediaService:
    """Resolve the MediaService registered at start-up."""
    return Container.resolve(MediaService)
