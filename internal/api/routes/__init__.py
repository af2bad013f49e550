"""
API Routes.
"""

from .health_routes import create_health_routes
from .media_routes import create_media_routes

__all__ = [
    "create_health_routes",
    "create_media_routes",
]
