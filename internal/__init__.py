"""
Internal package.
Contains the HTTP API: routes, schemas, dependencies and error mapping.
"""

from . import api

__all__ = [
    "api",
]
