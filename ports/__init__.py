"""
Ports (abstract interfaces) implemented by adapters.
"""

from .storage import StoragePort

__all__ = ["StoragePort"]
