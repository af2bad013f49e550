from .storage import S3StorageAdapter

__all__ = ["S3StorageAdapter"]
