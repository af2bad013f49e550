from .storage import MinioStorageAdapter

__all__ = ["MinioStorageAdapter"]
