from .storage import InMemoryStorageAdapter

__all__ = ["InMemoryStorageAdapter"]
