"""
Dependency Injection Container.
"""

from typing import Any, Callable, Dict, Optional, Type, TypeVar

from core.config import Settings, get_settings
from core.logger import logger
from ports.storage import StoragePort
from services.media_service import MediaService

T = TypeVar("T")


class Container:
    """
    Simple Dependency Injection Container.
    """

    _instances: Dict[Type, Any] = {}
    _providers: Dict[Type, Callable[[], Any]] = {}

    @classmethod
    def register(cls, interface: Type[T], instance: Any) -> None:
        """Register a singleton instance for an interface."""
        cls._instances[interface] = instance

    @classmethod
    def register_factory(cls, interface: Type[T], factory: Callable[[], T]) -> None:
        """Register a factory for an interface."""
        cls._providers[interface] = factory

    @classmethod
    def resolve(cls, interface: Type[T]) -> T:
        """Resolve an interface to its implementation."""
        if interface in cls._instances:
            return cls._instances[interface]
        if interface in cls._providers:
            return cls._providers[interface]()
        raise KeyError(f"No provider registered for {interface.__name__}")

    @classmethod
    def is_registered(cls, interface: Type) -> bool:
        return interface in cls._instances or interface in cls._providers

    @classmethod
    def clear(cls):
        """Clear all registrations (useful for testing)."""
        cls._instances.clear()
        cls._providers.clear()


def build_storage(settings: Settings) -> StoragePort:
    """
    Create the storage adapter selected by STORAGE_BACKEND.

    Adapters are imported lazily so a deployment only needs the SDK it uses.
    """
    backend = settings.storage_backend.lower()

    if backend == "minio":
        from adapters.minio.storage import MinioStorageAdapter

        return MinioStorageAdapter.from_settings(settings)

    if backend == "s3":
        from adapters.s3.storage import S3StorageAdapter

        return S3StorageAdapter.from_settings(settings)

    if backend == "memory":
        from adapters.memory.storage import InMemoryStorageAdapter

        return InMemoryStorageAdapter()

    raise ValueError(f"Unsupported storage backend: {settings.storage_backend}")


def bootstrap_container(
    settings: Optional[Settings] = None,
    storage: Optional[StoragePort] = None,
) -> MediaService:
    """
    Initialize the dependency injection container.
    Register all dependencies here.

    Args:
        settings: Settings to build from (defaults to cached settings)
        storage: Pre-built storage port, bypassing STORAGE_BACKEND

    Returns:
        The registered MediaService
    """
    settings = settings or get_settings()

    missing = settings.validate_required_fields()
    if missing:
        raise ValueError(f"Missing or invalid configuration: {', '.join(missing)}")

    if storage is None:
        storage = build_storage(settings)
        logger.info(f"Storage backend selected: {settings.storage_backend}")

    media_service = MediaService(storage=storage, config=settings.to_media_config())

    Container.register(StoragePort, storage)
    Container.register(MediaService, media_service)
    return media_service
