"""
Configuration management using Pydantic Settings.
Follows Single Responsibility Principle - only handles configuration.
"""

from functools import lru_cache
from typing import List, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.entities import MediaConfig


SUPPORTED_STORAGE_BACKENDS = ("minio", "s3", "memory")


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Mediabase", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=True, alias="DEBUG")

    # API Service
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8085, alias="API_PORT")
    api_reload: bool = Field(default=False, alias="API_RELOAD")
    api_workers: int = Field(default=1, alias="API_WORKERS")
    api_prefix: str = Field(default="/mediabase/v1", alias="API_PREFIX")
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    # Object Storage
    storage_backend: str = Field(default="minio", alias="STORAGE_BACKEND")
    storage_endpoint: str = Field(default="localhost:9000", alias="STORAGE_ENDPOINT")
    storage_access_key: str = Field(default="minioadmin", alias="STORAGE_ACCESS_KEY")
    storage_secret_key: str = Field(default="minioadmin", alias="STORAGE_SECRET_KEY")
    storage_region: str = Field(default="us-east-1", alias="STORAGE_REGION")
    storage_use_ssl: bool = Field(default=False, alias="STORAGE_USE_SSL")
    storage_max_pool_size: int = Field(default=10, alias="STORAGE_MAX_POOL_SIZE")
    backend_timeout_seconds: float = Field(
        default=10.0, alias="BACKEND_TIMEOUT_SECONDS"
    )  # Upper bound for any single backend call

    # Upload Policy
    max_file_size: int = Field(
        default=10 * 1024 * 1024, alias="MAX_FILE_SIZE"
    )  # Hard ceiling in bytes
    allowed_content_types: str = Field(
        default="image/jpeg,image/png,image/webp", alias="ALLOWED_CONTENT_TYPES"
    )
    reject_unsafe_keys: bool = Field(default=True, alias="REJECT_UNSAFE_KEYS")
    bootstrap_buckets: str = Field(default="", alias="BOOTSTRAP_BUCKETS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", alias="LOG_DIR")
    log_to_file: bool = Field(default=True, alias="LOG_TO_FILE")

    @property
    def allowed_content_types_list(self) -> List[str]:
        """Parse comma-separated content types into a list."""
        return _split_csv(self.allowed_content_types)

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins.strip() == "*":
            return ["*"]
        return _split_csv(self.cors_origins)

    @property
    def bootstrap_buckets_list(self) -> List[Tuple[str, bool]]:
        """
        Parse BOOTSTRAP_BUCKETS into (bucket_name, is_public) pairs.

        Entries are either ``name`` or ``name:public``.
        """
        buckets = []
        for entry in _split_csv(self.bootstrap_buckets):
            name, _, visibility = entry.partition(":")
            buckets.append((name.strip(), visibility.strip().lower() == "public"))
        return buckets

    @property
    def storage_endpoint_url(self) -> str:
        """Endpoint with scheme, as expected by boto3 and by browser clients."""
        endpoint = self.storage_endpoint.strip().rstrip("/")
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        scheme = "https" if self.storage_use_ssl else "http"
        return f"{scheme}://{endpoint}"

    def to_media_config(self) -> MediaConfig:
        """Build the immutable policy configuration handed to MediaService."""
        return MediaConfig(
            max_file_size=self.max_file_size,
            allowed_content_types=frozenset(self.allowed_content_types_list),
            reject_unsafe_keys=self.reject_unsafe_keys,
        )

    def validate_required_fields(self) -> List[str]:
        """
        Validate that required fields are set for the selected storage backend.

        Returns list of missing or invalid settings.
        """
        missing = []

        backend = self.storage_backend.lower()
        if backend not in SUPPORTED_STORAGE_BACKENDS:
            missing.append(
                f"STORAGE_BACKEND (got {self.storage_backend!r}, "
                f"expected one of {', '.join(SUPPORTED_STORAGE_BACKENDS)})"
            )
            return missing

        if self.max_file_size <= 0:
            missing.append("MAX_FILE_SIZE")
        if not self.allowed_content_types_list:
            missing.append("ALLOWED_CONTENT_TYPES")

        # In-memory backend holds no credentials
        if backend == "memory":
            return missing

        if backend == "minio" and not self.storage_endpoint:
            missing.append("STORAGE_ENDPOINT")
        if not self.storage_access_key:
            missing.append("STORAGE_ACCESS_KEY")
        if not self.storage_secret_key:
            missing.append("STORAGE_SECRET_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Using lru_cache to ensure single instance (Singleton pattern).
    """
    return Settings()
