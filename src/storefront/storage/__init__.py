"""Object storage factory.

Provides get_storage() / set_storage() to swap implementations:
- FakeStorage for development and testing
- S3Storage for production
"""

from storefront.shared.config import Settings
from storefront.storage.fake_adapter import FakeStorage
from storefront.storage.port import StoragePort

_current_storage: StoragePort | None = None


def get_storage() -> StoragePort:
    """Return the current storage adapter. Defaults to FakeStorage."""
    global _current_storage
    if _current_storage is None:
        _current_storage = FakeStorage()
    return _current_storage


def set_storage(storage: StoragePort) -> None:
    """Override the active storage adapter (useful for tests)."""
    global _current_storage
    _current_storage = storage


def reset_storage() -> None:
    """Reset to default storage."""
    global _current_storage
    _current_storage = None


def configure_storage(settings: Settings) -> StoragePort:
    """Install the adapter selected by ``settings.storage_backend``."""
    if settings.storage_backend == "s3":
        from storefront.storage.s3_adapter import S3Storage

        if not settings.aws_bucket_name:
            raise ValueError("STOREFRONT_AWS_BUCKET_NAME is required for the s3 storage backend")
        storage = S3Storage(
            bucket=settings.aws_bucket_name,
            region_name=settings.aws_region,
            endpoint_url=settings.aws_endpoint_url,
        )
    elif settings.storage_backend == "fake":
        storage = FakeStorage()
    else:
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
    set_storage(storage)
    return storage
