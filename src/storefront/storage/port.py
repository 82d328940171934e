"""Object storage port (abstract interface).

Uploaded assets (product images, brand logos, profile pictures, blog images)
are stored under folder-prefixed keys and addressed by their public URL.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class StoragePort(ABC):
    """Abstract object storage interface."""

    @abstractmethod
    def upload(self, data: bytes, content_type: str, folder: str, filename: str) -> str:
        """Store ``data`` under ``folder`` and return its public URL."""
        ...

    @abstractmethod
    def delete(self, url: str) -> None:
        """Remove the object addressed by ``url``."""
        ...


@dataclass(frozen=True)
class UploadedFile:
    """A file received from a client, ready to be stored."""

    data: bytes
    content_type: str
    filename: str
