"""In-memory object storage for development and testing."""

import time

from storefront.shared.exceptions import StorageError
from storefront.storage.port import StoragePort


class FakeStorage(StoragePort):
    """Keeps uploaded objects in a dict keyed by URL."""

    base_url = "https://fake-storage.local"

    def __init__(self) -> None:
        self.objects: dict[str, dict] = {}
        self.deleted: list[str] = []
        self.should_succeed = True

    def configure(self, should_succeed: bool) -> None:
        self.should_succeed = should_succeed

    def upload(self, data: bytes, content_type: str, folder: str, filename: str) -> str:
        if not self.should_succeed:
            raise StorageError("Error uploading file to storage")
        key = f"{folder}/{time.time_ns()}-{filename}"
        url = f"{self.base_url}/{key}"
        self.objects[url] = {"key": key, "content_type": content_type, "data": data}
        return url

    def delete(self, url: str) -> None:
        if not self.should_succeed:
            raise StorageError("Error deleting file from storage")
        self.objects.pop(url, None)
        self.deleted.append(url)

    def reset(self) -> None:
        self.objects.clear()
        self.deleted.clear()
        self.should_succeed = True
