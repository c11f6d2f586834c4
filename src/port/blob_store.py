"""Port definition for object storage."""

from typing import BinaryIO, Protocol


class BlobStorePort(Protocol):
    def store(self, stream: BinaryIO, key: str, content_type: str | None = None) -> str:
        """Persist the stream under key and return its URL. Raise UploadError on failure."""
        ...

    def ping(self) -> bool: ...
