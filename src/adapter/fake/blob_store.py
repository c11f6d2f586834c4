"""In-memory implementation of BlobStorePort for testing."""

from typing import BinaryIO

from domain.model.errors import UploadError


class FakeBlobStore:
    def __init__(self, base_url: str = 'https://blobs.example.test'):
        self.base_url = base_url
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str | None] = {}
        self.fail_with: str | None = None

    def store(self, stream: BinaryIO, key: str, content_type: str | None = None) -> str:
        if self.fail_with is not None:
            raise UploadError(self.fail_with)
        self.objects[key] = stream.read()
        self.content_types[key] = content_type
        return f"{self.base_url}/{key}"

    def ping(self) -> bool:
        return self.fail_with is None
