"""Upload service — passes client files through to the blob store."""

import logging
import time
from dataclasses import dataclass, field
from typing import BinaryIO

from domain.model.errors import FileTooLargeError, NoFileError, UnsupportedFileTypeError
from port.blob_store import BlobStorePort

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = 'medilocker'


@dataclass(frozen=True)
class UploadPolicy:
    """Limits applied before a file reaches the blob store.

    An empty allowed_types accepts any content type.
    """
    prefix: str = DEFAULT_PREFIX
    max_bytes: int | None = None
    allowed_types: tuple[str, ...] = field(default_factory=tuple)


def build_key(original_name: str, prefix: str = DEFAULT_PREFIX, now_ms: int | None = None) -> str:
    """Storage key ``<prefix>/<epoch ms>_<original name>``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{prefix}/{now_ms}_{original_name}"


def _check_policy(policy: UploadPolicy, content_type: str | None, size: int | None) -> None:
    if policy.max_bytes is not None and size is not None and size > policy.max_bytes:
        raise FileTooLargeError(f"File exceeds the {policy.max_bytes} byte limit")
    if policy.allowed_types:
        base_type = (content_type or '').split(';', 1)[0].strip().lower()
        if base_type not in policy.allowed_types:
            raise UnsupportedFileTypeError(f"File type not allowed: {content_type or 'unknown'}")


def upload(
    store: BlobStorePort,
    stream: BinaryIO | None,
    original_name: str | None,
    content_type: str | None = None,
    size: int | None = None,
    policy: UploadPolicy | None = None,
) -> str:
    """Store one file and return its URL.

    Raises:
        NoFileError: no file was sent
        FileTooLargeError / UnsupportedFileTypeError: policy rejected the file
        UploadError: blob store failure, message passed through verbatim
    """
    if stream is None or not original_name:
        raise NoFileError()

    policy = policy or UploadPolicy()
    _check_policy(policy, content_type, size)

    key = build_key(original_name, prefix=policy.prefix)
    url = store.store(stream, key, content_type=content_type)
    logger.info("File uploaded", extra={"key": key, "size": size})
    return url
