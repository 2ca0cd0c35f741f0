"""
Contract: Storage Service

Issues presigned URLs against an object store (S3/MinIO) and reports
whether an object exists. Clients move the bytes themselves; the broker
never reads or writes object content.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class StorageError(Exception):
    """The object store call failed."""


class ObjectNotFoundError(StorageError):
    """The object does not exist in the bucket."""

    def __init__(self, key: str):
        super().__init__(f"Object not found: {key}")
        self.key = key


@dataclass(frozen=True)
class ObjectInfo:
    """Metadata reported by a HEAD on a stored object."""
    key: str
    etag: str | None = None
    size_bytes: int | None = None
    content_type: str | None = None


class IStorageService(ABC):
    """
    Port: Storage Service

    Every call is a fresh remote call. Signatures are never cached and
    failures are never retried here.
    """

    @abstractmethod
    def presign_put(self, key: str, content_type: str, expires_seconds: int) -> str:
        """
        Generate a URL allowing one PUT of `key` with `content_type`.

        Args:
            key: Object key in the bucket.
            content_type: MIME type the client must send.
            expires_seconds: Validity of the URL.

        Returns:
            Presigned URL.

        Raises:
            StorageError: If the URL cannot be generated.
        """
        ...

    @abstractmethod
    def presign_get(self, key: str, expires_seconds: int) -> str:
        """
        Generate a URL allowing GET of `key`.

        Raises:
            StorageError: If the URL cannot be generated.
        """
        ...

    @abstractmethod
    def head_object(self, key: str) -> ObjectInfo:
        """
        Fetch object metadata.

        Raises:
            ObjectNotFoundError: If there is no object at `key`.
            StorageError: For any other failure.
        """
        ...
