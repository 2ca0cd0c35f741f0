"""
Contract: Image Repository

Transactional store for image metadata rows. Returns detached domain
entities; callers re-read before acting and never hold rows across calls.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from upload_broker.core.entities.image import Image, ImageStatus


class RepositoryError(Exception):
    """The underlying store failed (connection, constraint, ...)."""


class IImageRepository(ABC):
    """
    Port: Image Repository

    Implementations raise RepositoryError for any store failure.
    """

    @abstractmethod
    def add(self, image: Image) -> Image:
        """Insert a new row. The object key must be unique."""
        ...

    @abstractmethod
    def get(self, image_id: str, status: ImageStatus | None = None) -> Image | None:
        """Fetch by id, optionally requiring a status."""
        ...

    @abstractmethod
    def get_by_id_and_key(self, image_id: str, object_key: str) -> Image | None:
        """Fetch by id and object key together."""
        ...

    @abstractmethod
    def list_by_status(
        self,
        status: ImageStatus,
        limit: int,
        created_before: datetime | None = None,
    ) -> list[Image]:
        """
        Newest first, at most `limit` rows.

        Args:
            status: Only rows in this status.
            limit: Row cap.
            created_before: If set, only rows created strictly before it.
        """
        ...

    @abstractmethod
    def find_many(self, image_ids: Sequence[str], status: ImageStatus) -> list[Image]:
        """Fetch every row among `image_ids` that is in `status`."""
        ...

    @abstractmethod
    def transition(
        self,
        image_id: str,
        expected: ImageStatus,
        new_status: ImageStatus,
        uploaded_at: datetime | None = None,
        etag: str | None = None,
    ) -> bool:
        """
        Atomically move a row from `expected` to `new_status`.

        Returns:
            True if the row was in `expected` and was updated, False if
            it was missing or already moved on.
        """
        ...
