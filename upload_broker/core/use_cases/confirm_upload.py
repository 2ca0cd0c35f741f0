"""
Use Case: Confirm Upload

The client reports that its PUT finished. The object is checked in the
store and the image is promoted to `uploaded`, or marked `failed` if the
check does not succeed. Accepted exactly once per image.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from upload_broker.core.clock import utcnow
from upload_broker.core.entities.image import ImageStatus
from upload_broker.core.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    ObjectStoreUnavailableError,
)
from upload_broker.core.interfaces.image_repository import IImageRepository, RepositoryError
from upload_broker.core.interfaces.storage_service import IStorageService, StorageError

logger = logging.getLogger(__name__)


class ConfirmUploadUseCase:
    """
    Use Case: (id, object key) → `uploaded` | `failed`.

    The status change is a compare-and-set on `requested`, so of two
    concurrent confirmations exactly one wins and the other gets Conflict.
    """

    def __init__(
        self,
        repository: IImageRepository,
        storage: IStorageService | None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._repo = repository
        self._storage = storage
        self._clock = clock

    def execute(self, image_id: str, object_key: str) -> None:
        try:
            image = self._repo.get_by_id_and_key(image_id, object_key)
        except RepositoryError as e:
            raise InternalError("Database error") from e

        if image is None:
            raise NotFoundError("Image not found")
        if image.status != ImageStatus.REQUESTED:
            raise ConflictError("Image already processed")
        if self._storage is None:
            raise ObjectStoreUnavailableError()

        try:
            info = self._storage.head_object(image.object_key)
        except StorageError as e:
            # Missing object and store outage end the same way: failed + NotFound
            logger.warning(f"Confirm failed for image {image.id}: {e}")
            self._transition(image.id, ImageStatus.FAILED)
            raise NotFoundError("Object not found in storage") from e

        self._transition(
            image.id,
            ImageStatus.UPLOADED,
            uploaded_at=self._clock(),
            etag=info.etag,
        )
        logger.info(f"Upload confirmed: image={image.id} etag={info.etag}")

    def _transition(self, image_id: str, new_status: ImageStatus, **values) -> None:
        try:
            changed = self._repo.transition(image_id, ImageStatus.REQUESTED, new_status, **values)
        except RepositoryError as e:
            raise InternalError("Failed to update image status") from e
        if not changed:
            raise ConflictError("Image already processed")
