"""
Use Case: Request Upload

Validates the declared file, records a `requested` image and hands back a
presigned PUT URL so the client can upload straight to the object store.
"""

import logging
import uuid
from collections.abc import Callable, Collection
from dataclasses import dataclass, field
from datetime import datetime

from upload_broker.config.settings import DEFAULT_ALLOWED_CONTENT_TYPES
from upload_broker.core.clock import utcnow
from upload_broker.core.entities.image import Image, ImageStatus
from upload_broker.core.errors import BadRequestError, InternalError, ObjectStoreUnavailableError
from upload_broker.core.interfaces.image_repository import IImageRepository, RepositoryError
from upload_broker.core.interfaces.storage_service import IStorageService, StorageError
from upload_broker.core.object_keys import derive_object_key
from upload_broker.core.validation import is_allowed_content_type, is_valid_size

logger = logging.getLogger(__name__)


@dataclass
class UploadTicket:
    """The new image plus what the client needs to PUT the bytes."""
    image: Image
    url: str
    expires_in_sec: int
    method: str = "PUT"
    headers: dict[str, str] = field(default_factory=dict)


class RequestUploadUseCase:
    """
    Use Case: file name + declared type/size → image row + PUT URL.

    The row is inserted before the URL is signed. If signing fails the row
    stays `requested` and is simply never confirmed.
    """

    def __init__(
        self,
        repository: IImageRepository,
        storage: IStorageService | None,
        put_ttl_seconds: int,
        max_upload_bytes: int,
        allowed_content_types: Collection[str] = DEFAULT_ALLOWED_CONTENT_TYPES,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._repo = repository
        self._storage = storage
        self._put_ttl = put_ttl_seconds
        self._max_bytes = max_upload_bytes
        self._allowed = allowed_content_types
        self._clock = clock

    def execute(self, file_name: str, content_type: str, file_size: int) -> UploadTicket:
        if not is_allowed_content_type(content_type, self._allowed):
            raise BadRequestError("Content type not allowed")
        if not is_valid_size(file_size, self._max_bytes):
            raise BadRequestError("File size exceeds limit")
        if self._storage is None:
            raise ObjectStoreUnavailableError()

        now = self._clock()
        image = Image(
            id=str(uuid.uuid4()),
            object_key=derive_object_key(file_name, now=now),
            original_name=file_name,
            mime_type=content_type,
            byte_size=file_size,
            status=ImageStatus.REQUESTED,
            created_at=now,
        )

        try:
            image = self._repo.add(image)
        except RepositoryError as e:
            logger.error(f"Failed to save image metadata for {file_name!r}: {e}")
            raise InternalError("Failed to save image metadata") from e

        try:
            url = self._storage.presign_put(image.object_key, content_type, self._put_ttl)
        except StorageError as e:
            logger.error(f"Presign PUT failed for image {image.id}: {e}")
            raise InternalError("Failed to generate presigned URL") from e

        logger.info(f"Upload requested: image={image.id} key={image.object_key} size={file_size}")
        return UploadTicket(
            image=image,
            url=url,
            expires_in_sec=self._put_ttl,
            headers={"Content-Type": content_type},
        )
