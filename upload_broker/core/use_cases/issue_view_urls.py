"""
Use Case: Issue View URLs

Batch of presigned GET URLs for uploaded images. Partial success is the
normal outcome: ids that are unknown, not uploaded, or fail to sign are
left out of the result.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from upload_broker.core.clock import utcnow
from upload_broker.core.entities.image import ImageStatus
from upload_broker.core.errors import BadRequestError, InternalError, ObjectStoreUnavailableError
from upload_broker.core.interfaces.image_repository import IImageRepository, RepositoryError
from upload_broker.core.interfaces.storage_service import IStorageService, StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewUrl:
    image_id: str
    url: str
    expires_at: datetime


def clamp_ttl(requested: int | None, max_ttl: int) -> int:
    """Requested TTL if 0 < requested <= max_ttl, otherwise max_ttl."""
    if requested is not None and 0 < requested <= max_ttl:
        return requested
    return max_ttl


class IssueViewUrlsUseCase:
    """
    Use Case: image ids → presigned GET URLs.

    Every URL in one batch shares the same expiry instant, taken once
    before signing starts.
    """

    def __init__(
        self,
        repository: IImageRepository,
        storage: IStorageService | None,
        max_ttl_seconds: int,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._repo = repository
        self._storage = storage
        self._max_ttl = max_ttl_seconds
        self._clock = clock

    def execute(self, image_ids: Sequence[str], ttl_seconds: int | None = None) -> list[ViewUrl]:
        if not image_ids:
            raise BadRequestError("At least one request is required")
        if self._storage is None:
            raise ObjectStoreUnavailableError()

        ttl = clamp_ttl(ttl_seconds, self._max_ttl)

        try:
            images = self._repo.find_many(image_ids, ImageStatus.UPLOADED)
        except RepositoryError as e:
            raise InternalError("Database error") from e
        by_id = {image.id: image for image in images}

        expires_at = self._clock() + timedelta(seconds=ttl)
        results: list[ViewUrl] = []
        for image_id in image_ids:
            image = by_id.get(image_id)
            if image is None:
                continue
            try:
                url = self._storage.presign_get(image.object_key, ttl)
            except StorageError as e:
                logger.warning(f"Skipping view URL for image {image_id}: {e}")
                continue
            results.append(ViewUrl(image_id=image_id, url=url, expires_at=expires_at))

        logger.debug(f"Issued {len(results)}/{len(image_ids)} view URLs (ttl={ttl}s)")
        return results
