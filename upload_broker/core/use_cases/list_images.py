"""
Use Case: List / Get Images

Read side of the broker. Only `uploaded` images are ever returned; any
other state looks exactly like an unknown id.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from upload_broker.core.entities.image import Image, ImageStatus
from upload_broker.core.errors import InternalError, NotFoundError
from upload_broker.core.interfaces.image_repository import IImageRepository, RepositoryError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def encode_cursor(created_at: datetime) -> str:
    """Opaque cursor for "everything older than `created_at`"."""
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    raw = created_at.astimezone(timezone.utc).isoformat(timespec="microseconds")
    return base64.urlsafe_b64encode(raw.encode()).decode().rstrip("=")


def decode_cursor(cursor: str) -> datetime | None:
    """Inverse of encode_cursor. Returns None for anything unreadable."""
    padded = cursor + "=" * (-len(cursor) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode()).decode()
        value = datetime.fromisoformat(raw)
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_limit(limit: int | None) -> int:
    """Page size within 1..100; anything else falls back to the default."""
    if limit is None or not 0 < limit <= MAX_PAGE_SIZE:
        return DEFAULT_PAGE_SIZE
    return limit


@dataclass
class ImagePage:
    items: list[Image]
    next_cursor: str | None = None


class ListImagesUseCase:
    """
    Use Case: newest-first page of uploaded images.

    Fetches one extra row to learn whether another page exists; the extra
    row is dropped and the last kept row becomes the next cursor.
    """

    def __init__(self, repository: IImageRepository):
        self._repo = repository

    def execute(self, limit: int | None = None, cursor: str | None = None) -> ImagePage:
        page_size = normalize_limit(limit)

        created_before = None
        if cursor:
            created_before = decode_cursor(cursor)
            if created_before is None:
                logger.warning(f"Ignoring unreadable cursor {cursor!r}")

        try:
            rows = self._repo.list_by_status(
                ImageStatus.UPLOADED,
                limit=page_size + 1,
                created_before=created_before,
            )
        except RepositoryError as e:
            raise InternalError("Failed to fetch images") from e

        has_more = len(rows) > page_size
        items = rows[:page_size]

        next_cursor = None
        if has_more and items:
            next_cursor = encode_cursor(items[-1].created_at)
        return ImagePage(items=items, next_cursor=next_cursor)


class GetImageUseCase:
    """Use Case: one uploaded image by id."""

    def __init__(self, repository: IImageRepository):
        self._repo = repository

    def execute(self, image_id: str) -> Image:
        try:
            image = self._repo.get(image_id, status=ImageStatus.UPLOADED)
        except RepositoryError as e:
            raise InternalError("Database error") from e
        if image is None:
            raise NotFoundError("Image not found")
        return image
