"""Test doubles and row builders."""

from datetime import datetime, timedelta, timezone

from upload_broker.core.entities.image import Image, ImageStatus
from upload_broker.core.interfaces.storage_service import (
    IStorageService,
    ObjectInfo,
    ObjectNotFoundError,
    StorageError,
)


class FakeStorage(IStorageService):
    """In-memory object store. `objects` maps key -> etag."""

    def __init__(self):
        self.objects: dict[str, str] = {}
        self.fail_presign_for: set[str] = set()
        self.head_error: StorageError | None = None
        self.head_hook = None
        self.put_calls: list[tuple[str, str, int]] = []
        self.get_calls: list[tuple[str, int]] = []

    def presign_put(self, key, content_type, expires_seconds):
        if key in self.fail_presign_for:
            raise StorageError("signing failed")
        self.put_calls.append((key, content_type, expires_seconds))
        return f"https://bucket.example/{key}?X-Amz-Expires={expires_seconds}&op=put"

    def presign_get(self, key, expires_seconds):
        if key in self.fail_presign_for:
            raise StorageError("signing failed")
        self.get_calls.append((key, expires_seconds))
        return f"https://bucket.example/{key}?X-Amz-Expires={expires_seconds}&op=get"

    def head_object(self, key):
        if self.head_hook is not None:
            self.head_hook(key)
        if self.head_error is not None:
            raise self.head_error
        if key not in self.objects:
            raise ObjectNotFoundError(key)
        return ObjectInfo(key=key, etag=self.objects[key], size_bytes=10)


def make_image(
    image_id: str,
    status: ImageStatus = ImageStatus.UPLOADED,
    created_at: datetime | None = None,
    key: str | None = None,
) -> Image:
    created_at = created_at or datetime(2025, 1, 1, tzinfo=timezone.utc)
    return Image(
        id=image_id,
        object_key=key or f"y=2025/m=01/d=01/{image_id}_photo.jpg",
        original_name="photo.jpg",
        mime_type="image/jpeg",
        byte_size=1024,
        status=status,
        created_at=created_at,
        uploaded_at=created_at + timedelta(minutes=1) if status == ImageStatus.UPLOADED else None,
    )
