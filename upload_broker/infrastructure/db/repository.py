"""
Image Repository: CRUD + conditional status transitions.

Handles:
  - Inserting requested uploads
  - Lookups by id / id + key
  - Newest-first listing with a created_at cursor
  - Compare-and-set status changes (one UPDATE ... WHERE status = expected)
"""

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from upload_broker.core.entities.image import Image, ImageStatus
from upload_broker.core.interfaces.image_repository import IImageRepository, RepositoryError
from upload_broker.infrastructure.db.database import session_scope
from upload_broker.infrastructure.db.models import ImageRecord

logger = logging.getLogger(__name__)


class ImageRepository(IImageRepository):
    """SQLAlchemy implementation of IImageRepository."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with session_scope(self._session_factory) as db:
                yield db
        except SQLAlchemyError as e:
            logger.error(f"Database error: {e}")
            raise RepositoryError(str(e)) from e

    def add(self, image: Image) -> Image:
        with self._session() as db:
            record = ImageRecord.from_entity(image)
            db.add(record)
            db.flush()
            logger.debug(f"Inserted image {record.id} key={record.object_key}")
            return record.to_entity()

    def get(self, image_id: str, status: ImageStatus | None = None) -> Image | None:
        with self._session() as db:
            query = db.query(ImageRecord).filter_by(id=image_id)
            if status is not None:
                query = query.filter_by(storage_status=status.value)
            record = query.first()
            return record.to_entity() if record else None

    def get_by_id_and_key(self, image_id: str, object_key: str) -> Image | None:
        with self._session() as db:
            record = db.query(ImageRecord).filter_by(id=image_id, object_key=object_key).first()
            return record.to_entity() if record else None

    def list_by_status(
        self,
        status: ImageStatus,
        limit: int,
        created_before: datetime | None = None,
    ) -> list[Image]:
        with self._session() as db:
            query = db.query(ImageRecord).filter_by(storage_status=status.value)
            if created_before is not None:
                query = query.filter(ImageRecord.created_at < created_before)
            records = (
                query.order_by(desc(ImageRecord.created_at), desc(ImageRecord.id))
                .limit(limit)
                .all()
            )
            return [r.to_entity() for r in records]

    def find_many(self, image_ids: Sequence[str], status: ImageStatus) -> list[Image]:
        if not image_ids:
            return []
        with self._session() as db:
            records = (
                db.query(ImageRecord)
                .filter(ImageRecord.id.in_(list(image_ids)))
                .filter_by(storage_status=status.value)
                .all()
            )
            return [r.to_entity() for r in records]

    def transition(
        self,
        image_id: str,
        expected: ImageStatus,
        new_status: ImageStatus,
        uploaded_at: datetime | None = None,
        etag: str | None = None,
    ) -> bool:
        values = {ImageRecord.storage_status: new_status.value}
        if uploaded_at is not None:
            values[ImageRecord.uploaded_at] = uploaded_at
        if etag is not None:
            values[ImageRecord.etag] = etag

        with self._session() as db:
            updated = (
                db.query(ImageRecord)
                .filter_by(id=image_id, storage_status=expected.value)
                .update(values, synchronize_session=False)
            )
        if updated:
            logger.debug(f"Image {image_id}: {expected.value} -> {new_status.value}")
        return updated == 1
