"""
Database Models: SQLAlchemy.

Tables:
  - images: metadata and lifecycle state of uploaded objects
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, Index, String, Text
from sqlalchemy.orm import DeclarativeBase

from upload_broker.core.entities.image import Image, ImageStatus


class Base(DeclarativeBase):
    pass


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands datetimes back naive
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class ImageRecord(Base):
    """One row per requested upload."""
    __tablename__ = "images"
    __table_args__ = (
        CheckConstraint(
            "storage_status IN ('requested','uploaded','failed','deleted')",
            name="ck_images_storage_status",
        ),
        Index("ix_images_status_created_at", "storage_status", "created_at"),
    )

    id = Column(String(36), primary_key=True)
    object_key = Column(Text, unique=True, nullable=False)
    original_name = Column(Text, nullable=False)
    mime_type = Column(String(100), nullable=False)
    byte_size = Column(BigInteger, nullable=False)
    etag = Column(String(255), nullable=True)
    storage_status = Column(String(16), nullable=False, default=ImageStatus.REQUESTED.value)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    uploaded_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Image {self.id} [{self.storage_status}] key={self.object_key}>"

    @classmethod
    def from_entity(cls, image: Image) -> "ImageRecord":
        return cls(
            id=image.id,
            object_key=image.object_key,
            original_name=image.original_name,
            mime_type=image.mime_type,
            byte_size=image.byte_size,
            etag=image.etag,
            storage_status=image.status.value,
            created_at=image.created_at,
            uploaded_at=image.uploaded_at,
        )

    def to_entity(self) -> Image:
        return Image(
            id=self.id,
            object_key=self.object_key,
            original_name=self.original_name,
            mime_type=self.mime_type,
            byte_size=self.byte_size,
            status=ImageStatus(self.storage_status),
            created_at=_as_utc(self.created_at),
            etag=self.etag,
            uploaded_at=_as_utc(self.uploaded_at),
        )
