"""
Entity: Image

An image asset tracked by the broker. The bytes live in the object store;
this is only the metadata and lifecycle state.
Pure model, no framework or database dependency.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ImageStatus(str, Enum):
    REQUESTED = "requested"
    UPLOADED = "uploaded"
    FAILED = "failed"
    DELETED = "deleted"     # reserved, nothing produces it yet


@dataclass(frozen=True)
class Image:
    """Domain entity: Image."""
    id: str
    object_key: str
    original_name: str
    mime_type: str
    byte_size: int
    status: ImageStatus
    created_at: datetime
    etag: str | None = None
    uploaded_at: datetime | None = None
