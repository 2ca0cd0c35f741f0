"""
Pydantic schemas: request and response models for the images API.

Wire format is camelCase; Python attributes stay snake_case.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from upload_broker.core.entities.image import Image


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Requests ──

class UploadRequestBody(CamelModel):
    file_name: str
    content_type: str
    file_size: int = Field(ge=1)


class UploadCompleteBody(CamelModel):
    id: UUID
    object_key: str


class ViewUrlRequestItem(CamelModel):
    id: UUID


class ViewUrlsBody(CamelModel):
    requests: list[ViewUrlRequestItem]
    ttl_sec: int | None = None


# ── Responses ──

class ImageResponse(CamelModel):
    id: str
    object_key: str
    original_name: str
    mime_type: str
    byte_size: int
    status: str

    @classmethod
    def from_entity(cls, image: Image) -> "ImageResponse":
        return cls(
            id=image.id,
            object_key=image.object_key,
            original_name=image.original_name,
            mime_type=image.mime_type,
            byte_size=image.byte_size,
            status=image.status.value,
        )


class UploadResponse(CamelModel):
    method: str
    url: str
    headers: dict[str, str]
    expires_in_sec: int


class UploadRequestResponse(CamelModel):
    image: ImageResponse
    upload: UploadResponse


class StatusResponse(CamelModel):
    status: str = "ok"


class ImageMeta(CamelModel):
    id: str
    object_key: str
    original_name: str
    mime_type: str
    byte_size: int
    uploaded_at: datetime | None = None

    @classmethod
    def from_entity(cls, image: Image) -> "ImageMeta":
        return cls(
            id=image.id,
            object_key=image.object_key,
            original_name=image.original_name,
            mime_type=image.mime_type,
            byte_size=image.byte_size,
            uploaded_at=image.uploaded_at,
        )


class ImageListResponse(CamelModel):
    items: list[ImageMeta]
    next_cursor: str | None = None


class ViewUrlResult(CamelModel):
    id: str
    url: str
    expires_at: datetime


class ViewUrlsResponse(CamelModel):
    results: list[ViewUrlResult]


class HealthResponse(CamelModel):
    status: str = "ok"
    object_store: str
