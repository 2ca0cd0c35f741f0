"""
Routes: /images: direct-upload lifecycle and read endpoints.

Handlers are plain `def`: storage and database calls block, so FastAPI
runs each request on its worker threadpool.
"""

import uuid

from fastapi import APIRouter, Depends

from upload_broker.api.dependencies import ImageServices, get_services
from upload_broker.api.schemas.images import (
    ImageListResponse,
    ImageMeta,
    ImageResponse,
    StatusResponse,
    UploadCompleteBody,
    UploadRequestBody,
    UploadRequestResponse,
    UploadResponse,
    ViewUrlResult,
    ViewUrlsBody,
    ViewUrlsResponse,
)
from upload_broker.core.errors import BadRequestError

router = APIRouter()


def _parse_limit(limit: str | None) -> int | None:
    try:
        return int(limit) if limit else None
    except ValueError:
        return None


@router.post("/upload-request", response_model=UploadRequestResponse)
def upload_request(body: UploadRequestBody, services: ImageServices = Depends(get_services)):
    """
    Register an upload and return a presigned PUT URL.

    The client must PUT the bytes to `upload.url` with the returned
    headers, then call /images/upload-complete.
    """
    ticket = services.request_upload.execute(body.file_name, body.content_type, body.file_size)
    return UploadRequestResponse(
        image=ImageResponse.from_entity(ticket.image),
        upload=UploadResponse(
            method=ticket.method,
            url=ticket.url,
            headers=ticket.headers,
            expires_in_sec=ticket.expires_in_sec,
        ),
    )


@router.post("/upload-complete", response_model=StatusResponse)
def upload_complete(body: UploadCompleteBody, services: ImageServices = Depends(get_services)):
    """Verify the object landed in storage and publish the image."""
    services.confirm_upload.execute(str(body.id), body.object_key)
    return StatusResponse()


@router.get("", response_model=ImageListResponse, response_model_exclude_none=True)
def list_images(
    limit: str | None = None,
    cursor: str | None = None,
    services: ImageServices = Depends(get_services),
):
    """Newest-first page of uploaded images."""
    page = services.list_images.execute(limit=_parse_limit(limit), cursor=cursor)
    return ImageListResponse(
        items=[ImageMeta.from_entity(image) for image in page.items],
        next_cursor=page.next_cursor,
    )


@router.get("/{image_id}", response_model=ImageMeta, response_model_exclude_none=True)
def get_image(image_id: str, services: ImageServices = Depends(get_services)):
    try:
        parsed = uuid.UUID(image_id)
    except ValueError:
        raise BadRequestError("Invalid image ID")
    return ImageMeta.from_entity(services.get_image.execute(str(parsed)))


@router.post("/view-urls", response_model=ViewUrlsResponse)
def view_urls(body: ViewUrlsBody, services: ImageServices = Depends(get_services)):
    """Presigned GET URLs for a batch of uploaded images."""
    ids = [str(item.id) for item in body.requests]
    results = services.issue_view_urls.execute(ids, ttl_seconds=body.ttl_sec)
    return ViewUrlsResponse(
        results=[
            ViewUrlResult(id=r.image_id, url=r.url, expires_at=r.expires_at)
            for r in results
        ]
    )
