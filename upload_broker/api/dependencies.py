"""
Wiring: builds the use cases with concrete adapters, once per app.
"""

from dataclasses import dataclass

from fastapi import Request

from upload_broker.config.settings import Settings
from upload_broker.core.interfaces.image_repository import IImageRepository
from upload_broker.core.interfaces.storage_service import IStorageService
from upload_broker.core.use_cases.confirm_upload import ConfirmUploadUseCase
from upload_broker.core.use_cases.issue_view_urls import IssueViewUrlsUseCase
from upload_broker.core.use_cases.list_images import GetImageUseCase, ListImagesUseCase
from upload_broker.core.use_cases.request_upload import RequestUploadUseCase


@dataclass
class ImageServices:
    request_upload: RequestUploadUseCase
    confirm_upload: ConfirmUploadUseCase
    list_images: ListImagesUseCase
    get_image: GetImageUseCase
    issue_view_urls: IssueViewUrlsUseCase
    object_store_enabled: bool

    @classmethod
    def build(
        cls,
        settings: Settings,
        repository: IImageRepository,
        storage: IStorageService | None,
    ) -> "ImageServices":
        return cls(
            request_upload=RequestUploadUseCase(
                repository,
                storage,
                put_ttl_seconds=settings.presign_put_ttl_sec,
                max_upload_bytes=settings.max_upload_bytes,
                allowed_content_types=settings.allowed_content_types,
            ),
            confirm_upload=ConfirmUploadUseCase(repository, storage),
            list_images=ListImagesUseCase(repository),
            get_image=GetImageUseCase(repository),
            issue_view_urls=IssueViewUrlsUseCase(
                repository,
                storage,
                max_ttl_seconds=settings.presign_get_ttl_sec,
            ),
            object_store_enabled=storage is not None,
        )


def get_services(request: Request) -> ImageServices:
    return request.app.state.services
