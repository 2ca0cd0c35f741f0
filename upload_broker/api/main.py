"""
FastAPI Application: Direct-Upload Image Broker.

Architecture:
  - Clients PUT/GET bytes directly against S3 (or MinIO) via presigned URLs
  - PostgreSQL (prod) / SQLite (dev) holds image metadata and lifecycle state
  - Without object-store credentials the API runs metadata-only
"""

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from upload_broker.api.dependencies import ImageServices
from upload_broker.api.errors import REQUEST_ID_HEADER, register_exception_handlers
from upload_broker.api.routes.images import router as images_router
from upload_broker.api.schemas.images import HealthResponse
from upload_broker.config.settings import Settings, get_settings
from upload_broker.core.interfaces.storage_service import IStorageService
from upload_broker.infrastructure.db.database import (
    create_db_engine,
    create_session_factory,
    init_db,
)
from upload_broker.infrastructure.db.repository import ImageRepository
from upload_broker.infrastructure.storage.s3_storage import build_storage_service

logger = logging.getLogger(__name__)

_FROM_SETTINGS = object()


def create_app(settings: Settings | None = None, storage=_FROM_SETTINGS) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; read from the environment when omitted.
        storage: IStorageService to use. Defaults to an S3 client built
            from `settings`; pass None to force metadata-only mode.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Upload Broker",
        description="Presigned direct uploads to object storage with tracked image metadata.",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origin],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.middleware("http")
    async def assign_request_id(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    register_exception_handlers(app)

    # ── Adapters ──
    engine = create_db_engine(settings.database_url)
    repository = ImageRepository(create_session_factory(engine))
    if storage is _FROM_SETTINGS:
        storage = build_storage_service(settings)
    storage_service: IStorageService | None = storage

    app.state.services = ImageServices.build(settings, repository, storage_service)

    @app.on_event("startup")
    def startup():
        init_db(engine)
        mode = "enabled" if storage_service is not None else "disabled (metadata-only)"
        logger.info(f"Upload broker started; object store {mode}")

    @app.on_event("shutdown")
    def shutdown():
        engine.dispose()

    app.include_router(images_router, prefix="/images", tags=["Images"])

    # ── Health ──
    @app.get("/healthz", response_model=HealthResponse)
    def health():
        enabled = app.state.services.object_store_enabled
        return HealthResponse(object_store="enabled" if enabled else "disabled")

    return app
