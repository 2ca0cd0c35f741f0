"""
Error envelope for every non-2xx response:

    {"error": {"code": "NotFound", "message": "Image not found", "requestId": "..."}}

code is one of BadRequest | NotFound | Conflict | InternalError.
"""

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from upload_broker.core.errors import ImageBrokerError

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

_CODES_BY_STATUS = {400: "BadRequest", 404: "NotFound", 409: "Conflict"}


class ErrorDetail(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    code: str
    message: str
    request_id: str


class ErrorEnvelope(BaseModel):
    error: ErrorDetail


def get_request_id(request: Request) -> str:
    """Id assigned by the request-id middleware, or the inbound header."""
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
    return request_id


def error_response(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    request_id = get_request_id(request)
    envelope = ErrorEnvelope(error=ErrorDetail(code=code, message=message, request_id=request_id))
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(by_alias=True),
        headers={REQUEST_ID_HEADER: request_id},
    )


async def _broker_error_handler(request: Request, exc: ImageBrokerError) -> JSONResponse:
    return error_response(request, exc.http_status, exc.code, exc.message)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return error_response(request, 400, "BadRequest", "Invalid request body")


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        return error_response(request, 500, "InternalError", str(exc.detail))
    code = _CODES_BY_STATUS.get(exc.status_code)
    if code is None:
        # other 4xx (405, 413, ...) collapse to BadRequest
        return error_response(request, 400, "BadRequest", str(exc.detail))
    return error_response(request, exc.status_code, code, str(exc.detail))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(request, 500, "InternalError", "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ImageBrokerError, _broker_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
