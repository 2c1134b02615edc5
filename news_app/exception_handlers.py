"""
Translate post-core errors into HTTP responses.

Every error response carries a JSON ``{"detail": ...}`` body and the
``HX-Error-Message`` header so partial-page clients can show the message
without parsing the body.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from news_app.domain import (
    DuplicateError,
    InvalidIDError,
    NotFoundError,
    PostError,
    StorageError,
    ValidationError,
)
from news_app.middleware import request_id_var

logger = logging.getLogger(__name__)

HX_ERROR_HEADER = "HX-Error-Message"
HX_TRIGGER_HEADER = "HX-Trigger"


def status_for(exc: PostError) -> int:
    if isinstance(exc, (ValidationError, InvalidIDError)):
        return 400
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, DuplicateError):
        return 409
    if isinstance(exc, StorageError) and exc.timed_out:
        return 503
    return 500


def _public_message(exc: PostError, status: int) -> str:
    if isinstance(exc, ValidationError):
        return exc.detail
    if isinstance(exc, (NotFoundError, InvalidIDError)):
        return "Post not found" if status == 404 else "Invalid post id"
    if isinstance(exc, DuplicateError):
        return "Post already exists"
    if status == 503:
        return "Request timed out"
    return "Internal server error"


async def post_error_handler(request: Request, exc: PostError) -> JSONResponse:
    status = status_for(exc)
    message = _public_message(exc, status)
    request_id = request_id_var.get()
    if status >= 500:
        logger.error("[%s] %s %s failed: %s", request_id, request.method, request.url.path, exc)
    else:
        logger.warning("[%s] %s %s rejected: %s", request_id, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status,
        content={"detail": message},
        headers={HX_ERROR_HEADER: message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PostError, post_error_handler)
