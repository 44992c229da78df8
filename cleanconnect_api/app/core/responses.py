"""
Response envelope and global exception handlers.

Every endpoint answers with ``{"success": true, ...}`` on success and
``{"success": false, "message": ...}`` on failure.  ``envelope`` builds
the success shape; ``register_error_handlers`` installs handlers that
convert service errors, HTTP errors, request validation errors and
unexpected exceptions into the failure shape.
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .errors import ServiceError


logger = logging.getLogger(__name__)


def _serialise(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_serialise(item) for item in value]
    return value


def envelope(data: Any = None, message: str | None = None, **extra: Any) -> dict:
    """Build a success payload.

    ``data`` may be a pydantic model, a list of models or plain JSON
    values; models are dumped with their camelCase aliases.  Extra
    keyword arguments (``count``, ``token``, ``user``...) are copied to
    the top level.
    """
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = _serialise(data)
    for key, value in extra.items():
        body[key] = _serialise(value)
    return body


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    content = {"success": False, "message": message, **extra}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on ``app``."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        if exc.status_code == 404 and exc.detail == "Not Found":
            return _error(404, "Route not found")
        response = _error(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        return _error(400, _describe_validation(exc), errors=errors)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = str(exc) if settings.debug else "Internal server error"
        return _error(500, message)
