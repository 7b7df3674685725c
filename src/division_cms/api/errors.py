"""
division_cms.api.errors

Exception handlers mapping expected failures to `{"error": ...}` responses.

Responsibilities:
- Convert `GatewayError` subclasses to their status code and message.
- Normalize FastAPI validation errors and HTTP errors into the same body shape.
- Log every rejection with the bound request context before responding.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_400_BAD_REQUEST

from division_cms.errors import GatewayError, StorageFailure, storage_error_message
from division_cms.observability.logging import get_logger

log = get_logger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def gateway_error_handler(_: Request, exc: GatewayError) -> JSONResponse:
    log.warning("request_rejected", status=exc.status_code, error=exc.message)
    return _error(exc.status_code, exc.message)


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"Malformed request: {loc + ': ' if loc else ''}{first.get('msg', 'invalid')}"
    else:
        message = "Malformed request"
    log.warning("request_rejected", status=HTTP_400_BAD_REQUEST, error=message)
    return _error(HTTP_400_BAD_REQUEST, message)


async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    log.warning("request_rejected", status=exc.status_code, error=str(exc.detail))
    return _error(exc.status_code, str(exc.detail))


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Reads outside the service's write guard still report the driver message.
    return await gateway_error_handler(request, StorageFailure(storage_error_message(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, validation_error_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)  # type: ignore[arg-type]
