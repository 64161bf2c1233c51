"""
Error taxonomy and its mapping onto HTTP responses.

Every error response produced by the service has the shape
``{"error": "<description>"}``:

* ``ValidationError`` – malformed, missing or out of range input (400).
  The message is returned verbatim and the event is not treated as a
  server fault.
* ``NotFoundError`` – a single-resource lookup found nothing (404).
* ``PersistenceError`` – anything that went wrong while acquiring a
  connection or running a statement (500).  Clients receive a generic
  message; the underlying exception is logged for operators.
* ``PoolExhaustedError`` – no connection became free in time.  Reported
  exactly like any other ``PersistenceError``.

Request shape problems detected by FastAPI (bad JSON, wrong types,
unknown fields, non-integer path ids) are reported as 400 as well.
"""

import logging
from typing import Any, Dict, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class CatalogError(Exception):
    """Base class for errors raised by the catalog service."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND


class PersistenceError(CatalogError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class PoolExhaustedError(PersistenceError):
    pass


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_request_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """Collapse FastAPI's error list into one readable sentence."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Malformed JSON body"
    # ``loc`` starts with the source ("body", "path", ...) followed by the field.
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    if first.get("type") == "extra_forbidden" and location:
        return f"Unknown field: {location[-1]}"
    field = ".".join(location)
    message = first.get("msg", "invalid value")
    return f"Invalid request: {field}: {message}" if field else f"Invalid request: {message}"


async def handle_catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def handle_persistence_error(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("Error in %s %s: %s", request.method, request.url.path, exc.message, exc_info=exc)
    return error_response(exc.status_code, INTERNAL_ERROR_MESSAGE)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, _describe_request_errors(exc.errors()))


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that turn service errors into JSON responses."""
    app.add_exception_handler(PersistenceError, handle_persistence_error)
    app.add_exception_handler(CatalogError, handle_catalog_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
