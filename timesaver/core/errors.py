"""Error responses and exception handlers.

Every error body has the shape ``{"error": <message>}``; outside production a
``details`` string with the underlying exception message is added.
"""
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from timesaver.core.config import settings
from timesaver.core.logging import get_logger

logger = get_logger(__name__)

# Request fields that get a fixed message instead of "Invalid <field> value".
FIELD_MESSAGES = {
    "email": "Valid email is required",
}


class ApiError(Exception):
    """Error raised by route handlers, rendered as ``{"error": message}``."""

    def __init__(self, status_code: int, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


def error_body(message: str, details: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": message}
    if details and not settings.is_production:
        body["details"] = details
    return body


def validation_message(exc: RequestValidationError) -> str:
    """Message naming the first offending field of a request body."""
    for error in exc.errors():
        loc = [part for part in error.get("loc", ()) if part != "body"]
        if not loc or error.get("type") == "json_invalid":
            continue
        field = str(loc[0])
        return FIELD_MESSAGES.get(field, f"Invalid {field} value")
    return "Invalid request body"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.details))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = validation_message(exc)
    logger.info(
        f"Rejected {request.method} {request.url.path}: {message}",
        extra={"path": request.url.path, "status_code": 400},
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


def _not_found_response(index_file: Path):
    if index_file.is_file():
        return FileResponse(index_file, status_code=status.HTTP_404_NOT_FOUND, media_type="text/html")
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "Not found"})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Unmatched routes get the landing page with a 404 status.

    The static mount answers non-GET requests with 405; those are unmatched
    routes too.
    """
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return _not_found_response(Path(settings.static_dir) / "index.html")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Server error: {request.method} {request.url.path}",
        extra={"path": request.url.path, "error": str(exc)},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Something went wrong!", str(exc)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
