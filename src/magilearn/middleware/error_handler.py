"""Global error handler — consistent JSON error responses.

Every error body is ``{"detail": ...}``; input errors add an ``errors`` list
of ``{"field", "message"}`` entries.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from magilearn.errors import MagiLearnError, StorageUnavailable, ValidationFailed

logger = structlog.get_logger()


def _field_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic error dicts, dropping the body/query prefix from locations."""
    fields = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
    return fields


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(MagiLearnError)
    async def domain_exception_handler(request: Request, exc: MagiLearnError) -> JSONResponse:
        """Map domain errors to their HTTP status."""
        content: dict[str, Any] = {"detail": exc.message}
        if isinstance(exc, ValidationFailed) and exc.errors:
            content["errors"] = exc.errors
        if isinstance(exc, StorageUnavailable):
            logger.error("storage_unavailable", path=request.url.path, method=request.method)
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP exceptions with consistent JSON format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed request bodies are a 400, same shape as survey errors."""
        return JSONResponse(
            status_code=400,
            content={"detail": ValidationFailed.default_message, "errors": _field_errors(list(exc.errors()))},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions — always return JSON."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )
