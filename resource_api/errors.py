"""
Centralized translation of errors that escape the route handlers into the
JSON envelope. Handlers deal with validation and bad identifiers themselves;
storage failures and anything unexpected end up here.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import is_development
from .db import ErrorKind, StorageError

logger = logging.getLogger(__name__)


def _envelope(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def _format_validation_error(err: dict) -> str:
    loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("query", "path", "body"))
    msg = err.get("msg", "invalid value")
    return f"{loc}: {msg}" if loc else msg


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    if exc.kind is ErrorKind.CONSTRAINT_VIOLATION:
        logger.warning("%s %s constraint violation: %s", request.method, request.url.path, exc.message)
        return _envelope(400, "Database constraint violation", exc.message)
    logger.error("%s %s database error: %s", request.method, request.url.path, exc.message)
    return _envelope(500, "Database error", exc.message if is_development() else None)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [_format_validation_error(e) for e in exc.errors()]
    return JSONResponse(status_code=400, content={"success": False, "errors": errors})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s unhandled error", request.method, request.url.path)
    return _envelope(500, "Internal server error", str(exc) if is_development() else None)


def install_error_handlers(app: FastAPI):
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
