"""
Exception Handlers

Render every failure as ``{"message": str, "errors"?: {field: [str]}}``.
"""

import logging
from typing import Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from crime_records.core.exceptions import CrimeRecordsError, ValidationFailed

logger = logging.getLogger(__name__)


def flatten_validation_errors(errors) -> Dict[str, List[str]]:
    """Group pydantic error entries by field name.

    The location prefix (``body``, ``query``, ``path``) is dropped; errors not
    tied to a field are collected under ``_errors``.
    """
    field_errors: Dict[str, List[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        field = loc[0] if loc else "_errors"
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        field_errors.setdefault(field, []).append(message)
    return field_errors


async def crime_records_error_handler(request: Request, exc: CrimeRecordsError) -> JSONResponse:
    body = {"message": exc.message}
    if isinstance(exc, ValidationFailed) and exc.errors:
        body["errors"] = exc.errors
    return JSONResponse(body, status_code=exc.status_code)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if any(error.get("type") == "json_invalid" for error in exc.errors()):
        return JSONResponse({"message": "Invalid JSON payload."}, status_code=400)
    errors = flatten_validation_errors(exc.errors())
    logger.info(f"Rejected invalid input for {request.method} {request.url.path}: {sorted(errors)}")
    return JSONResponse({"message": "Invalid input.", "errors": errors}, status_code=400)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed."
    return JSONResponse({"message": message}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse({"message": "An unexpected error occurred."}, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CrimeRecordsError, crime_records_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
