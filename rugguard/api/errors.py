"""Error envelope for rejected API requests.

Every rejected request (malformed body, oversized body or trace, unknown
route) gets the same JSON shape:

    {"error": {"code": "PAYLOAD_TOO_LARGE", "message": "...",
               "details": null, "request_id": "..."}}

A trace that fails analysis is not a rejected request: it comes back as a
200 verdict with ``error: true``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorEnvelope(BaseModel):
    code: ErrorCode
    message: str
    details: list[dict[str, Any]] | None = None
    request_id: str | None = None


class ErrorResponse(BaseModel):
    error: ErrorEnvelope


_HTTP_CODES: dict[int, ErrorCode] = {
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    413: ErrorCode.PAYLOAD_TOO_LARGE,
    422: ErrorCode.VALIDATION_ERROR,
}


class TraceTooLargeError(Exception):
    """The trace carries more calls than ``max_trace_calls`` allows."""

    def __init__(self, calls: int, max_calls: int) -> None:
        self.calls = calls
        self.max_calls = max_calls
        super().__init__(f"Trace has {calls} calls (max: {max_calls})")


def error_response(
    request: Request,
    status_code: int,
    code: ErrorCode,
    message: str,
    details: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Build the envelope, tagged with the request ID when one is known."""
    request_id = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
    body = ErrorResponse(
        error=ErrorEnvelope(code=code, message=message, details=details, request_id=request_id)
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Field paths use the wire names, e.g. "trace.calls.0.input"
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body",
            "message": err.get("msg", "Invalid value"),
            "type": err.get("type", "value_error"),
        }
        for err in exc.errors()
    ]
    return error_response(
        request,
        422,
        ErrorCode.VALIDATION_ERROR,
        f"Invalid detection request: {len(details)} error(s)",
        details,
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    return error_response(request, exc.status_code, code, str(exc.detail or code.value))


async def trace_too_large_handler(request: Request, exc: TraceTooLargeError) -> JSONResponse:
    logger.warning("Rejected trace with %d calls (max %d)", exc.calls, exc.max_calls)
    return error_response(request, 413, ErrorCode.PAYLOAD_TOO_LARGE, str(exc))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
    return error_response(request, 500, ErrorCode.INTERNAL_ERROR, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(TraceTooLargeError, trace_too_large_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
