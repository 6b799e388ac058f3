"""Request middleware — request ID tracking and request size limits.

Adds:
  - X-Request-ID header propagation (or generation) for tracing
  - Request body size enforcement; traces with many calls can be large
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from rugguard.api.errors import ErrorCode, error_response

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUEST_SIZE = 10 * 1024 * 1024  # 10 MB


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Propagate or generate X-Request-ID for every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())

        # Stored on request state for the error handlers
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Enforce maximum request body size."""

    def __init__(self, app: ASGIApp, max_size: int = DEFAULT_MAX_REQUEST_SIZE) -> None:
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method not in ("POST", "PUT", "PATCH"):
            return await call_next(request)

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            size = int(content_length)
            if size > self.max_size:
                logger.warning(
                    "Rejected %s %s: body of %d bytes exceeds %d",
                    request.method,
                    request.url.path,
                    size,
                    self.max_size,
                )
                return error_response(
                    request,
                    413,
                    ErrorCode.PAYLOAD_TOO_LARGE,
                    f"Request body too large: {size} bytes (max: {self.max_size})",
                )

        return await call_next(request)
