"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request

from rugguard import __version__
from rugguard.core.config import get_settings
from rugguard.core.logging import setup_logging
from rugguard.api.errors import register_error_handlers
from rugguard.api.middleware.request import RequestIDMiddleware, RequestSizeLimitMiddleware
from rugguard.api.routes import detect, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup and shutdown events."""
    settings = get_settings()
    setup_logging(
        env=settings.app_env,
        log_level="DEBUG" if settings.debug else settings.log_level,
    )
    logger.info("Starting %s in %s mode", settings.app_name, settings.app_env)
    yield
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="RugGuard Detector",
        description=(
            "Flags rugpull heuristics in enriched EVM transaction traces: "
            "ownership transfer, blacklisting, minting, liquidity removal, "
            "fee manipulation, balance concentration and large balance drops."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url=None if settings.app_env == "production" else "/api/docs",
        redoc_url=None,
        openapi_url=None if settings.app_env == "production" else "/api/openapi.json",
        openapi_tags=[
            {"name": "health", "description": "Liveness and readiness probes"},
            {"name": "detection", "description": "Transaction trace analysis"},
        ],
    )

    # ── Middleware (outermost last) ──────────────────────────────────
    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.max_request_size)
    app.add_middleware(RequestIDMiddleware)

    # ── Access logging middleware ────────────────────────────────────
    @app.middleware("http")
    async def access_log(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s → %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
            extra={"method": request.method, "path": request.url.path,
                   "status_code": response.status_code, "duration_ms": round(elapsed, 1)},
        )
        return response

    # ── Routes ───────────────────────────────────────────────────────
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(detect.router, prefix="/api", tags=["detection"])

    # ── Structured error handlers ──────────────────────────────────
    register_error_handlers(app)

    return app


app = create_app()
