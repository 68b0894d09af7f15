"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, base0.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from base0.api.deps.dependencies import get_service_cache
from base0.boundary.db.create_tables import create_all_tables
from base0.core.exceptions import Base0Exception
from base0.models.common import ErrorResponse
from base0.observability import configure_logging

from .routers import (
    canvas_router,
    content_router,
    generate_image_router,
    health_router,
    history_router,
    storage_router,
)
from .routers.error_handling import error_response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    cache = get_service_cache()
    configure_logging(cache.settings.log_level)
    logger = logging.getLogger("uvicorn")

    # Startup
    await create_all_tables()

    logger.info("Pre-warming service cache...")
    # The image client is built on first use so a missing API key only fails generation
    _ = cache.storage_backends
    _ = cache.signers
    _ = cache.content_registry
    _ = cache.canvas_service
    logger.info("Service cache pre-warmed")

    yield

    # Shutdown
    cache.clear()
    logger.info("Service cache cleared")


async def base0_exception_handler(request: Request, exc: Base0Exception):
    """Render domain errors raised outside route bodies (e.g. in dependencies)."""
    logging.getLogger(__name__).warning(f"{request.url.path} failed: {exc.message}")
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Render malformed request bodies and parameters as a 400 validation error."""
    logging.getLogger(__name__).warning(f"{request.url.path} rejected: {len(exc.errors())} validation error(s)")
    body = ErrorResponse(error="Invalid request", kind="validation", details=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Base0 API",
        description="AI image generation with Filecoin-backed prompt history",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(Base0Exception, base0_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Register all routers with /api prefix
    app.include_router(health_router, prefix="/api")
    app.include_router(generate_image_router, prefix="/api")
    app.include_router(history_router, prefix="/api")
    app.include_router(storage_router, prefix="/api")
    app.include_router(content_router, prefix="/api")
    app.include_router(canvas_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "base0.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
