"""Main application module.

This module builds the FastAPI application, includes routes,
and configures middleware and exception handlers.
"""

import os
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import build_api_router
from app.core.config import Settings, settings as default_settings
from app.core.logging import setup_logging
from app.db.base import Database
from app.middleware.logging import LoggingMiddleware
from app.services.validator import URLValidator


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup and release the engine on shutdown."""
    settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")

    try:
        await database.create_tables()
        logger.info("Database connection established")
    except Exception as e:
        # Requests will fail at the store layer until the database is reachable
        logger.error("Database connection failed", error=str(e))

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")
    await database.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    settings: Settings = app.state.settings

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods on known paths are both unmatched routes
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors with detailed information."""
        logger.warning(f"Request validation error: {exc}")
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error", "errors": exc.errors()}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler to catch and log all unhandled exceptions."""
        error_id = f"error-{time.time()}"
        logger.opt(exception=exc).error(
            f"Unhandled exception in {request.method} {request.url.path}",
            error_id=error_id,
            url=str(request.url),
            method=request.method,
            path_params=request.path_params,
            client_host=request.client.host if request.client else None
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to process request",
                "error_id": error_id,
                "message": str(exc) if settings.DEBUG else "Internal server error"
            }
        )


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    validator: Optional[URLValidator] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; the environment-loaded settings by default
        database: Record store handle; built from ``settings.DATABASE_URL`` by default
        validator: URL validator; DNS-backed unless disabled in settings

    Returns:
        FastAPI: The configured application
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)
    app.state.validator = validator or URLValidator.from_settings(settings)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.REQUEST_LOGGING_ENABLED:
        app.add_middleware(LoggingMiddleware)

    if os.path.isdir(settings.STATIC_DIR):
        app.mount("/public", StaticFiles(directory=settings.STATIC_DIR), name="public")
    else:
        logger.warning(f"Static directory {settings.STATIC_DIR} not found; /public disabled")

    app.include_router(build_api_router(settings.API_PREFIX))
    register_exception_handlers(app)

    return app


def run() -> None:
    """Console entry point: configure logging and serve on HOST:PORT."""
    setup_logging(default_settings)
    application = create_app(default_settings)
    logger.info(f"Listening on port {default_settings.PORT}")
    uvicorn.run(
        application,
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower(),
        log_config=None,
    )
