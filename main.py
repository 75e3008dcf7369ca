"""
MenuBoard FastAPI Application
Entry point: builds the app from settings, wires services, middleware and routes.

Run with:
    uvicorn main:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from api.routes import data, headings, meals, health
from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    service_validation_exception_handler,
    not_found_exception_handler,
    storage_exception_handler,
    general_exception_handler,
)
from app.config import Settings
from app.exceptions import ServiceValidationError, NotFoundError, StorageIOError
from services import ServiceContainer

_logger = logging.getLogger("menuboard.main")


def create_app(
    settings: Optional[Settings] = None, container: Optional[ServiceContainer] = None
) -> FastAPI:
    """
    Build the application.

    Settings and the service container are created here, once per process,
    and handed to request handlers through ``app.state``.
    """
    if settings is None:
        settings = container.settings if container is not None else Settings()

    # Setup logging with configured level and format
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=settings.log_format,
    )

    if container is None:
        container = ServiceContainer.build(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _logger.info(
            "Starting %s in %s mode (storage: %s, uploads: %s)",
            settings.app_name,
            settings.environment.value,
            container.stores.backend.value,
            settings.upload_dir.resolve(),
        )
        try:
            yield
        finally:
            _logger.info("Shutting down %s", settings.app_name)
            container.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.app_version,
        description=settings.api_description,
        lifespan=lifespan,
        debug=settings.debug,
        openapi_url="/openapi.json" if not settings.is_production() else None,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
    )
    app.state.container = container

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ServiceValidationError, service_validation_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_exception_handler)
    app.add_exception_handler(StorageIOError, storage_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(health.router)
    app.include_router(data.router)
    app.include_router(headings.router)
    app.include_router(meals.router)

    # Uploaded photos, read-only
    app.mount(
        settings.upload_url_prefix,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )

    return app


if __name__ == "__main__":
    _settings = Settings()
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=_settings.host,
        port=_settings.port,
        reload=_settings.is_development(),
        log_level=_settings.log_level.lower(),
    )
