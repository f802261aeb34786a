"""
FastAPI application factory.

Builds an application with the given models registered, the health
router mounted, and model storages disposed on shutdown.

Dependencies: fastapi, schema_model.api
System role: Application entry point for hosting schema models
"""

import logging
from contextlib import asynccontextmanager
from typing import Iterable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from schema_model.api.deps import install_models
from schema_model.api.routers import health_router
from schema_model.boundary.db.cursors import CacheBackend
from schema_model.configs import get_settings
from schema_model.core.exceptions import UnknownModelError
from schema_model.model import SchemaModel

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Disposes every registered model's connection pool on shutdown.
    """
    yield

    registry = getattr(app.state, "models", None)
    if registry is not None:
        registry.dispose()
        logger.info("Model storages disposed")


async def unknown_model_handler(request: Request, exc: UnknownModelError) -> JSONResponse:
    logger.warning("Unknown model requested", extra={"error": str(exc)})
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


def create_app(models: Iterable[SchemaModel] = (), cache: CacheBackend | None = None) -> FastAPI:
    """
    Create and configure FastAPI application hosting schema models.

    Process entry points call ``configure_logging()`` before this.

    Args:
        models: Constructed models to register
        cache: Application cache for cursor caching

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Schema Model API",
        description="SQLAlchemy schemas exposed as application models",
        version="0.1.0",
        lifespan=lifespan,
    )

    install_models(app, *models, cache=cache)
    app.add_exception_handler(UnknownModelError, unknown_model_handler)

    app.include_router(health_router, prefix=settings.api_prefix)

    return app
