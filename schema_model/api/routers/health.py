"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: fastapi, sqlalchemy, schema_model.api.deps
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from schema_model.api.deps import get_model_registry
from schema_model.api.registry import ModelRegistry

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


class DatabaseHealthResponse(HealthResponse):
    """Per-model database health."""

    models: dict[str, str]


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=DatabaseHealthResponse)
def health_check_db(registry: ModelRegistry = Depends(get_model_registry)):
    """Ping the storage of every registered model."""
    results: dict[str, str] = {}
    for model in registry.models():
        try:
            model.storage.ping()
            results[model.model_name] = "ok"
        except SQLAlchemyError as e:
            logger.warning(
                "Database health check failed",
                extra={"model": model.model_name, "error_type": type(e).__name__},
            )
            results[model.model_name] = "unavailable"

    if all(state == "ok" for state in results.values()):
        return DatabaseHealthResponse(status="healthy", message="Database connection OK", models=results)

    body = DatabaseHealthResponse(status="unhealthy", message="Database connection failed", models=results)
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump())
