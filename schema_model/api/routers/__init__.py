"""
API routers bundled with the adapter.
"""

from schema_model.api.routers.health import router as health_router

__all__ = ["health_router"]
