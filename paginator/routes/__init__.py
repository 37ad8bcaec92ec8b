"""APIRouter registration for the list service."""

from __future__ import annotations

from fastapi import APIRouter

from paginator.routes.health import router as health_router
from paginator.routes.items import router as items_router
from paginator.routes.spa import router as spa_router

api_router = APIRouter()
api_router.include_router(items_router, tags=["Items"])
api_router.include_router(health_router, tags=["Health"])

__all__ = ["api_router", "spa_router"]
