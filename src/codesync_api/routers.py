"""Aggregate feature routers under the API prefix."""

from __future__ import annotations

from fastapi import APIRouter

from codesync_api.features.health.router import router as health_router
from codesync_api.features.sessions.router import router as sessions_router
from codesync_api.features.tree.router import router as tree_router

api_router = APIRouter()
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(sessions_router, prefix="/sessions", tags=["sessions"])
api_router.include_router(tree_router, prefix="/tree", tags=["tree"])

__all__ = ["api_router"]
