"""API routes for NextVOD"""

from fastapi import APIRouter

from .health import router as health_router
from .next_vod import get_advancer, router as next_vod_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(next_vod_router)

__all__ = ["api_router", "get_advancer"]
