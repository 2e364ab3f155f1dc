"""Version 1 API routers."""

from fastapi import APIRouter

from .admin_ajax import router as admin_ajax_router
from .notices import router as notices_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(notices_router)

__all__ = ["api_router", "admin_ajax_router"]
