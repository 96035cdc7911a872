"""
API Routes
"""

from fastapi import APIRouter

from .brand_monitor import router as brand_monitor_router

api_router = APIRouter()

api_router.include_router(brand_monitor_router, prefix="/brand-monitor", tags=["Brand Monitor"])
