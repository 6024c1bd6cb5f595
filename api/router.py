"""Main API router that includes versioned routers."""

from fastapi import APIRouter

from api.v1 import cron, health, signups
from api.v1.admin import signups as admin_signups

# Main API router
api_router = APIRouter()

# Include v1 routers
v1_router = APIRouter(prefix="/v1")
v1_router.include_router(health.router, tags=["health"])
v1_router.include_router(signups.router, tags=["signups"])
v1_router.include_router(admin_signups.router, tags=["admin"])
v1_router.include_router(cron.router, tags=["cron"])

api_router.include_router(v1_router)
