"""API route aggregation.

All routers registered here get mounted in main.py. Authentication is
declared per route (Depends(get_current_user_id) / require_polka_key)
because open and protected endpoints share the same prefixes.
"""

from fastapi import APIRouter

from chirpy.api.admin import router as admin_router
from chirpy.api.auth import router as auth_router
from chirpy.api.chirps import router as chirps_router
from chirpy.api.health import router as health_router
from chirpy.api.users import router as users_router
from chirpy.api.webhooks import router as webhooks_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(chirps_router, tags=["chirps"])
api_router.include_router(webhooks_router, tags=["webhooks"])

__all__ = ["api_router", "admin_router"]
