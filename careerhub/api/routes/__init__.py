"""
API Routes - Combines all REST route modules into single router.
The realtime WebSocket router is mounted separately, outside /api.
"""

from fastapi import APIRouter

from careerhub.api.routes.auth_routes import router as auth_router
from careerhub.api.routes.message_routes import router as message_router
from careerhub.api.routes.notification_routes import router as notification_router
from careerhub.api.routes.follow_routes import router as follow_router
from careerhub.api.routes.realtime_routes import router as realtime_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(message_router)
api_router.include_router(notification_router)
api_router.include_router(follow_router)

__all__ = ["api_router", "realtime_router"]
