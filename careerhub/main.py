"""
CareerHub - Main Application

FastAPI backend with:
- MongoDB for every durable entity (profiles, messages, conversations, notifications)
- JWT authentication for students and recruiters
- WebSocket realtime hub for presence, typing, messages and notifications

Run: uvicorn careerhub.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from careerhub.api.routes import api_router, realtime_router
from careerhub.core.config import get_settings
from careerhub.core.errors import CareerHubError
from careerhub.core.logging import configure_logging
from careerhub.db.mongodb import close_mongo_client, get_mongo_db, init_mongo_indexes, test_mongo_connection
from careerhub.services.mongo_service import ProfileService
from careerhub.services.presence_registry import PresenceRegistry
from careerhub.services.realtime_hub import RealtimeHub

settings = get_settings()
configure_logging(settings)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="CareerHub",
    description="""
    Job and internship marketplace backend.

    ## Features
    - **Authentication**: JWT-based auth for students and recruiters
    - **Messages**: Direct messages with one conversation per pair of users
    - **Notifications**: Durable feed with live push
    - **Follow**: Students and recruiters follow each other
    - **Realtime**: `/ws` for presence, typing indicators and read receipts
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")
app.include_router(realtime_router)


# ============================================================
# ERROR ENVELOPE: {"success": false, "error": ...}
# ============================================================

def _error(status_code: int, error, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error}, headers=headers)


@app.exception_handler(CareerHubError)
async def careerhub_error_handler(request: Request, exc: CareerHubError):
    return _error(exc.status_code, exc.detail)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return _error(422, [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ])


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return _error(500, "Database error")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


# ============================================================
# LIFECYCLE
# ============================================================

@app.on_event("startup")
async def startup_event():
    """Open MongoDB, create indexes and build the realtime hub."""
    db = get_mongo_db()
    app.state.db = db
    try:
        init_mongo_indexes(db)
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)

    profiles = ProfileService(db)
    app.state.presence = PresenceRegistry()
    app.state.hub = RealtimeHub(app.state.presence, on_offline=profiles.touch_last_seen)
    logger.info("Realtime hub ready")


@app.on_event("shutdown")
async def shutdown_event():
    await app.state.hub.close()
    close_mongo_client()


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection(app.state.db) else "disconnected",
        "online_users": len(app.state.presence.online_user_ids())
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "careerhub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        ws_ping_interval=settings.ws_ping_interval,
        ws_ping_timeout=settings.ws_ping_timeout,
    )
