import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from recruiting.core.config import settings
from recruiting.core.database import build_engine, build_session_factory, init_db
from recruiting.core.logging_config import setup_logging
from recruiting.core.storage import build_storage
from recruiting.api.endpoints import applications, auth, health, submissions
from recruiting.services.lifecycle import policy_from_settings
from recruiting.services.notifications import NotificationDispatcher

setup_logging(settings.LOG_LEVEL, settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the collaborators once per process and share them with every request.

    The yielded mapping becomes request.state in this app and in the mounted
    sub-applications.
    """
    # Startup
    logger.info("Starting up Recruiting Portal API...")
    engine = build_engine(settings.DATABASE_URL)
    init_db(engine, create_tables=settings.AUTO_CREATE_TABLES)
    logger.info("Database initialized successfully")

    storage = build_storage(settings)
    logger.info(f"Using {type(storage).__name__} for application videos")

    notifier = NotificationDispatcher(enabled=settings.notifications_enabled)
    if not notifier.enabled:
        logger.warning("RESEND_API_KEY not set - new application notifications are disabled")

    yield {
        "session_factory": build_session_factory(engine),
        "storage": storage,
        "notifier": notifier,
        "transition_policy": policy_from_settings(settings.LOCK_TERMINAL_STATUSES),
    }

    # Shutdown
    logger.info("Shutting down Recruiting Portal API...")
    engine.dispose()


# Public endpoints for the landing page; they send their own CORS headers
functions_app = FastAPI(title=f"{settings.PROJECT_NAME} - Functions")
functions_app.include_router(submissions.router)

# Admin API used by the dashboard
api_app = FastAPI(title=f"{settings.PROJECT_NAME} - Admin")
api_app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
api_app.include_router(auth.router)
api_app.include_router(applications.router)
api_app.include_router(health.router)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Recruiting landing page backend: application intake and admin triage",
    lifespan=lifespan
)
app.include_router(health.router)
app.mount(settings.FUNCTIONS_STR, functions_app)
app.mount(settings.API_V1_STR, api_app)

if not settings.USE_S3:
    # LocalStorage public URLs point here
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/")
async def root():
    """Root endpoint - API health check"""
    return {
        "message": "Recruiting Portal API",
        "version": "1.0.0",
        "status": "healthy"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
