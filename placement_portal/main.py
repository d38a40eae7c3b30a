"""
Placement Portal - Main Application

FastAPI backend with:
- MongoDB for users, companies and applications
- JWT authentication with student / tpo / admin roles
- Resume uploads stored on disk and served from /uploads
- Built React frontend served from /frontend/dist when present

Run: uvicorn placement_portal.main:app --reload
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from slowapi.middleware import SlowAPIMiddleware

from placement_portal import __version__
from placement_portal.api.routes import api_router
from placement_portal.core.config import Settings, get_settings
from placement_portal.core.errors import register_exception_handlers
from placement_portal.core.logging import configure_logging
from placement_portal.core.rate_limit import limiter
from placement_portal.db.mongodb import MongoStore

logger = logging.getLogger(__name__)

# Get the project root directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
FRONTEND_DIR = os.path.join(PROJECT_ROOT, "frontend", "dist")


def create_app(settings: Optional[Settings] = None, store: Optional[MongoStore] = None) -> FastAPI:
    """
    Build the FastAPI app.

    `store` defaults to a MongoStore on settings.mongodb_uri; it is opened on
    startup and closed on shutdown either way.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Placement Portal",
        description="""
    Campus placement management API.

    ## Roles
    - **Students**: profile, resume upload, eligible companies, apply, track applications
    - **TPOs** (placement officers): manage companies, move applicants through rounds
    - **Admins**: everything TPOs can do, plus user management

    ## Data
    - MongoDB: users, companies (job listings), applications
    """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.settings = settings
    app.state.store = store or MongoStore(settings.mongodb_uri, settings.mongodb_db)

    # CORS: configured origins in production, anything during development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins if settings.is_production else ["*"],
        allow_credentials=settings.is_production,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Rate limits: /api per client, stricter on /api/auth (see core/rate_limit.py)
    limiter.enabled = settings.is_production
    app.state.limiter = limiter
    if settings.is_production:
        app.add_middleware(SlowAPIMiddleware)

    register_exception_handlers(app, expose_internal_errors=not settings.is_production)

    # Include API routes
    app.include_router(api_router, prefix="/api")

    # Uploaded resumes (directory is created on startup)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    @app.on_event("startup")
    async def startup_event():
        """Open the store, make sure indexes exist and the upload directory is there."""
        os.makedirs(settings.upload_dir, exist_ok=True)
        app.state.store.open()
        app.state.store.init_indexes()

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.store.close()

    @app.get("/health", tags=["Health"])
    @limiter.exempt
    async def health_check():
        """Liveness plus MongoDB reachability."""
        return {
            "status": "healthy",
            "environment": settings.environment,
            "mongodb": "connected" if app.state.store.ping() else "disconnected",
        }

    if os.path.exists(FRONTEND_DIR):
        app.mount("/assets", StaticFiles(directory=os.path.join(FRONTEND_DIR, "assets"), check_dir=False), name="assets")

    @app.get("/", tags=["Frontend"])
    @limiter.exempt
    async def serve_frontend():
        """Serve the React frontend, or a status message if it isn't built."""
        index_path = os.path.join(FRONTEND_DIR, "index.html")
        if os.path.exists(index_path):
            return FileResponse(index_path)
        return {"status": "healthy", "app": "Placement Portal", "message": "Frontend not found. API is running."}

    return app


app = create_app()
