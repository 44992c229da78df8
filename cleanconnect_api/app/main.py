"""
Main entrypoint for the CleanConnect API.

This module assembles the FastAPI application: logging, CORS, the
global error handlers and the versioned routers.  ``create_app`` builds
the app, which is instantiated at import time as ``app`` so it can be
served directly::

    uvicorn cleanconnect_api.app.main:app --reload
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.logging_config import setup_logging
from .core.responses import envelope, register_error_handlers


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured application with all v1 routes under ``/api/v1``.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_error_handlers(app)

    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/", tags=["health"], summary="Service status")
    async def root() -> dict:
        return envelope(message=f"{settings.project_name} is running")

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file on first start and applies pending migrations.
        init_db()

    return app


app = create_app()
