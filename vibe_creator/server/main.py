"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
rate limiting, request monitoring), registers the exception handlers and
includes all API routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from vibe_creator.core.database import init_db
from vibe_creator.core.logging_config import get_logger, setup_logging
from vibe_creator.core.monitoring import initialize_logfire

from .api.v1 import (
    admin,
    announcements,
    auth,
    exports,
    health,
    payments,
    projects,
    prompts,
    uploads,
)
from .core import constant
from .core.config import settings
from .core.rate_limit import limiter
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.storage import get_storage

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the upload directories and, outside production, any missing
    database tables.
    """
    # Startup
    logger.info(f"Starting up {constant.PROJECT_NAME} Server ({settings.environment})...")
    get_storage().ensure_directories()
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info(f"Shutting down {constant.PROJECT_NAME} Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Vibe Creator Server API

    Backend for the Vibe Creator video editor: accounts and sessions, editing
    projects, versioned AI prompt briefs, video uploads, export rendering,
    subscriptions paid through Xendit, and the admin dashboard.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)


app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth", tags=["auth"])
app.include_router(projects.router, prefix=f"{constant.API_V1_STR}/projects", tags=["projects"])
app.include_router(prompts.router, prefix=f"{constant.API_V1_STR}/prompts", tags=["prompts"])
app.include_router(uploads.router, prefix=f"{constant.API_V1_STR}/upload", tags=["uploads"])
app.include_router(exports.router, prefix=f"{constant.API_V1_STR}/export", tags=["exports"])
app.include_router(payments.router, prefix=f"{constant.API_V1_STR}/payment", tags=["payments"])
app.include_router(admin.router, prefix=f"{constant.API_V1_STR}/admin", tags=["admin"])
app.include_router(announcements.router, prefix=f"{constant.API_V1_STR}/announcements", tags=["announcements"])


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run(
        "vibe_creator.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_config=None,
    )
