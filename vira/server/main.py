"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request timing), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vira import __version__
from vira.core.database import init_db
from vira.core.logging_config import get_logger, setup_logging
from vira.core.monitoring import initialize_logfire

from .api.v1 import (
    admin,
    chat,
    clients,
    cron,
    dashboard,
    health,
    match,
    notifications,
    projects,
    ratings,
    reviews,
    users,
    vendor_applications,
    vendor_invites,
    vendor_portal,
    vendors,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the tables on startup when ``DATABASE_AUTO_CREATE`` is on; deployed
    databases are migrated with Alembic instead.
    """
    # Startup
    try:
        logger.info("Starting up ViRA Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down ViRA Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    ViRA Server API

    Vendor relationship management: vendors, clients, projects and their ratings,
    review assignments, vendor onboarding, CSV import/export and ViRA Match
    vendor recommendations.
    """,
    version=__version__,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)


app.include_router(health.router, tags=["health"])
app.include_router(vendors.router, prefix=f"{constant.API_V1_STR}/vendors", tags=["vendors"])
app.include_router(clients.router, prefix=f"{constant.API_V1_STR}/clients", tags=["clients"])
app.include_router(projects.router, prefix=f"{constant.API_V1_STR}/projects", tags=["projects"])
app.include_router(ratings.router, prefix=f"{constant.API_V1_STR}/ratings", tags=["ratings"])
app.include_router(users.router, prefix=f"{constant.API_V1_STR}/users", tags=["users"])
app.include_router(notifications.router, prefix=f"{constant.API_V1_STR}/notifications", tags=["notifications"])
app.include_router(reviews.router, prefix=f"{constant.API_V1_STR}/reviews", tags=["reviews"])
app.include_router(cron.router, prefix=f"{constant.API_V1_STR}/cron", tags=["cron"])
app.include_router(vendor_invites.router, prefix=f"{constant.API_V1_STR}/vendor-invites", tags=["vendor-invites"])
app.include_router(
    vendor_applications.router, prefix=f"{constant.API_V1_STR}/vendor-applications", tags=["vendor-applications"]
)
app.include_router(vendor_portal.router, prefix=f"{constant.API_V1_STR}/vendor-portal", tags=["vendor-portal"])
app.include_router(admin.router, prefix=f"{constant.API_V1_STR}/admin", tags=["admin"])
app.include_router(match.router, prefix=f"{constant.API_V1_STR}/match", tags=["match"])
app.include_router(chat.router, prefix=f"{constant.API_V1_STR}/chat", tags=["chat"])
app.include_router(dashboard.router, prefix=f"{constant.API_V1_STR}/dashboard", tags=["dashboard"])
