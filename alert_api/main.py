"""
FastAPI application entry point.

This is where:
- The FastAPI app is created
- Routes are registered
- Middleware is configured
- The database is checked and its schema created at startup
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from alert_api.api.routes_alerts import router as alerts_router
from alert_api.api.routes_health import router as health_router
from alert_api.core.config import Settings, settings
from alert_api.core.db import Database
from alert_api.core.errors import DatabaseUnavailableError, register_exception_handlers
from alert_api.core.logging import setup_logging


setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


# =============================================================================
# STARTUP
# =============================================================================


async def connect_database(config: Settings) -> Database:
    """
    Open the connection pool, verify the database answers and create the schema.

    Raises:
        DatabaseUnavailableError: if the first round trip fails
        SQLAlchemyError: if the schema cannot be created
    """
    database = Database.from_settings(config)

    if not await database.ping():
        await database.dispose()
        raise DatabaseUnavailableError("Database connection failed")

    try:
        await database.init_schema()
    except Exception:
        await database.dispose()
        raise

    logger.info("Database initialized successfully")
    return database


# =============================================================================
# LIFESPAN MANAGEMENT
# =============================================================================
# Any exception raised before the yield aborts startup; uvicorn then exits
# with a non-zero status.


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown."""
    # --- STARTUP ---
    logger.info("🚀 Starting Alert API...")
    try:
        app.state.database = await connect_database(settings)
    except Exception as exc:
        logger.error("Failed to start server: %s", exc)
        raise

    logger.info("Webhook endpoint: http://%s:%d/alerts", settings.host, settings.port)

    yield

    # --- SHUTDOWN ---
    await app.state.database.dispose()
    logger.info("👋 Alert API stopped")


# =============================================================================
# CREATE APPLICATION
# =============================================================================


app = FastAPI(
    title="Alert API",
    description="Webhook receiver that stores monitoring alerts",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


register_exception_handlers(app)


# =============================================================================
# REGISTER ROUTERS
# =============================================================================

app.include_router(health_router)   # /, /health
app.include_router(alerts_router)   # /alerts


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "alert_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
