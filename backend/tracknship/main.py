"""
FastAPI Application Entry Point.

This is the main application file for the TrackNShip backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from backend.tracknship.core.config import settings
from backend.tracknship.api.v1.router import router as api_v1_router
from backend.tracknship.core.observability import ObservabilityMiddleware, configure_logging
from backend.tracknship.core.redis_client import ping_redis, close_redis
from backend.tracknship.db.session import init_db, dispose_engine
from backend.tracknship.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    store_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from backend.tracknship.models.user import User
from backend.tracknship.models.booking import Booking
from backend.tracknship.models.review import Review
from backend.tracknship.models.payment import Payment

configure_logging(settings.log_level)
logger = logging.getLogger("tracknship")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Creates database tables and checks the store answers.
    2. Checks Redis (token revocation fails open if it is down).
    3. Disposes the engine and closes Redis on shutdown.
    """
    await init_db()
    if not await ping_redis():
        logger.warning("Redis unreachable at startup; token revocation checks will fail open")
    logger.info("%s %s started", settings.app_name, settings.api_version)
    yield
    await dispose_engine()
    await close_redis()
    logger.info("%s stopped", settings.app_name)

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Parcel booking, delivery tracking and delivery-man leaderboard API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, store_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


# Include API v1 router
app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.

    Returns:
        dict: Welcome message and API documentation links
    """
    return {
        "message": "Hello from TrackNShip",
        "docs": "/docs",
        "health": "/health",
    }
