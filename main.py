"""
DevConnector API - Main Application Entry Point.

This module initializes and configures the FastAPI application for the
DevConnector API: a social-profile backend where developers register, keep a
profile with their experience and education, and post, like and comment on a
shared feed.

Key Responsibilities:
- Configure and launch the FastAPI application.
- Read settings, set up logging, the database engine and the token/password
  managers in the application lifespan.
- Set up middleware for correlation, error handling, request timing and
  security headers.
- Mount the routers for health, users/auth, profiles and posts.

Architecture:
Routers translate HTTP to service calls, services own the business rules and
talk to the database through SQLModel sessions, and middleware handles the
cross-cutting concerns so individual handlers stay small.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api.auth_endpoints import router as auth_router
from api.auth_endpoints import users_router
from api.health_router import SERVICE_VERSION, health_router, monitoring_router
from api.post_endpoints import router as posts_router
from api.profile_endpoints import router as profile_router
from core.auth import init_auth
from core.config import get_settings, init_settings
from core.database import create_db_and_tables, dispose_engine, init_engine
from core.logging_config import get_logger, setup_logging
from core.middleware import (
    CorrelationMiddleware,
    ErrorHandlingMiddleware,
    PerformanceMiddleware,
    SecurityHeadersMiddleware,
    request_validation_exception_handler,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings = init_settings()
    setup_logging(settings.environment, settings.log_level)
    logger = get_logger("api.startup")

    init_engine(settings.database_url)
    await create_db_and_tables()
    logger.info("Database initialized successfully")

    init_auth(settings)
    logger.info("Authentication service initialized")

    logger.info("Service startup completed")
    yield

    # Cleanup on shutdown
    logger.info("Shutting down DevConnector API")
    await dispose_engine()
    logger.info("Cleanup completed")


def create_app() -> FastAPI:
    """Build the FastAPI application"""
    app = FastAPI(
        title="DevConnector API",
        description="Developer profiles, posts, likes and comments",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

    # Innermost first
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(PerformanceMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationMiddleware)

    # Health routers first (no authentication required for monitoring)
    app.include_router(health_router)
    app.include_router(monitoring_router)

    app.include_router(users_router)
    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(posts_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=5000,
        reload=True,
        log_level="info",
    )
