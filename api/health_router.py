"""
Health and Monitoring Router.

Public, unauthenticated endpoints for uptime checks.

Endpoints Provided:
- `/healthcheck`: Lightweight liveness check that never touches the database.
- `/monitoring/ping`: Simple connectivity test.
- `/monitoring/detailed`: Checks the database connection and reports
  "degraded" instead of failing when it is unreachable.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from core.database import get_database_info
from core.logging_config import get_logger

logger = get_logger(__name__)

SERVICE_NAME = "DevConnector API"
SERVICE_VERSION = "1.0.0"

health_router = APIRouter(tags=["Health & Monitoring"])
monitoring_router = APIRouter(prefix="/monitoring", tags=["Health & Monitoring"])


@health_router.get("/healthcheck")
async def health_check() -> Dict[str, Any]:
    """Basic health check endpoint (no authentication required)"""
    logger.debug("Health check requested")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": SERVICE_VERSION,
        "service": SERVICE_NAME,
    }


@monitoring_router.get("/ping")
async def ping() -> Dict[str, str]:
    """Simple ping endpoint for connectivity testing"""
    return {
        "message": "pong",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": SERVICE_VERSION,
    }


@monitoring_router.get("/detailed")
async def detailed_health_check() -> Dict[str, Any]:
    """Health check including the database connection"""
    database = await get_database_info()
    status = "healthy" if database["connection_healthy"] else "degraded"
    if status != "healthy":
        logger.warning("Detailed health check reports degraded database")

    return {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": SERVICE_VERSION,
        "components": {"database": database},
    }
