"""
Health check endpoints for monitoring and connectivity verification.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends

from ..core.config import Settings, get_settings
from ..database.mongodb import MongoDB
from .dependencies.repositories import get_mongodb

logger = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health_check(
    mongodb: MongoDB = Depends(get_mongodb),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """
    Health check endpoint.

    Reports MongoDB connectivity and the configured database.
    """
    logger.info("Health check requested")

    mongodb_status = await mongodb.health_check()
    healthy = bool(mongodb_status.get("connected", False))

    health_response = {
        "status": "ok" if healthy else "degraded",
        "environment": settings.environment,
        "dependencies": {"mongodb": mongodb_status},
        "configuration": {"database_name": settings.database_name},
    }

    if healthy:
        logger.info("Health check passed", status="healthy")
    else:
        logger.warning(
            "Health check failed",
            status="degraded",
            dependencies=health_response["dependencies"],
        )

    return health_response


@router.get("/health/ready")
async def readiness_check(
    mongodb: MongoDB = Depends(get_mongodb),
) -> dict[str, Any]:
    """Readiness probe: ready only when MongoDB answers."""
    mongodb_status = await mongodb.health_check()
    ready = bool(mongodb_status.get("connected", False))

    return {"ready": ready, "dependencies": {"mongodb": ready}}
