"""Health check routes module."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Request

from api.config import config
from api.models import HealthResponse

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Health check endpoint."""
    try:
        db_status = "unknown"
        db_service = getattr(request.app.state, "db_service", None)
        if db_service:
            health_info = await db_service.health_check()
            db_status = health_info.get("status", "unknown")

        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.now(timezone.utc),
            version=config.api_version,
            database_status=db_status
        )
    except Exception as e:
        logger.error("Health check failed", error=str(e))
        return HealthResponse(
            status="unhealthy",
            timestamp=datetime.now(timezone.utc),
            version=config.api_version,
            database_status="unhealthy"
        )
