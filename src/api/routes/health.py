"""Health check endpoints."""

from datetime import datetime

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from infrastructure.database.session import get_async_session

logger = structlog.get_logger()

router = APIRouter(tags=["health"])

API_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    environment: str
    database: str | None = None


@router.get("/health", response_model=HealthResponse, summary="Basic health check")
async def health_check() -> HealthResponse:
    """
    Basic health check for load balancers.

    Returns service status without checking dependencies.
    """
    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
    )


@router.get(
    "/health/detailed",
    response_model=HealthResponse,
    summary="Detailed health check",
)
async def detailed_health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Health check including user store connectivity.

    The database error itself is logged, never returned.
    """
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError:
        logger.exception("health_database_unreachable")
        db_status = "unhealthy"

    return HealthResponse(
        status="healthy" if db_status == "healthy" else "degraded",
        version=API_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
        database=db_status,
    )
