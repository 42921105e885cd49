import logging
from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from nexus_leave.config import get_settings
from nexus_leave.db import SessionDep
from nexus_leave.limiter import limiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Liveness response including database reachability."""

    status: Literal["ok", "degraded"]
    version: str
    environment: str
    database: Literal["connected", "disconnected"]
    timestamp: datetime


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Return the health status of the API service."""
    settings = get_settings()
    status: Literal["ok", "degraded"] = "ok"
    database: Literal["connected", "disconnected"] = "connected"

    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check: database connectivity failed")
        status = "degraded"
        database = "disconnected"

    return HealthResponse(
        status=status,
        version=settings.app_version,
        environment=settings.environment,
        database=database,
        timestamp=datetime.now(UTC),
    )


# Liveness checks are never rate limited.
limiter.exempt(health)
