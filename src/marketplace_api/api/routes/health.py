"""Health check endpoint.

Unauthenticated. Reports "degraded" instead of failing when the database
cannot be reached, so load balancers can tell the process is up.
"""

from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from marketplace_api.config import get_settings
from marketplace_api.logging_config import get_logger
from marketplace_api.schemas.marketplace import HealthResponse

router = APIRouter(tags=["Health"])
logger = get_logger(__name__)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check() -> HealthResponse:
    from marketplace_api.infrastructure.database.engine import _get_engine

    try:
        async with _get_engine().connect() as conn:
            await conn.scalar(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.error("health.db_check_failed", error=str(exc))
        return HealthResponse(
            status="degraded",
            version=get_settings().app_version,
            database=f"unhealthy: {exc}",
        )

    return HealthResponse(status="ok", version=get_settings().app_version, database="healthy")
