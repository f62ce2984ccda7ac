"""Admin report routes.

Routes:
    GET    /admin/best-profession?start=&end=       : Top-earning profession
    GET    /admin/best-clients?start=&end=&limit=   : Top-paying clients
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002 - resolved at runtime by FastAPI

from marketplace_api.api.deps import get_app_settings, get_current_profile, get_db_session
from marketplace_api.config import Settings  # noqa: TC001
from marketplace_api.schemas.marketplace import BestClientResponse
from marketplace_api.services.report_service import ReportService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(get_current_profile)],
)


@router.get(
    "/best-profession",
    response_model=str,
    summary="Profession that earned the most",
    responses={400: {"description": "Invalid start or end date"}},
)
async def best_profession(
    start: str | None = Query(default=None, examples=["2020-08-10"]),
    end: str | None = Query(default=None, examples=["2020-08-17"]),
    session: AsyncSession = Depends(get_db_session),
) -> str:
    """Return the profession with the highest paid total, or a fallback message."""
    svc = ReportService(session)
    return await svc.best_profession(start, end)


@router.get(
    "/best-clients",
    response_model=list[BestClientResponse],
    summary="Clients that paid the most",
    responses={400: {"description": "Invalid dates or limit"}},
)
async def best_clients(
    start: str | None = Query(default=None, examples=["2020-08-10"]),
    end: str | None = Query(default=None, examples=["2020-08-17"]),
    limit: int | None = Query(default=None, description="Defaults to 2"),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> list[BestClientResponse]:
    """Return the top clients by paid total, highest first."""
    svc = ReportService(session)
    clients = await svc.best_clients(
        start,
        end,
        limit if limit is not None else settings.best_clients_default_limit,
    )
    return [BestClientResponse.model_validate(c) for c in clients]
