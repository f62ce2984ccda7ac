"""Balance REST API routes.

Routes:
    POST   /balances/deposit/{user_id} : Deposit into a client's balance
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002 - resolved at runtime by FastAPI

from marketplace_api.api.deps import get_current_profile, get_db_session
from marketplace_api.schemas.marketplace import DepositRequest
from marketplace_api.services.payment_service import PaymentService

router = APIRouter(
    prefix="/balances",
    tags=["Balances"],
    dependencies=[Depends(get_current_profile)],
)


@router.post(
    "/deposit/{user_id}",
    status_code=201,
    summary="Deposit money into a client's balance",
    responses={
        400: {"description": "Not a client, invalid amount, or above the 25% cap"},
        404: {"description": "Profile not found"},
    },
)
async def deposit(
    user_id: int,
    request: DepositRequest,
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Deposit into any client's balance. Any authenticated caller may do this."""
    svc = PaymentService(session)
    await svc.deposit(user_id, request.value)
    return Response(status_code=201)
