"""Contract and job REST API routes.

Routes:
    GET    /contracts/{id}      : A contract the caller is a party to
    GET    /contracts           : The caller's non-terminated contracts
    GET    /jobs/unpaid         : The caller's unpaid jobs on in-progress contracts
    POST   /jobs/{job_id}/pay   : Pay a job (clients only)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: TC002 - resolved at runtime by FastAPI

from marketplace_api.api.deps import get_current_profile, get_db_session
from marketplace_api.infrastructure.database.orm_models import Profile  # noqa: TC001
from marketplace_api.schemas.marketplace import ContractResponse, JobResponse
from marketplace_api.services.contract_service import ContractService
from marketplace_api.services.payment_service import PaymentService

router = APIRouter(tags=["Contracts"])


@router.get(
    "/contracts/{contract_id}",
    response_model=ContractResponse,
    summary="Get a contract",
    responses={403: {"description": "Contract missing or caller is not a party"}},
)
async def get_contract(
    contract_id: int,
    profile: Profile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
) -> ContractResponse:
    """Fetch a contract the caller is the client or contractor of."""
    svc = ContractService(session)
    contract = await svc.get_contract(profile, contract_id)
    return ContractResponse.model_validate(contract)


@router.get(
    "/contracts",
    response_model=list[ContractResponse],
    summary="List active contracts",
)
async def list_contracts(
    profile: Profile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
) -> list[ContractResponse]:
    """Return the caller's contracts with status new or in_progress."""
    svc = ContractService(session)
    contracts = await svc.list_active_contracts(profile)
    return [ContractResponse.model_validate(c) for c in contracts]


@router.get(
    "/jobs/unpaid",
    response_model=list[JobResponse],
    summary="List unpaid jobs",
)
async def list_unpaid_jobs(
    profile: Profile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
) -> list[JobResponse]:
    """Return the caller's unpaid jobs on in-progress contracts."""
    svc = ContractService(session)
    jobs = await svc.list_unpaid_jobs(profile)
    return [JobResponse.model_validate(j) for j in jobs]


@router.post(
    "/jobs/{job_id}/pay",
    status_code=201,
    summary="Pay for a job",
    responses={
        400: {"description": "Already paid, insufficient balance or transaction failure"},
        403: {"description": "Caller is not a client"},
        404: {"description": "No payable job with this id for the caller"},
    },
)
async def pay_job(
    job_id: int,
    profile: Profile = Depends(get_current_profile),
    session: AsyncSession = Depends(get_db_session),
) -> Response:
    """Move the job price from the client's balance to the contractor's."""
    svc = PaymentService(session)
    await svc.pay_job(profile, job_id)
    return Response(status_code=201)
