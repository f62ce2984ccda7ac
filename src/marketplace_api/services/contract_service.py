"""Contract Service: what a caller can see of their contracts and jobs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from marketplace_api.domain.enums import ContractStatus
from marketplace_api.domain.exceptions import ContractAccessDeniedError
from marketplace_api.infrastructure.database.repositories import (
    ContractRepository,
    JobRepository,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from marketplace_api.infrastructure.database.orm_models import Contract, Job, Profile


class ContractService:
    """Read access to contracts and jobs, scoped to the calling profile."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._contract_repo = ContractRepository(session)
        self._job_repo = JobRepository(session)

    async def get_contract(self, caller: Profile, contract_id: int) -> Contract:
        """Get a contract the caller is a party to.

        A missing contract and someone else's contract both raise
        ContractAccessDeniedError.
        """
        contract = await self._contract_repo.get_for_party(contract_id, caller.id)
        if contract is None:
            raise ContractAccessDeniedError(contract_id)
        return contract

    async def list_active_contracts(self, caller: Profile) -> list[Contract]:
        """Non-terminated contracts where the caller is on their own side."""
        return await self._contract_repo.list_for_profile(caller, ContractStatus.active())

    async def list_unpaid_jobs(self, caller: Profile) -> list[Job]:
        return await self._job_repo.list_unpaid_for_profile(caller)
