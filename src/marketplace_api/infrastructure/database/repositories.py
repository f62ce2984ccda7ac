"""Repository classes for database access.

Repositories encapsulate all SQL queries and provide a clean interface
to the service layer. They accept an AsyncSession and never manage
their own transactions (that's the caller's responsibility).
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.orm import aliased, contains_eager, selectinload

from marketplace_api.domain.enums import ContractStatus, ProfileType
from marketplace_api.infrastructure.database.orm_models import Contract, Job, Profile

if TYPE_CHECKING:
    from datetime import datetime

    from sqlalchemy.ext.asyncio import AsyncSession

# Primary keys are 32-bit INTEGER columns; larger ids match no row and
# would overflow the driver if bound.
MAX_ID = 2**31 - 1


def _storable_id(value: int) -> bool:
    return 1 <= value <= MAX_ID


def _party_clause(profile: Profile):
    """Restrict contracts to the ones where the profile sits on its own side."""
    if profile.type == ProfileType.CLIENT:
        return Contract.client_id == profile.id
    return Contract.contractor_id == profile.id


class ProfileRepository:
    """Data access for profiles and their balances."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, profile_id: int) -> Profile | None:
        if not _storable_id(profile_id):
            return None
        result = await self._session.execute(
            select(Profile).where(Profile.id == profile_id)
        )
        return result.scalar_one_or_none()

    async def get_with_unpaid_jobs(self, profile_id: int) -> Profile | None:
        """Fetch a profile, row-locked, with its client contracts and their unpaid jobs.

        Contracts of every status are loaded; each contract's jobs collection
        holds only jobs with paid IS NULL.
        """
        if not _storable_id(profile_id):
            return None
        result = await self._session.execute(
            select(Profile)
            .where(Profile.id == profile_id)
            .options(
                selectinload(Profile.client_contracts).selectinload(
                    Contract.jobs.and_(Job.paid.is_(None))
                )
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def add_to_balance(self, profile_id: int, amount: Decimal) -> None:
        """Add (or, with a negative amount, subtract) money in a single SQL update."""
        await self._session.execute(
            update(Profile)
            .where(Profile.id == profile_id)
            .values(balance=Profile.balance + amount)
            .execution_options(synchronize_session=False)
        )

    async def paid_totals(
        self,
        profile_type: ProfileType,
        paid_from: datetime,
        paid_before: datetime,
    ) -> list[tuple[Profile, Decimal]]:
        """Sum paid job prices per profile of one type within a payment window.

        Each profile of the type appears once, ordered by id, with a total of
        zero when none of its jobs were paid in [paid_from, paid_before).
        Jobs count through the contracts where the profile is on its own side.
        """
        party_column = (
            Contract.client_id
            if profile_type == ProfileType.CLIENT
            else Contract.contractor_id
        )
        result = await self._session.execute(
            select(Profile, func.sum(Job.price))
            .outerjoin(Contract, party_column == Profile.id)
            .outerjoin(
                Job,
                and_(
                    Job.contract_id == Contract.id,
                    Job.paid.is_(True),
                    Job.payment_date >= paid_from,
                    Job.payment_date < paid_before,
                ),
            )
            .where(Profile.type == profile_type.value)
            .group_by(Profile.id)
            .order_by(Profile.id)
        )
        return [
            (profile, Decimal(str(total)) if total is not None else Decimal(0))
            for profile, total in result.all()
        ]


class ContractRepository:
    """Data access for contracts."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_party(self, contract_id: int, profile_id: int) -> Contract | None:
        """Fetch a contract only if the profile is its client or its contractor."""
        if not _storable_id(contract_id):
            return None
        result = await self._session.execute(
            select(Contract).where(
                Contract.id == contract_id,
                or_(Contract.client_id == profile_id, Contract.contractor_id == profile_id),
            )
        )
        return result.scalar_one_or_none()

    async def list_for_profile(
        self,
        profile: Profile,
        statuses: tuple[ContractStatus, ...],
    ) -> list[Contract]:
        result = await self._session.execute(
            select(Contract)
            .where(
                _party_clause(profile),
                Contract.status.in_([s.value for s in statuses]),
            )
            .order_by(Contract.id)
        )
        return list(result.scalars().all())


class JobRepository:
    """Data access for jobs."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_payable_for_client(self, job_id: int, client_id: int) -> Job | None:
        """Find a job the client may pay, locking it and both contract parties.

        A single predicate matches the job id, the caller as the contract's
        client and an active contract status. Whatever fails to match, the
        result is None.
        """
        if not _storable_id(job_id):
            return None
        client = aliased(Profile)
        contractor = aliased(Profile)
        result = await self._session.execute(
            select(Job)
            .join(Job.contract)
            .join(Contract.client.of_type(client))
            .join(Contract.contractor.of_type(contractor))
            .where(
                Job.id == job_id,
                Contract.client_id == client_id,
                Contract.status.in_([s.value for s in ContractStatus.active()]),
            )
            .options(
                contains_eager(Job.contract).contains_eager(Contract.client.of_type(client)),
                contains_eager(Job.contract).contains_eager(
                    Contract.contractor.of_type(contractor)
                ),
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.unique().scalar_one_or_none()

    async def mark_paid(self, job_id: int, paid_at: datetime) -> bool:
        """Set paid/payment_date if the job is still unpaid.

        Returns False when another transaction paid the job first.
        """
        result = await self._session.execute(
            update(Job)
            .where(Job.id == job_id, Job.paid.is_(None))
            .values(paid=True, payment_date=paid_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def list_unpaid_for_profile(self, profile: Profile) -> list[Job]:
        """Unpaid jobs on the profile's in-progress contracts."""
        result = await self._session.execute(
            select(Job)
            .join(Job.contract)
            .where(
                Job.paid.is_(None),
                Contract.status == ContractStatus.IN_PROGRESS.value,
                _party_clause(profile),
            )
            .order_by(Job.id)
        )
        return list(result.scalars().all())
