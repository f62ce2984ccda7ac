"""Payment Service: moves money between marketplace balances.

Two operations:
    - pay_job: a client pays one of its jobs; the price moves from the
      client's balance to the contractor's and the job becomes PAID, all in
      one transaction.
    - deposit: money enters the system on a client's balance, capped at 25%
      of what the client still owes on unpaid jobs.

Validation runs before any write. Row locks taken by the lookups serialize
concurrent payments and deposits touching the same rows, and balance
arithmetic happens in SQL so no update is lost.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from statemachine.exceptions import TransitionNotAllowed

from marketplace_api.domain.exceptions import JobAlreadyPaidError, PaymentFailedError
from marketplace_api.domain.payment_state import JobPaymentStateMachine
from marketplace_api.domain.validation import (
    validate_deposit_balance,
    validate_job_client_type,
    validate_pay_job,
)
from marketplace_api.infrastructure.database.repositories import (
    JobRepository,
    ProfileRepository,
)
from marketplace_api.logging_config import get_logger

if TYPE_CHECKING:
    from decimal import Decimal

    from sqlalchemy.ext.asyncio import AsyncSession

    from marketplace_api.infrastructure.database.orm_models import Job, Profile

logger = get_logger(__name__)


class PaymentService:
    """Handles job payments and balance deposits."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._job_repo = JobRepository(session)
        self._profile_repo = ProfileRepository(session)

    # ------------------------------------------------------------------
    # Pay Job
    # ------------------------------------------------------------------

    async def pay_job(self, caller: Profile, job_id: int) -> Job:
        """Pay a job on behalf of the calling client.

        Raises:
            OnlyClientsCanPayError: The caller is not a client.
            JobNotFoundError: No job with this id on an active contract of the caller.
            JobAlreadyPaidError: The job is (or concurrently became) paid.
            InsufficientBalanceError: The caller cannot afford the job.
            PaymentFailedError: The transaction failed and was rolled back.
        """
        validate_job_client_type(caller.type)

        job = await self._job_repo.get_payable_for_client(job_id, caller.id)
        validate_pay_job(job)
        self._fire_payment(job)

        contract = job.contract
        price = job.price
        try:
            if not await self._job_repo.mark_paid(job.id, datetime.now(UTC)):
                await self._session.rollback()
                raise JobAlreadyPaidError()
            await self._profile_repo.add_to_balance(contract.client_id, -price)
            await self._profile_repo.add_to_balance(contract.contractor_id, price)
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.error("payment.transaction_failed", job_id=job_id, error=str(exc))
            raise PaymentFailedError(str(exc)) from exc

        # Balances and payment state were written in SQL; reload them.
        for row in (job, contract.client, contract.contractor):
            await self._session.refresh(row)

        logger.info(
            "payment.job_paid",
            job_id=job_id,
            amount=price,
            client_id=contract.client_id,
            contractor_id=contract.contractor_id,
        )
        return job

    # ------------------------------------------------------------------
    # Deposit
    # ------------------------------------------------------------------

    async def deposit(self, profile_id: int, amount: Decimal | None) -> None:
        """Add money to a client's balance.

        Any caller may deposit into any client's balance.

        Raises:
            ProfileNotFoundError: No profile with this id.
            NotAClientError: The profile is a contractor.
            InvalidDepositAmountError: The amount is missing, zero or negative.
            DepositCapExceededError: The amount is above 25% of the unpaid total.
        """
        profile = await self._profile_repo.get_with_unpaid_jobs(profile_id)
        owed = validate_deposit_balance(profile, amount)

        await self._profile_repo.add_to_balance(profile_id, amount)
        await self._session.commit()
        await self._session.refresh(profile)

        logger.info(
            "deposit.completed",
            profile_id=profile_id,
            amount=amount,
            total_owed=owed,
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _fire_payment(self, job: Job) -> None:
        """Validate the UNPAID -> PAID transition for a job.

        Raises JobAlreadyPaidError if the job is already PAID.
        """
        sm = JobPaymentStateMachine(current_status=job.payment_status)
        try:
            sm.pay()
        except TransitionNotAllowed as err:
            raise JobAlreadyPaidError() from err
