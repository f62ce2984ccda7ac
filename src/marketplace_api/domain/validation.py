"""Validation rules for payments, deposits and report date ranges.

Every rule takes data that has already been fetched and either returns
normally or raises the MarketplaceError subclass for the first violated
condition. Nothing here touches the database or the clock.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from marketplace_api.domain.enums import ProfileType
from marketplace_api.domain.exceptions import (
    DepositCapExceededError,
    InsufficientBalanceError,
    InvalidDateError,
    InvalidDepositAmountError,
    JobAlreadyPaidError,
    JobNotFoundError,
    NotAClientError,
    OnlyClientsCanPayError,
    ProfileNotFoundError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from marketplace_api.domain.protocols import DepositTargetLike, PayableJobLike

DEPOSIT_CAP_RATIO = Decimal("0.25")

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def validate_job_client_type(profile_type: str) -> None:
    """Only the paying side of a contract may pay for a job."""
    if profile_type != ProfileType.CLIENT:
        raise OnlyClientsCanPayError()


def validate_pay_job(job: PayableJobLike | None) -> None:
    """Check that a job found by the payable-job lookup can be paid now.

    Args:
        job: The job joined with its contract and client, or None when the
            lookup (id, caller as client, active contract) matched nothing.

    Raises:
        JobNotFoundError: No job matched.
        JobAlreadyPaidError: The job is already paid.
        InsufficientBalanceError: The client's balance is below the price.
    """
    if job is None:
        raise JobNotFoundError()
    if job.paid:
        raise JobAlreadyPaidError()
    if job.price > job.contract.client.balance:
        raise InsufficientBalanceError()


def total_owed(profile: DepositTargetLike) -> Decimal:
    """Sum the price of every loaded job across the profile's client contracts."""
    return sum(
        (job.price for contract in profile.client_contracts for job in contract.jobs),
        Decimal(0),
    )


def validate_deposit_balance(
    profile: DepositTargetLike | None,
    amount: Decimal | None,
) -> Decimal:
    """Check a deposit against the 25% cap.

    The profile must come with its client contracts and, for each, only the
    unpaid jobs. Contracts of any status count towards the total.

    Returns:
        The total owed across the profile's unpaid jobs.
    """
    if profile is None:
        raise ProfileNotFoundError()
    if profile.type != ProfileType.CLIENT:
        raise NotAClientError()
    if not amount or amount <= 0:
        raise InvalidDepositAmountError()

    owed = total_owed(profile)
    if amount > DEPOSIT_CAP_RATIO * owed:
        raise DepositCapExceededError(owed)
    return owed


def parse_strict_date(value: object) -> date:
    """Parse a zero-padded YYYY-MM-DD calendar date, rejecting anything else."""
    if not isinstance(value, str) or not _DATE_PATTERN.fullmatch(value):
        raise InvalidDateError(value)
    try:
        return date.fromisoformat(value)
    except ValueError as err:
        raise InvalidDateError(value) from err


def validate_dates(values: Iterable[object]) -> list[date]:
    """Validate each value as a strict date; the first offender is reported."""
    return [parse_strict_date(value) for value in values]
