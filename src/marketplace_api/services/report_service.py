"""Report Service: earnings and spending rankings over a payment window.

Both reports take a start and end date (YYYY-MM-DD, both days included) and
only count jobs that are paid with a payment_date inside the window.
Profiles are visited in id order; when totals tie, which one ranks first
follows that order and is not otherwise defined.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from marketplace_api.domain.enums import ProfileType
from marketplace_api.domain.exceptions import InvalidLimitError
from marketplace_api.domain.validation import validate_dates
from marketplace_api.infrastructure.database.repositories import ProfileRepository
from marketplace_api.logging_config import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

NO_PROFESSION_PAID = "No professions were paid in this time range"
DEFAULT_BEST_CLIENTS_LIMIT = 2


@dataclass(frozen=True)
class BestClient:
    """A client's spending in the report window."""

    id: int
    full_name: str
    paid: Decimal


def payment_window(start: object, end: object) -> tuple[datetime, datetime]:
    """Turn validated start/end dates into a half-open UTC datetime range."""
    start_date, end_date = validate_dates([start, end])
    paid_from = datetime.combine(start_date, time.min, tzinfo=UTC)
    paid_before = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=UTC)
    return paid_from, paid_before


class ReportService:
    """Aggregations over paid jobs."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._profile_repo = ProfileRepository(session)

    async def best_profession(self, start: object, end: object) -> str:
        """Return the profession that earned the most in the window.

        Falls back to NO_PROFESSION_PAID when no contractor earned anything.
        """
        paid_from, paid_before = payment_window(start, end)
        rows = await self._profile_repo.paid_totals(
            ProfileType.CONTRACTOR, paid_from, paid_before
        )

        earnings: dict[str, Decimal] = {}
        for profile, total in rows:
            earnings[profile.profession] = earnings.get(profile.profession, Decimal(0)) + total

        if not earnings:
            return NO_PROFESSION_PAID
        best = max(earnings, key=earnings.__getitem__)
        if earnings[best] <= 0:
            return NO_PROFESSION_PAID

        logger.info(
            "report.best_profession",
            start=str(start),
            end=str(end),
            profession=best,
            earned=earnings[best],
        )
        return best

    async def best_clients(
        self,
        start: object,
        end: object,
        limit: int = DEFAULT_BEST_CLIENTS_LIMIT,
    ) -> list[BestClient]:
        """Return the clients that paid the most in the window, highest first."""
        paid_from, paid_before = payment_window(start, end)
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise InvalidLimitError(limit)

        rows = await self._profile_repo.paid_totals(ProfileType.CLIENT, paid_from, paid_before)
        ranking = sorted(
            (
                BestClient(id=profile.id, full_name=profile.full_name, paid=total)
                for profile, total in rows
            ),
            key=lambda client: client.paid,
            reverse=True,
        )

        logger.info("report.best_clients", start=str(start), end=str(end), limit=limit)
        return ranking[:limit]
