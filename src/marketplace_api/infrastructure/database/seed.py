"""Demo marketplace data.

Four clients, four contractors, nine contracts and fourteen jobs, nine of
them paid between 2020-08-10 and 2020-08-17. Used by the seed.py script and
by the end-to-end tests.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from marketplace_api.domain.enums import ContractStatus, ProfileType
from marketplace_api.infrastructure.database.orm_models import Contract, Job, Profile
from marketplace_api.logging_config import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

# (id, first_name, last_name, profession, balance, type)
PROFILES = [
    (1, "Harry", "Potter", "Wizard", "1150", ProfileType.CLIENT),
    (2, "Mr", "Robot", "Hacker", "231.11", ProfileType.CLIENT),
    (3, "John", "Snow", "Knows nothing", "451.3", ProfileType.CLIENT),
    (4, "Ash", "Kethcum", "Pokemon master", "1.3", ProfileType.CLIENT),
    (5, "John", "Lenon", "Musician", "64", ProfileType.CONTRACTOR),
    (6, "Linus", "Torvalds", "Programmer", "1214", ProfileType.CONTRACTOR),
    (7, "Alan", "Turing", "Programmer", "22", ProfileType.CONTRACTOR),
    (8, "Aragorn", "II Elessar Telcontarion", "Fighter", "314", ProfileType.CONTRACTOR),
]

# (id, status, client_id, contractor_id)
CONTRACTS = [
    (1, ContractStatus.TERMINATED, 1, 5),
    (2, ContractStatus.IN_PROGRESS, 1, 6),
    (3, ContractStatus.IN_PROGRESS, 2, 6),
    (4, ContractStatus.IN_PROGRESS, 2, 7),
    (5, ContractStatus.NEW, 3, 8),
    (6, ContractStatus.IN_PROGRESS, 3, 7),
    (7, ContractStatus.IN_PROGRESS, 4, 7),
    (8, ContractStatus.IN_PROGRESS, 4, 6),
    (9, ContractStatus.IN_PROGRESS, 4, 8),
]


def _paid_on(day: int, hour: int = 19, minute: int = 11) -> datetime:
    return datetime(2020, 8, day, hour, minute, 26, tzinfo=UTC)


# (id, price, contract_id, payment_date or None when unpaid)
JOBS = [
    (1, "200", 1, None),
    (2, "201", 2, None),
    (3, "202", 3, None),
    (4, "200", 4, None),
    (5, "200", 7, None),
    (6, "2020", 7, _paid_on(15)),
    (7, "200", 2, _paid_on(15)),
    (8, "200", 3, _paid_on(15)),
    (9, "200", 1, _paid_on(17)),
    (10, "200", 5, _paid_on(17)),
    (11, "21", 1, _paid_on(10)),
    (12, "21", 2, _paid_on(15)),
    (13, "121", 3, _paid_on(15)),
    (14, "121", 3, _paid_on(14, hour=23)),
]


async def seed_demo_data(session: AsyncSession) -> None:
    """Insert the demo marketplace into an empty database and flush it."""
    session.add_all(
        Profile(
            id=pid,
            first_name=first,
            last_name=last,
            profession=profession,
            balance=Decimal(balance),
            type=ptype.value,
        )
        for pid, first, last, profession, balance, ptype in PROFILES
    )
    await session.flush()

    session.add_all(
        Contract(
            id=cid,
            terms="bla bla bla",
            status=status.value,
            client_id=client_id,
            contractor_id=contractor_id,
        )
        for cid, status, client_id, contractor_id in CONTRACTS
    )
    await session.flush()

    session.add_all(
        Job(
            id=jid,
            description="work",
            price=Decimal(price),
            paid=True if paid_at else None,
            payment_date=paid_at,
            contract_id=contract_id,
        )
        for jid, price, contract_id, paid_at in JOBS
    )
    await session.flush()

    logger.info(
        "seed.loaded",
        profiles=len(PROFILES),
        contracts=len(CONTRACTS),
        jobs=len(JOBS),
    )
