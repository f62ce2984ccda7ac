#!/usr/bin/env python3
"""Marketplace API: seed the demo marketplace and walk through it.

Loads four clients, four contractors, nine contracts and fourteen jobs, then
(optionally) runs a short walk-through against the service layer:

    1. Harry Potter pays job 2 (201.00) to Linus Torvalds.
    2. Ash Kethcum deposits 50.00, the most their unpaid jobs allow.
    3. Reports: best profession and best clients for 2020-08-10..2020-08-17.

Usage:
    # Seed the configured database (DATABASE_URL), recreating the tables:
    uv run python seed.py --reset

    # Without a database server (SQLite in-memory), seed and walk through:
    uv run python seed.py --sqlite --demo
"""

from __future__ import annotations

import argparse
import asyncio
from decimal import Decimal
from typing import TYPE_CHECKING

# ---------------------------------------------------------------------------
# Configure structured logging BEFORE importing app modules
# ---------------------------------------------------------------------------
from marketplace_api.logging_config import get_logger, setup_logging

setup_logging(log_level="INFO", json_logs=False)
logger = get_logger("seed")

from marketplace_api.infrastructure.database.engine import (  # noqa: E402
    _get_engine,
    build_engine,
    make_session_factory,
)
from marketplace_api.infrastructure.database.orm_models import Base  # noqa: E402
from marketplace_api.infrastructure.database.repositories import (  # noqa: E402
    ProfileRepository,
)
from marketplace_api.infrastructure.database.seed import seed_demo_data  # noqa: E402
from marketplace_api.services.payment_service import PaymentService  # noqa: E402
from marketplace_api.services.report_service import ReportService  # noqa: E402

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

REPORT_START = "2020-08-10"
REPORT_END = "2020-08-17"


def banner(text: str) -> None:
    """Print a prominent banner."""
    width = 70
    print("\n" + "=" * width)
    print(f"  {text}")
    print("=" * width + "\n")


def section(text: str) -> None:
    """Print a section header."""
    print(f"\n--- {text} ---\n")


# ---------------------------------------------------------------------------
# Database lifecycle helpers
# ---------------------------------------------------------------------------
def open_engine(use_sqlite: bool) -> AsyncEngine:
    if use_sqlite:
        return build_engine("sqlite+aiosqlite:///:memory:")
    return _get_engine()


async def prepare_schema(engine: AsyncEngine, reset: bool) -> None:
    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
            logger.info("database.tables_dropped")
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database.tables_created")


# ---------------------------------------------------------------------------
# Walk-through
# ---------------------------------------------------------------------------
async def show_balances(session: AsyncSession, *profile_ids: int) -> None:
    repo = ProfileRepository(session)
    for profile_id in profile_ids:
        profile = await repo.get_by_id(profile_id)
        await session.refresh(profile)
        print(f"  {profile.full_name:<30} {profile.balance:>10}")


async def walk_through(factory: async_sessionmaker[AsyncSession]) -> None:
    banner("MARKETPLACE WALK-THROUGH")

    section("Step 1: Harry Potter pays job 2")
    async with factory() as session:
        await show_balances(session, 1, 6)
        harry = await ProfileRepository(session).get_by_id(1)
        await PaymentService(session).pay_job(harry, 2)
        print("  paid.")
        await show_balances(session, 1, 6)

    section("Step 2: Ash Kethcum deposits 50.00")
    async with factory() as session:
        await PaymentService(session).deposit(4, Decimal("50.00"))
        await show_balances(session, 4)

    section(f"Step 3: Reports for {REPORT_START}..{REPORT_END}")
    async with factory() as session:
        reports = ReportService(session)
        print(f"  Best profession: {await reports.best_profession(REPORT_START, REPORT_END)}")
        for client in await reports.best_clients(REPORT_START, REPORT_END, limit=4):
            print(f"  {client.full_name:<30} {client.paid:>10}")


# ===========================================================================
# Main
# ===========================================================================
async def run(use_sqlite: bool = False, reset: bool = False, demo: bool = False) -> None:
    engine = open_engine(use_sqlite)
    factory = make_session_factory(engine)
    try:
        await prepare_schema(engine, reset=reset or use_sqlite)

        async with factory() as session:
            await seed_demo_data(session)
            await session.commit()

        if demo:
            await walk_through(factory)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Marketplace API demo data")
    parser.add_argument(
        "--sqlite",
        action="store_true",
        help="Use SQLite in-memory instead of DATABASE_URL (no database server needed).",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables before seeding.",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="After seeding, pay a job, make a deposit and print the reports.",
    )
    args = parser.parse_args()

    asyncio.run(run(use_sqlite=args.sqlite, reset=args.reset, demo=args.demo))
