"""Shared test fixtures for the Marketplace API test suite.

Provides:
    - An in-memory SQLite database per test (aiosqlite)
    - A factory for creating profiles, contracts and jobs
    - The demo marketplace, seeded
    - An HTTP client bound to the app with its session dependency overridden
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from marketplace_api.api.deps import get_db_session
from marketplace_api.domain.enums import ContractStatus, ProfileType
from marketplace_api.infrastructure.database.engine import build_engine, make_session_factory
from marketplace_api.infrastructure.database.orm_models import Base, Contract, Job, Profile
from marketplace_api.infrastructure.database.seed import seed_demo_data

# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def engine():
    """A fresh in-memory database with all tables created."""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(session_factory) -> None:
    """Load the demo marketplace (profiles 1-4 clients, 5-8 contractors)."""
    async with session_factory() as session:
        await seed_demo_data(session)
        await session.commit()


# ---------------------------------------------------------------------------
# Factory Fixtures
# ---------------------------------------------------------------------------


class MarketplaceFactory:
    """Creates rows through a session, flushing each so ids are assigned."""

    def __init__(self, session) -> None:
        self._session = session
        self._count = 0

    async def profile(
        self,
        profile_type: ProfileType = ProfileType.CLIENT,
        balance: str = "0",
        profession: str = "Tester",
        first_name: str | None = None,
        last_name: str = "Test",
    ) -> Profile:
        self._count += 1
        profile = Profile(
            first_name=first_name or f"User{self._count}",
            last_name=last_name,
            profession=profession,
            balance=Decimal(balance),
            type=profile_type.value,
        )
        self._session.add(profile)
        await self._session.flush()
        return profile

    async def client(self, balance: str = "0", **kwargs) -> Profile:
        return await self.profile(ProfileType.CLIENT, balance, **kwargs)

    async def contractor(self, balance: str = "0", **kwargs) -> Profile:
        return await self.profile(ProfileType.CONTRACTOR, balance, **kwargs)

    async def contract(
        self,
        client: Profile,
        contractor: Profile,
        status: ContractStatus = ContractStatus.IN_PROGRESS,
    ) -> Contract:
        contract = Contract(
            terms="terms",
            status=status.value,
            client_id=client.id,
            contractor_id=contractor.id,
        )
        self._session.add(contract)
        await self._session.flush()
        return contract

    async def job(
        self,
        contract: Contract,
        price: str,
        paid_at: datetime | None = None,
    ) -> Job:
        job = Job(
            description="work",
            price=Decimal(price),
            paid=True if paid_at else None,
            payment_date=paid_at,
            contract_id=contract.id,
        )
        self._session.add(job)
        await self._session.flush()
        return job


@pytest.fixture
def factory(session) -> MarketplaceFactory:
    return MarketplaceFactory(session)


# ---------------------------------------------------------------------------
# HTTP Fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(session_factory):
    """An HTTP client for the app, with request sessions drawn from the test database."""
    from marketplace_api.main import create_app

    app = create_app()

    async def override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
