"""Tests for PaymentService against an in-memory database.

Covers the pay-job flow (money moves once, atomically, only for the
contract's client) and the deposit cap.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from marketplace_api.domain.enums import ContractStatus
from marketplace_api.domain.exceptions import (
    DepositCapExceededError,
    InsufficientBalanceError,
    InvalidDepositAmountError,
    JobAlreadyPaidError,
    JobNotFoundError,
    NotAClientError,
    OnlyClientsCanPayError,
    PaymentFailedError,
    ProfileNotFoundError,
)
from marketplace_api.infrastructure.database.repositories import ProfileRepository
from marketplace_api.services.payment_service import PaymentService

PAID_AT = datetime(2020, 8, 15, 12, tzinfo=UTC)


async def reload(session, *rows) -> None:
    for row in rows:
        await session.refresh(row)


# ============================================================
# Pay Job
# ============================================================


class TestPayJob:
    """Successful payments."""

    @pytest.mark.asyncio
    async def test_moves_price_from_client_to_contractor(self, session, factory) -> None:
        client = await factory.client(balance="1000")
        contractor = await factory.contractor(balance="200")
        contract = await factory.contract(client, contractor)
        job = await factory.job(contract, price="300")

        paid = await PaymentService(session).pay_job(client, job.id)

        await reload(session, client, contractor, job)
        assert client.balance == Decimal("700")
        assert contractor.balance == Decimal("500")
        assert job.paid is True
        assert job.payment_date is not None
        assert paid.id == job.id

    @pytest.mark.asyncio
    async def test_total_money_is_conserved(self, session, factory) -> None:
        client = await factory.client(balance="150.55")
        contractor = await factory.contractor(balance="10.45")
        contract = await factory.contract(client, contractor)
        job = await factory.job(contract, price="99.99")

        await PaymentService(session).pay_job(client, job.id)

        await reload(session, client, contractor)
        assert client.balance + contractor.balance == Decimal("161.00")
        assert client.balance == Decimal("50.56")

    @pytest.mark.asyncio
    async def test_exact_balance_is_enough(self, session, factory) -> None:
        client = await factory.client(balance="300")
        contractor = await factory.contractor()
        contract = await factory.contract(client, contractor)
        job = await factory.job(contract, price="300")

        await PaymentService(session).pay_job(client, job.id)

        await reload(session, client)
        assert client.balance == Decimal("0")

    @pytest.mark.asyncio
    async def test_new_contract_is_payable(self, session, factory) -> None:
        client = await factory.client(balance="100")
        contractor = await factory.contractor()
        contract = await factory.contract(client, contractor, status=ContractStatus.NEW)
        job = await factory.job(contract, price="40")

        await PaymentService(session).pay_job(client, job.id)

        await reload(session, job)
        assert job.paid is True


class TestPayJobRejections:
    """Every rejected payment leaves balances and the job untouched."""

    @pytest.mark.asyncio
    async def test_contractor_cannot_pay(self, session, factory) -> None:
        client = await factory.client(balance="1000")
        contractor = await factory.contractor(balance="1000")
        contract = await factory.contract(client, contractor)
        job = await factory.job(contract, price="300")

        with pytest.raises(OnlyClientsCanPayError):
            await PaymentService(session).pay_job(contractor, job.id)

        await reload(session, client, contractor, job)
        assert client.balance == Decimal("1000")
        assert contractor.balance == Decimal("1000")
        assert job.paid is None

    @pytest.mark.asyncio
    async def test_unknown_job(self, session, factory) -> None:
        client = await factory.client(balance="1000")

        with pytest.raises(JobNotFoundError):
            await PaymentService(session).pay_job(client, 9999)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("job_id", [0, -1, 2**31, 10**20])
    async def test_job_id_outside_integer_range(self, session, factory, job_id) -> None:
        client = await factory.client(balance="1000")

        with pytest.raises(JobNotFoundError):
            await PaymentService(session).pay_job(client, job_id)

    @pytest.mark.asyncio
    async def test_job_of_another_client_is_not_found(self, session, factory) -> None:
        owner = await factory.client(balance="1000")
        intruder = await factory.client(balance="1000")
        contractor = await factory.contractor()
        contract = await factory.contract(owner, contractor)
        job = await factory.job(contract, price="300")

        with pytest.raises(JobNotFoundError):
            await PaymentService(session).pay_job(intruder, job.id)

        await reload(session, owner, intruder, job)
        assert owner.balance == Decimal("1000")
        assert intruder.balance == Decimal("1000")
        assert job.paid is None

    @pytest.mark.asyncio
    async def test_job_on_terminated_contract_is_not_found(self, session, factory) -> None:
        client = await factory.client(balance="1000")
        contractor = await factory.contractor()
        contract = await factory.contract(client, contractor, status=ContractStatus.TERMINATED)
        job = await factory.job(contract, price="300")

        with pytest.raises(JobNotFoundError):
            await PaymentService(session).pay_job(client, job.id)

    @pytest.mark.asyncio
    async def test_already_paid(self, session, factory) -> None:
        client = await factory.client(balance="1000")
        contractor = await factory.contractor(balance="0")
        contract = await factory.contract(client, contractor)
        job = await factory.job(contract, price="300", paid_at=PAID_AT)

        with pytest.raises(JobAlreadyPaidError):
            await PaymentService(session).pay_job(client, job.id)

        await reload(session, client, contractor)
        assert client.balance == Decimal("1000")
        assert contractor.balance == Decimal("0")

    @pytest.mark.asyncio
    async def test_paying_twice(self, session, factory) -> None:
        client = await factory.client(balance="1000")
        contractor = await factory.contractor()
        contract = await factory.contract(client, contractor)
        job = await factory.job(contract, price="300")
        service = PaymentService(session)

        await service.pay_job(client, job.id)
        with pytest.raises(JobAlreadyPaidError):
            await service.pay_job(client, job.id)

        await reload(session, client, contractor)
        assert client.balance == Decimal("700")
        assert contractor.balance == Decimal("300")

    @pytest.mark.asyncio
    async def test_insufficient_balance(self, session, factory) -> None:
        client = await factory.client(balance="299.99")
        contractor = await factory.contractor()
        contract = await factory.contract(client, contractor)
        job = await factory.job(contract, price="300")

        with pytest.raises(InsufficientBalanceError):
            await PaymentService(session).pay_job(client, job.id)

        await reload(session, client, job)
        assert client.balance == Decimal("299.99")
        assert job.paid is None


class TestPayJobAtomicity:
    @pytest.mark.asyncio
    async def test_failed_credit_rolls_back_everything(
        self, session, factory, monkeypatch
    ) -> None:
        client = await factory.client(balance="1000")
        contractor = await factory.contractor(balance="200")
        contract = await factory.contract(client, contractor)
        job = await factory.job(contract, price="300")
        await session.commit()

        real_add_to_balance = ProfileRepository.add_to_balance

        async def failing_credit(self, profile_id, amount):
            if amount > 0:
                raise OperationalError("UPDATE profiles", {}, Exception("disk I/O error"))
            await real_add_to_balance(self, profile_id, amount)

        monkeypatch.setattr(ProfileRepository, "add_to_balance", failing_credit)

        with pytest.raises(PaymentFailedError) as exc_info:
            await PaymentService(session).pay_job(client, job.id)
        assert exc_info.value.status_code == 400

        await reload(session, client, contractor, job)
        assert client.balance == Decimal("1000")
        assert contractor.balance == Decimal("200")
        assert job.paid is None
        assert job.payment_date is None


# ============================================================
# Deposit
# ============================================================


class TestDeposit:
    @pytest.mark.asyncio
    async def test_deposit_within_cap(self, session, factory) -> None:
        client = await factory.client(balance="1150")
        contractor = await factory.contractor()
        first = await factory.contract(client, contractor)
        second = await factory.contract(client, contractor)
        await factory.job(first, price="200")
        await factory.job(second, price="201")

        await PaymentService(session).deposit(client.id, Decimal("100.25"))

        await reload(session, client)
        assert client.balance == Decimal("1250.25")

    @pytest.mark.asyncio
    async def test_deposit_above_cap(self, session, factory) -> None:
        client = await factory.client(balance="1150")
        contractor = await factory.contractor()
        contract = await factory.contract(client, contractor)
        await factory.job(contract, price="200")
        await factory.job(contract, price="201")

        with pytest.raises(DepositCapExceededError) as exc_info:
            await PaymentService(session).deposit(client.id, Decimal("100.26"))

        assert exc_info.value.total_owed == Decimal("401")
        assert exc_info.value.message.endswith("(401)")
        await reload(session, client)
        assert client.balance == Decimal("1150")

    @pytest.mark.asyncio
    async def test_paid_jobs_do_not_raise_the_cap(self, session, factory) -> None:
        client = await factory.client()
        contractor = await factory.contractor()
        contract = await factory.contract(client, contractor)
        await factory.job(contract, price="100")
        await factory.job(contract, price="10000", paid_at=PAID_AT)

        with pytest.raises(DepositCapExceededError) as exc_info:
            await PaymentService(session).deposit(client.id, Decimal("26"))
        assert exc_info.value.total_owed == Decimal("100")

    @pytest.mark.asyncio
    async def test_terminated_contracts_count(self, session, factory) -> None:
        client = await factory.client()
        contractor = await factory.contractor()
        contract = await factory.contract(client, contractor, status=ContractStatus.TERMINATED)
        await factory.job(contract, price="400")

        await PaymentService(session).deposit(client.id, Decimal("100"))

        await reload(session, client)
        assert client.balance == Decimal("100")

    @pytest.mark.asyncio
    async def test_client_owing_nothing(self, session, factory) -> None:
        client = await factory.client()

        with pytest.raises(DepositCapExceededError):
            await PaymentService(session).deposit(client.id, Decimal("1"))

    @pytest.mark.asyncio
    async def test_unknown_profile(self, session) -> None:
        with pytest.raises(ProfileNotFoundError):
            await PaymentService(session).deposit(9999, Decimal("1"))

    @pytest.mark.asyncio
    async def test_profile_id_outside_integer_range(self, session) -> None:
        with pytest.raises(ProfileNotFoundError):
            await PaymentService(session).deposit(10**20, Decimal("1"))

    @pytest.mark.asyncio
    async def test_contractor(self, session, factory) -> None:
        contractor = await factory.contractor()

        with pytest.raises(NotAClientError):
            await PaymentService(session).deposit(contractor.id, Decimal("1"))

    @pytest.mark.asyncio
    async def test_non_positive_amount(self, session, factory) -> None:
        client = await factory.client()
        contractor = await factory.contractor()
        contract = await factory.contract(client, contractor)
        await factory.job(contract, price="400")

        with pytest.raises(InvalidDepositAmountError):
            await PaymentService(session).deposit(client.id, Decimal("-5"))
