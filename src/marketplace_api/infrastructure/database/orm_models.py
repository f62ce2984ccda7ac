"""SQLAlchemy 2.0 ORM models for the Marketplace API.

Three tables:
    1. profiles  : Clients (payers) and contractors (payees) with their balance.
    2. contracts : Agreements between one client and one contractor.
    3. jobs      : Billable units of work under a contract, paid at most once.

Design decisions:
    - Decimal for money (no floating point rounding errors).
    - jobs.paid is a nullable boolean restricted to NULL/TRUE, and is set
      together with payment_date (CHECK constraints below).
    - CHECK constraints on enum-like string columns to reject invalid values
      at the DB level.
    - Indexes on the columns the payment lookup and reports filter by.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal  # noqa: TC003 - needed at runtime by SQLAlchemy Mapped[]

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from marketplace_api.domain.enums import ContractStatus, PaymentStatus


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def _utcnow() -> datetime:
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# 1. profiles
# ---------------------------------------------------------------------------
class Profile(Base):
    """A marketplace user: either a client or a contractor."""

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    profession: Mapped[str] = mapped_column(String(100), nullable=False)

    balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        comment="Spendable balance; debited by payments, credited by payments and deposits",
    )
    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="ProfileType value (client or contractor)",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    # --- Relationships ---
    client_contracts: Mapped[list[Contract]] = relationship(
        "Contract",
        back_populates="client",
        foreign_keys="Contract.client_id",
        order_by="Contract.id",
    )
    contractor_contracts: Mapped[list[Contract]] = relationship(
        "Contract",
        back_populates="contractor",
        foreign_keys="Contract.contractor_id",
        order_by="Contract.id",
    )

    __table_args__ = (
        CheckConstraint(
            "type IN ('client', 'contractor')",
            name="ck_profile_valid_type",
        ),
        Index("idx_profile_type", "type"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Profile id={self.id} type={self.type} balance={self.balance}>"


# ---------------------------------------------------------------------------
# 2. contracts
# ---------------------------------------------------------------------------
class Contract(Base):
    """An agreement between exactly one client and one contractor."""

    __tablename__ = "contracts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    terms: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ContractStatus.NEW.value,
        comment="ContractStatus value",
    )

    client_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id"),
        nullable=False,
    )
    contractor_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("profiles.id"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    # --- Relationships ---
    client: Mapped[Profile] = relationship(
        "Profile",
        back_populates="client_contracts",
        foreign_keys=[client_id],
    )
    contractor: Mapped[Profile] = relationship(
        "Profile",
        back_populates="contractor_contracts",
        foreign_keys=[contractor_id],
    )
    jobs: Mapped[list[Job]] = relationship(
        "Job",
        back_populates="contract",
        order_by="Job.id",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('new', 'in_progress', 'terminated')",
            name="ck_contract_valid_status",
        ),
        CheckConstraint(
            "client_id <> contractor_id",
            name="ck_contract_distinct_parties",
        ),
        Index("idx_contract_client", "client_id"),
        Index("idx_contract_contractor", "contractor_id"),
        Index("idx_contract_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Contract id={self.id} status={self.status} "
            f"client={self.client_id} contractor={self.contractor_id}>"
        )


# ---------------------------------------------------------------------------
# 3. jobs
# ---------------------------------------------------------------------------
class Job(Base):
    """A unit of billable work under a contract.

    Created unpaid; the payment flow sets paid and payment_date exactly once.
    """

    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    paid: Mapped[bool | None] = mapped_column(
        Boolean,
        nullable=True,
        default=None,
        comment="NULL = unpaid, TRUE = paid (never FALSE)",
    )
    payment_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    contract_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("contracts.id"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    # --- Relationships ---
    contract: Mapped[Contract] = relationship("Contract", back_populates="jobs")

    __table_args__ = (
        CheckConstraint("price > 0", name="ck_job_positive_price"),
        CheckConstraint("paid IS NULL OR paid", name="ck_job_paid_null_or_true"),
        CheckConstraint(
            "(paid IS NULL AND payment_date IS NULL) "
            "OR (paid IS NOT NULL AND payment_date IS NOT NULL)",
            name="ck_job_paid_with_date",
        ),
        Index("idx_job_contract", "contract_id"),
        Index("idx_job_payment_date", "payment_date"),
    )

    @property
    def payment_status(self) -> PaymentStatus:
        return PaymentStatus.PAID if self.paid else PaymentStatus.UNPAID

    def __repr__(self) -> str:
        return f"<Job id={self.id} price={self.price} status={self.payment_status}>"
