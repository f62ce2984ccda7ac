"""Domain enumerations for the Marketplace API.

These enums define the canonical values used throughout the system.
They are framework-agnostic (no SQLAlchemy, no FastAPI imports).
"""

from __future__ import annotations

import enum


class ProfileType(enum.StrEnum):
    """Which side of the marketplace a profile is on."""

    CLIENT = "client"
    CONTRACTOR = "contractor"


class ContractStatus(enum.StrEnum):
    """Lifecycle states of a contract between a client and a contractor.

    Only NEW and IN_PROGRESS contracts accept payments.
    """

    NEW = "new"
    IN_PROGRESS = "in_progress"
    TERMINATED = "terminated"

    @classmethod
    def active(cls) -> tuple[ContractStatus, ...]:
        return (cls.NEW, cls.IN_PROGRESS)


class PaymentStatus(enum.StrEnum):
    """Payment state of a job.

    Stored as a nullable boolean (jobs.paid): NULL is UNPAID, TRUE is PAID.
    There is no third state.
    """

    UNPAID = "UNPAID"
    PAID = "PAID"
