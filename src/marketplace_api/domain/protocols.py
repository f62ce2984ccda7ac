"""Structural shapes the validation rules operate on.

The validation rules inspect already-fetched data. They are typed against
these Protocols rather than the ORM models so the domain layer has no
SQLAlchemy imports; the ORM models (and plain test doubles) satisfy them
by shape.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence
    from decimal import Decimal


class PayerLike(Protocol):
    balance: Decimal


class PayableContractLike(Protocol):
    client: PayerLike


class PayableJobLike(Protocol):
    """A job joined with its contract and the contract's client."""

    price: Decimal
    paid: bool | None
    contract: PayableContractLike


class OwedJobLike(Protocol):
    price: Decimal


class OwingContractLike(Protocol):
    jobs: Sequence[OwedJobLike]


class DepositTargetLike(Protocol):
    """A profile with its client contracts and their unpaid jobs loaded."""

    type: str
    client_contracts: Sequence[OwingContractLike]
