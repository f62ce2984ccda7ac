"""Pydantic schemas for the Marketplace API.

These schemas define the request/response shapes for the REST API. They are
separate from the ORM models to keep the API and database layers apart.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - resolved at runtime by pydantic
from decimal import Decimal  # noqa: TC003 - resolved at runtime by pydantic
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------


class DepositRequest(BaseModel):
    """Request body for depositing money into a client's balance.

    `value` is optional here so a missing amount is rejected by the deposit
    rules with their own message.
    """

    value: Decimal | None = Field(
        default=None,
        description="Amount to deposit; must be positive and at most 25% of the unpaid jobs total",
        examples=[100],
    )


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------


class ContractResponse(BaseModel):
    """Response schema for a contract."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    terms: str
    status: str
    client_id: int
    contractor_id: int
    created_at: datetime
    updated_at: datetime


class JobResponse(BaseModel):
    """Response schema for a job."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    price: Decimal
    paid: bool | None
    payment_date: datetime | None
    contract_id: int
    created_at: datetime
    updated_at: datetime


class BestClientResponse(BaseModel):
    """One entry of the best-clients report."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str = Field(
        validation_alias=AliasChoices("full_name", "fullName"),
        serialization_alias="fullName",
    )
    paid: Decimal


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok", "degraded"]
    version: str
    database: str
