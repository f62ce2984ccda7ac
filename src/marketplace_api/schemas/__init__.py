"""Pydantic API schemas."""

from marketplace_api.schemas.marketplace import (
    BestClientResponse,
    ContractResponse,
    DepositRequest,
    HealthResponse,
    JobResponse,
)

__all__ = [
    "BestClientResponse",
    "ContractResponse",
    "DepositRequest",
    "HealthResponse",
    "JobResponse",
]
