"""Domain layer: pure business logic with zero framework dependencies."""

from marketplace_api.domain.enums import (
    ContractStatus,
    PaymentStatus,
    ProfileType,
)
from marketplace_api.domain.exceptions import (
    ForbiddenError,
    InvalidRequestError,
    MarketplaceError,
    NotFoundError,
)
from marketplace_api.domain.payment_state import JobPaymentStateMachine
from marketplace_api.domain.validation import (
    validate_dates,
    validate_deposit_balance,
    validate_job_client_type,
    validate_pay_job,
)

__all__ = [
    "ContractStatus",
    "PaymentStatus",
    "ProfileType",
    "ForbiddenError",
    "InvalidRequestError",
    "MarketplaceError",
    "NotFoundError",
    "JobPaymentStateMachine",
    "validate_dates",
    "validate_deposit_balance",
    "validate_job_client_type",
    "validate_pay_job",
]
