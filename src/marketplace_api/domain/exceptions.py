"""Domain exceptions for the Marketplace API.

These exceptions are framework-agnostic and represent business rule violations.
Each carries the HTTP status class it maps to; the API layer's middleware
translates them into JSON error responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from decimal import Decimal


class MarketplaceError(Exception):
    """Base exception for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str, code: str = "MARKETPLACE_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


# --- Status classes ---


class UnauthenticatedError(MarketplaceError):
    """Raised when the caller's profile cannot be resolved."""

    status_code = 401

    def __init__(self, message: str = "Unauthenticated") -> None:
        super().__init__(message=message, code="UNAUTHENTICATED")


class ForbiddenError(MarketplaceError):
    """The caller lacks permission for the requested action."""

    status_code = 403


class NotFoundError(MarketplaceError):
    """The referenced entity does not exist or is not accessible to the caller."""

    status_code = 404


class InvalidRequestError(MarketplaceError):
    """A well-formed request that violates a business rule."""

    status_code = 400


# --- Contract Errors ---


class ContractAccessDeniedError(ForbiddenError):
    """Raised for a contract the caller is not a party to, or one that doesn't exist.

    Both cases share one response so contract ids cannot be probed.
    """

    def __init__(self, contract_id: int) -> None:
        super().__init__(
            message=f"Contract not accessible: {contract_id}",
            code="CONTRACT_ACCESS_DENIED",
        )
        self.contract_id = contract_id


# --- Payment Errors ---


class OnlyClientsCanPayError(ForbiddenError):
    def __init__(self) -> None:
        super().__init__(message="Only clients can pay for a job", code="ONLY_CLIENTS_CAN_PAY")


class JobNotFoundError(NotFoundError):
    """Raised when no payable job matches the caller's lookup.

    Covers a missing job, a job on someone else's contract and a job on a
    terminated contract.
    """

    def __init__(self) -> None:
        super().__init__(message="Job not found", code="JOB_NOT_FOUND")


class JobAlreadyPaidError(InvalidRequestError):
    def __init__(self) -> None:
        super().__init__(message="Job is already paid", code="JOB_ALREADY_PAID")


class InsufficientBalanceError(InvalidRequestError):
    def __init__(self) -> None:
        super().__init__(
            message="Not enough balance to pay for this job",
            code="INSUFFICIENT_BALANCE",
        )


class PaymentFailedError(InvalidRequestError):
    """Raised when the payment transaction fails and is rolled back."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=reason, code="PAYMENT_FAILED")


# --- Deposit Errors ---


class ProfileNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__(message="User not found", code="PROFILE_NOT_FOUND")


class NotAClientError(InvalidRequestError):
    def __init__(self) -> None:
        super().__init__(message="User is not a client", code="NOT_A_CLIENT")


class InvalidDepositAmountError(InvalidRequestError):
    def __init__(self) -> None:
        super().__init__(
            message="Deposit value is invalid (should be > 0)",
            code="INVALID_DEPOSIT_AMOUNT",
        )


class DepositCapExceededError(InvalidRequestError):
    """Raised when a deposit exceeds 25% of the client's unpaid jobs total.

    The total is shown without trailing zeros: 401.00 reads as 401.
    """

    def __init__(self, total_owed: Decimal) -> None:
        super().__init__(
            message=(
                "Client can't deposit more than 25% his total of jobs to pay "
                f"({format(total_owed.normalize(), 'f')})"
            ),
            code="DEPOSIT_CAP_EXCEEDED",
        )
        self.total_owed = total_owed


# --- Report Errors ---


class InvalidDateError(InvalidRequestError):
    def __init__(self, value: object) -> None:
        super().__init__(message=f"Invalid date: {value}", code="INVALID_DATE")
        self.value = value


class InvalidLimitError(InvalidRequestError):
    def __init__(self, value: object) -> None:
        super().__init__(
            message=f"Invalid limit: {value} (should be a positive integer)",
            code="INVALID_LIMIT",
        )
