"""Application services: use case orchestration."""

from marketplace_api.services.contract_service import ContractService
from marketplace_api.services.payment_service import PaymentService
from marketplace_api.services.report_service import ReportService

__all__ = ["ContractService", "PaymentService", "ReportService"]
