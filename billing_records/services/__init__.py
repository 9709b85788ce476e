"""Services coordinating billing record workflows."""

from billing_records.services.billing_service import BillingService
from billing_records.services.import_service import BillingImportService, ImportResult
from billing_records.services.notification import (
    build_billing_notification,
    format_currency,
)

__all__ = [
    "BillingImportService",
    "BillingService",
    "ImportResult",
    "build_billing_notification",
    "format_currency",
]
