"""Storage for billing records and the reference data they point to."""

from billing_records.repositories.billing_repository import (
    BillingFilters,
    BillingRepository,
    InMemoryBillingRepository,
    JsonFileBillingRepository,
)
from billing_records.repositories.reference_data import DEFAULT_PROJECTS, ReferenceData

__all__ = [
    "BillingFilters",
    "BillingRepository",
    "DEFAULT_PROJECTS",
    "InMemoryBillingRepository",
    "JsonFileBillingRepository",
    "ReferenceData",
]
