"""Validation layer for billing import data."""

from billing_records.validators.field_validators import FieldValidators
from billing_records.validators.import_validator import (
    IMPORT_HEADERS,
    REQUIRED_HEADERS,
    BillingImportValidator,
    MappedRow,
)
from billing_records.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)

__all__ = [
    "BillingImportValidator",
    "FieldValidators",
    "IMPORT_HEADERS",
    "MappedRow",
    "REQUIRED_HEADERS",
    "ValidationIssue",
    "ValidationReport",
    "ValidationSeverity",
]
