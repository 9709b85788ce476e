"""Exception hierarchy for the billing records package.

Global failures (``ParseError``, ``MissingHeaderError``) abort a whole
import. Row-scoped failures (``RowValidationError``, ``PersistenceError``)
are collected by the import service and never escape a single row.
"""

from typing import List


class BillingRecordsError(Exception):
    """Base class for all billing records errors."""


class ParseError(BillingRecordsError):
    """Raised when CSV content cannot be parsed at all."""


class MissingHeaderError(BillingRecordsError):
    """Raised when required CSV headers are absent.

    Attributes:
        missing_headers: Required header names not found in the file
    """

    def __init__(self, missing_headers: List[str]):
        self.missing_headers = list(missing_headers)
        super().__init__(
            f"Missing required CSV headers: {', '.join(self.missing_headers)}"
        )


class RowValidationError(BillingRecordsError):
    """Raised when a single CSV row fails validation.

    Attributes:
        row_number: 1-based source row number (header is row 1)
        message: Description of the problem without the row prefix
    """

    def __init__(self, row_number: int, message: str):
        self.row_number = row_number
        self.message = message
        super().__init__(f"Row {row_number}: {message}")


class BillingValidationError(BillingRecordsError):
    """Raised when billing amounts or updates violate calculation rules."""


class PersistenceError(BillingRecordsError):
    """Raised when the record store rejects an operation."""


class RecordNotFoundError(PersistenceError):
    """Raised when a record id is unknown to the store."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Billing record not found: {record_id}")


class ExportError(BillingRecordsError):
    """Raised when records cannot be exported."""
