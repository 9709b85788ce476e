"""Field-level validators for billing import rows.

Each validator either returns the parsed value or raises
:class:`RowValidationError` carrying the source row number.
"""

import datetime as dt
from decimal import Decimal
from typing import Iterable, Optional

from billing_records.exceptions import RowValidationError
from billing_records.models.base import to_decimal


class FieldValidators:
    """Collection of field-level parsing and validation methods."""

    @staticmethod
    def require_values(
        values: Iterable[str], message: str, row_number: int
    ) -> None:
        """Ensure none of the values is blank.

        Args:
            values: Raw field values to check
            message: Error message used when any value is blank
            row_number: Source row number

        Raises:
            RowValidationError: If any value is empty or whitespace
        """
        if any(not value or not value.strip() for value in values):
            raise RowValidationError(row_number, message)

    @staticmethod
    def parse_number(value: str) -> Optional[Decimal]:
        """Parse a numeric string leniently.

        Args:
            value: Raw field value

        Returns:
            The parsed Decimal, or None if the value is blank or not numeric
        """
        if not value or not value.strip():
            return None
        try:
            return to_decimal(value)
        except ValueError:
            return None

    @staticmethod
    def parse_required_number(value: str, row_number: int, message: str) -> Decimal:
        """Parse a number that must be present.

        Args:
            value: Raw field value
            row_number: Source row number
            message: Error message used when the value is missing or invalid

        Returns:
            The parsed Decimal

        Raises:
            RowValidationError: If the value is blank or not numeric
        """
        number = FieldValidators.parse_number(value)
        if number is None:
            raise RowValidationError(row_number, message)
        return number

    @staticmethod
    def parse_positive_number(
        value: str, row_number: int, message: str
    ) -> Decimal:
        """Parse a number that must be present and greater than zero.

        Raises:
            RowValidationError: If the value is blank, not numeric or <= 0
        """
        number = FieldValidators.parse_number(value)
        if number is None or number <= 0:
            raise RowValidationError(row_number, message)
        return number

    @staticmethod
    def parse_optional_number(
        value: str, field_name: str, row_number: int
    ) -> Optional[Decimal]:
        """Parse a number that may be left blank.

        Returns:
            The parsed Decimal, or None when blank

        Raises:
            RowValidationError: If a non-blank value is not numeric
        """
        if not value or not value.strip():
            return None
        number = FieldValidators.parse_number(value)
        if number is None:
            raise RowValidationError(
                row_number, f"'{field_name}' must be a number if provided."
            )
        return number

    @staticmethod
    def parse_iso_date(value: str, field_name: str, row_number: int) -> dt.date:
        """Parse a ``YYYY-MM-DD`` calendar date.

        Raises:
            RowValidationError: If the value is not a valid date in that format
        """
        try:
            return dt.datetime.strptime(value.strip(), "%Y-%m-%d").date()
        except ValueError:
            raise RowValidationError(
                row_number,
                f"Invalid {field_name} \"{value}\". Expected format YYYY-MM-DD.",
            )
