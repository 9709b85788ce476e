"""Import validator that maps CSV rows onto billing record payloads.

This module checks the header set of an import file, then validates each
row independently: required values, identifier resolution against the
reference data, status, and the fields of the hourly or count-based branch.
A valid row becomes a typed creation payload.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Type

from pydantic import ValidationError

from billing_records.exceptions import MissingHeaderError, RowValidationError
from billing_records.models.billing_record import (
    BillingStatus,
    NewBillingRecord,
    NewCountBasedBillingRecord,
    NewHourlyBillingRecord,
)
from billing_records.models.project import Project, User
from billing_records.readers.csv_parser import CSVRow, ParsedCSV
from billing_records.repositories.reference_data import ReferenceData
from billing_records.validators.field_validators import FieldValidators
from billing_records.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)

REQUIRED_HEADERS = [
    "employeeIdentifier",
    "projectIdentifier",
    "clientName",
    "date",
    "status",
    "isCountBased",
]

OPTIONAL_HEADERS = [
    "hoursBilled",
    "rateApplied",
    "calculatedAmount",
    "achievedCountTotal",
    "countMetricLabelUsed",
    "notes",
]

IMPORT_HEADERS = REQUIRED_HEADERS + OPTIONAL_HEADERS


@dataclass
class MappedRow:
    """A validated row together with the entities it resolved to.

    Attributes:
        row_number: 1-based source row number
        payload: Creation payload for the record
        user: Resolved employee
        project: Resolved project
    """

    row_number: int
    payload: NewBillingRecord
    user: User
    project: Project


class BillingImportValidator:
    """Validates import rows and builds creation payloads.

    Attributes:
        reference_data: Known users and projects
        status_enum: Enum of accepted status values

    Example:
        >>> validator = BillingImportValidator(ReferenceData.default(users))
        >>> validator.check_headers(parsed.headers)
        >>> mapped = validator.map_row(parsed.rows[0])
        >>> mapped.payload.client_name
        'Client Alpha'
    """

    def __init__(
        self,
        reference_data: ReferenceData,
        status_enum: Type[BillingStatus] = BillingStatus,
    ):
        self.reference_data = reference_data
        self.status_enum = status_enum

    @staticmethod
    def find_missing_headers(headers: Iterable[str]) -> List[str]:
        """Get the required headers absent from a header row.

        Args:
            headers: Header names as found in the file

        Returns:
            Missing required header names, in canonical order
        """
        present = {h.strip().lower() for h in headers}
        return [h for h in REQUIRED_HEADERS if h.lower() not in present]

    def check_headers(self, headers: Iterable[str]) -> None:
        """Verify that every required header is present.

        Args:
            headers: Header names as found in the file

        Raises:
            MissingHeaderError: If any required header is missing
        """
        missing = self.find_missing_headers(headers)
        if missing:
            raise MissingHeaderError(missing)

    def map_row(self, row: CSVRow) -> MappedRow:
        """Validate one row and build its creation payload.

        Args:
            row: Parsed CSV row

        Returns:
            MappedRow with the payload and resolved user and project

        Raises:
            RowValidationError: On the first problem found in the row
        """
        n = row.row_number

        employee_identifier = row.get("employeeIdentifier")
        project_identifier = row.get("projectIdentifier")
        client_name = row.get("clientName")
        date_str = row.get("date")
        status_str = row.get("status")
        is_count_based_str = row.get("isCountBased").lower()

        FieldValidators.require_values(
            [
                employee_identifier,
                project_identifier,
                client_name,
                date_str,
                status_str,
                is_count_based_str,
            ],
            "Missing required fields (" + ", ".join(REQUIRED_HEADERS) + ").",
            n,
        )

        user = self.reference_data.find_user(employee_identifier)
        if user is None:
            raise RowValidationError(n, f'Employee "{employee_identifier}" not found.')

        project = self.reference_data.find_project(project_identifier)
        if project is None:
            raise RowValidationError(n, f'Project "{project_identifier}" not found.')

        status = self._parse_status(status_str, n)
        date = FieldValidators.parse_iso_date(date_str, "date", n)
        notes = row.get("notes") or None

        common = dict(
            user_id=user.id,
            project_id=project.id,
            project_name=project.name,
            client_name=client_name,
            date=date,
            status=status,
            notes=notes,
        )

        if is_count_based_str == "true":
            calculated_amount = FieldValidators.parse_required_number(
                row.get("calculatedAmount"),
                n,
                "'calculatedAmount' is required and must be a number "
                "for count-based records.",
            )
            achieved_count_total = FieldValidators.parse_optional_number(
                row.get("achievedCountTotal"), "achievedCountTotal", n
            )
            metric_label = row.get("countMetricLabelUsed") or project.count_metric_label
            payload = self._build(
                NewCountBasedBillingRecord,
                n,
                calculated_amount=calculated_amount,
                achieved_count_total=achieved_count_total,
                count_metric_label_used=metric_label,
                **common,
            )
        else:
            hours_billed = FieldValidators.parse_positive_number(
                row.get("hoursBilled"),
                n,
                "'hoursBilled' is required and must be a positive number "
                "for hourly records.",
            )
            rate_applied = self._resolve_rate(row.get("rateApplied"), project)
            if rate_applied is None:
                raise RowValidationError(
                    n,
                    "'rateApplied' is required and must be a positive number "
                    "(or project default rate) for hourly records.",
                )
            payload = self._build(
                NewHourlyBillingRecord,
                n,
                hours_billed=hours_billed,
                rate_applied=rate_applied,
                **common,
            )

        logger.debug(
            f"Row {n}: mapped {type(payload).__name__} for "
            f"{user.username} / {project.name}"
        )
        return MappedRow(row_number=n, payload=payload, user=user, project=project)

    def validate(self, parsed: ParsedCSV) -> ValidationReport:
        """Validate a parsed file without creating anything.

        Skipped rows are reported as warnings and invalid rows as errors.
        A missing header is a single error and stops row validation.

        Args:
            parsed: Output of :func:`parse_csv`

        Returns:
            ValidationReport describing every problem found
        """
        report = ValidationReport()

        for skipped in parsed.skipped_rows:
            report.add_warning(
                "row",
                f"Skipped - {skipped.reason}",
                skipped.preview(),
                row_number=skipped.row_number,
            )

        missing = self.find_missing_headers(parsed.headers)
        if missing:
            report.add_error(
                "headers",
                f"Missing required CSV headers: {', '.join(missing)}",
                missing,
            )
            return report

        for row in parsed.rows:
            try:
                self.map_row(row)
            except RowValidationError as e:
                report.add_error("row", e.message, row_number=e.row_number)
            else:
                report.valid_row_count += 1

        return report

    def _parse_status(self, value: str, row_number: int) -> BillingStatus:
        try:
            return self.status_enum(value.lower())
        except ValueError:
            valid = ", ".join(status.value for status in self.status_enum)
            raise RowValidationError(
                row_number, f'Invalid status "{value}". Must be one of: {valid}.'
            )

    @staticmethod
    def _resolve_rate(value: str, project: Project) -> Optional[Decimal]:
        """Use the row's rate when it is a positive number, else the project's."""
        if value:
            rate = FieldValidators.parse_number(value)
        else:
            rate = project.rate_per_hour
        if rate is None or rate <= 0:
            return None
        return rate

    @staticmethod
    def _build(model: Type, row_number: int, **fields) -> NewBillingRecord:
        try:
            return model(**fields)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise RowValidationError(row_number, f"Invalid record data - {problems}")
