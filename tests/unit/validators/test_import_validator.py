"""Unit tests for the billing import validator."""

import datetime as dt
from decimal import Decimal

import pytest

from billing_records.exceptions import MissingHeaderError, RowValidationError
from billing_records.models.billing_record import (
    BillingStatus,
    NewCountBasedBillingRecord,
    NewHourlyBillingRecord,
)
from billing_records.readers.csv_parser import CSVRow, parse_csv
from billing_records.validators.import_validator import (
    IMPORT_HEADERS,
    REQUIRED_HEADERS,
    BillingImportValidator,
)
from billing_records.validators.validation_report import ValidationSeverity


def make_row(row_number=2, **values):
    base = {
        "employeeIdentifier": "employee1",
        "projectIdentifier": "proj1",
        "clientName": "Client Alpha",
        "date": "2023-10-25",
        "status": "pending",
        "isCountBased": "false",
        "hoursBilled": "8",
        "rateApplied": "75",
        "calculatedAmount": "",
        "achievedCountTotal": "",
        "countMetricLabelUsed": "",
        "notes": "",
    }
    base.update(values)
    return CSVRow(row_number=row_number, values=base)


@pytest.fixture
def validator(reference_data):
    return BillingImportValidator(reference_data)


class TestHeaders:
    """Test the required header check."""

    def test_all_headers_present(self, validator):
        """Test that the full header set passes."""
        validator.check_headers(IMPORT_HEADERS)

    def test_headers_are_case_insensitive(self, validator):
        """Test that header casing and spacing do not matter."""
        validator.check_headers([f" {h.upper()} " for h in REQUIRED_HEADERS])

    def test_optional_headers_may_be_absent(self, validator):
        """Test that only the required headers are needed."""
        validator.check_headers(REQUIRED_HEADERS)

    def test_missing_headers_listed(self, validator):
        """Test that every missing header is listed in canonical order."""
        headers = [h for h in IMPORT_HEADERS if h not in ("status", "clientName")]

        with pytest.raises(MissingHeaderError) as exc_info:
            validator.check_headers(headers)

        assert exc_info.value.missing_headers == ["clientName", "status"]
        assert str(exc_info.value) == "Missing required CSV headers: clientName, status"


class TestMapHourlyRow:
    """Test mapping of hourly rows."""

    def test_hourly_row(self, validator):
        """Test an hourly row becomes an hourly payload."""
        mapped = validator.map_row(make_row(notes="Hourly work example"))

        payload = mapped.payload
        assert isinstance(payload, NewHourlyBillingRecord)
        assert payload.user_id == "u1"
        assert payload.project_id == "proj1"
        assert payload.project_name == "Website Redesign"
        assert payload.date == dt.date(2023, 10, 25)
        assert payload.status == BillingStatus.PENDING
        assert payload.hours_billed == Decimal("8")
        assert payload.rate_applied == Decimal("75")
        assert payload.notes == "Hourly work example"
        assert mapped.user.username == "employee1"
        assert mapped.row_number == 2

    def test_identifiers_resolved_by_name(self, validator):
        """Test employee full name and project name resolve."""
        mapped = validator.map_row(
            make_row(employeeIdentifier="jane smith", projectIdentifier="Mobile App Development")
        )

        assert mapped.payload.user_id == "u2"
        assert mapped.payload.project_id == "proj2"

    def test_rate_falls_back_to_project_rate(self, validator):
        """Test a blank rate uses the project's rate."""
        mapped = validator.map_row(make_row(projectIdentifier="proj2", rateApplied=""))
        assert mapped.payload.rate_applied == Decimal("90")

    def test_missing_rate_without_project_rate(self, validator):
        """Test a blank rate on a project without a rate is a row error."""
        with pytest.raises(RowValidationError) as exc_info:
            validator.map_row(make_row(projectIdentifier="proj3", rateApplied=""))

        assert exc_info.value.message == (
            "'rateApplied' is required and must be a positive number "
            "(or project default rate) for hourly records."
        )

    def test_zero_rate_rejected(self, validator):
        """Test that an explicit zero rate is not replaced by the project rate."""
        with pytest.raises(RowValidationError, match="rateApplied"):
            validator.map_row(make_row(rateApplied="0"))

    @pytest.mark.parametrize("hours", ["", "0", "-2", "eight"])
    def test_invalid_hours(self, validator, hours):
        """Test that hours must be a positive number."""
        with pytest.raises(RowValidationError) as exc_info:
            validator.map_row(make_row(hoursBilled=hours))

        assert exc_info.value.message == (
            "'hoursBilled' is required and must be a positive number for hourly records."
        )

    def test_blank_notes_become_none(self, validator):
        mapped = validator.map_row(make_row(notes="   "))
        assert mapped.payload.notes is None

    def test_non_true_flag_is_hourly(self, validator):
        """Test that any value other than "true" means hourly."""
        mapped = validator.map_row(make_row(isCountBased="yes"))
        assert isinstance(mapped.payload, NewHourlyBillingRecord)


class TestMapCountBasedRow:
    """Test mapping of count-based rows."""

    def test_count_based_row(self, validator):
        """Test a count-based row keeps its amount and defaults the label."""
        mapped = validator.map_row(
            make_row(
                employeeIdentifier="employee2",
                projectIdentifier="proj3",
                isCountBased="TRUE",
                hoursBilled="",
                rateApplied="",
                calculatedAmount="125",
                achievedCountTotal="250",
            )
        )

        payload = mapped.payload
        assert isinstance(payload, NewCountBasedBillingRecord)
        assert payload.calculated_amount == Decimal("125")
        assert payload.achieved_count_total == Decimal("250")
        assert payload.count_metric_label_used == "Records Processed"

    def test_explicit_metric_label(self, validator):
        mapped = validator.map_row(
            make_row(
                projectIdentifier="proj3",
                isCountBased="true",
                calculatedAmount="10",
                countMetricLabelUsed="Rows",
            )
        )
        assert mapped.payload.count_metric_label_used == "Rows"

    def test_count_based_on_hourly_project_has_no_label(self, validator):
        """Test the label stays empty when the project has none."""
        mapped = validator.map_row(
            make_row(isCountBased="true", calculatedAmount="10")
        )
        assert mapped.payload.count_metric_label_used is None

    @pytest.mark.parametrize("amount", ["", "abc"])
    def test_invalid_amount(self, validator, amount):
        """Test that the amount must be numeric."""
        with pytest.raises(RowValidationError) as exc_info:
            validator.map_row(
                make_row(projectIdentifier="proj3", isCountBased="true", calculatedAmount=amount)
            )

        assert exc_info.value.message == (
            "'calculatedAmount' is required and must be a number for count-based records."
        )

    def test_non_numeric_achieved_count(self, validator):
        with pytest.raises(RowValidationError, match="achievedCountTotal"):
            validator.map_row(
                make_row(
                    projectIdentifier="proj3",
                    isCountBased="true",
                    calculatedAmount="10",
                    achievedCountTotal="many",
                )
            )


class TestRowErrors:
    """Test row-level failures and their order."""

    def test_missing_required_value(self, validator):
        """Test that a blank required value lists the required fields."""
        with pytest.raises(RowValidationError) as exc_info:
            validator.map_row(make_row(row_number=5, clientName=""))

        assert str(exc_info.value) == (
            "Row 5: Missing required fields (employeeIdentifier, projectIdentifier, "
            "clientName, date, status, isCountBased)."
        )

    def test_unknown_employee(self, validator):
        with pytest.raises(RowValidationError) as exc_info:
            validator.map_row(make_row(employeeIdentifier="ghost"))
        assert exc_info.value.message == 'Employee "ghost" not found.'

    def test_unknown_project(self, validator):
        with pytest.raises(RowValidationError) as exc_info:
            validator.map_row(make_row(projectIdentifier="proj999"))
        assert exc_info.value.message == 'Project "proj999" not found.'

    def test_invalid_status(self, validator):
        with pytest.raises(RowValidationError) as exc_info:
            validator.map_row(make_row(status="done"))
        assert exc_info.value.message == (
            'Invalid status "done". Must be one of: pending, paid, overdue.'
        )

    def test_status_is_case_insensitive(self, validator):
        mapped = validator.map_row(make_row(status="PAID"))
        assert mapped.payload.status == BillingStatus.PAID

    def test_invalid_date(self, validator):
        with pytest.raises(RowValidationError) as exc_info:
            validator.map_row(make_row(date="25.10.2023"))
        assert exc_info.value.message == (
            'Invalid date "25.10.2023". Expected format YYYY-MM-DD.'
        )

    def test_employee_checked_before_project(self, validator):
        """Test the first failing check is the one reported."""
        with pytest.raises(RowValidationError, match="Employee"):
            validator.map_row(make_row(employeeIdentifier="ghost", projectIdentifier="nope"))


class TestValidate:
    """Test the dry-run report."""

    def test_report_counts(self, validator, import_csv_header):
        """Test valid rows, row errors and skipped rows are all reported."""
        text = "\n".join(
            [
                import_csv_header,
                "employee1,proj1,Client Alpha,2023-10-25,pending,false,8,75,,,,",
                "employee1,proj999,Client Alpha,2023-10-25,pending,false,8,75,,,,",
                "too,few,columns",
            ]
        )

        report = validator.validate(parse_csv(text))

        assert report.valid_row_count == 1
        assert report.error_count == 1
        assert report.warning_count == 1
        error = report.issues_at_least(ValidationSeverity.ERROR)[0]
        assert error.row_number == 3
        assert error.message == 'Project "proj999" not found.'

    def test_missing_header_is_single_error(self, validator):
        """Test a missing header stops row validation."""
        report = validator.validate(parse_csv("employeeIdentifier,date\ne1,2023-01-01"))

        assert report.error_count == 1
        assert report.valid_row_count == 0
        assert report.issues[-1].field == "headers"
