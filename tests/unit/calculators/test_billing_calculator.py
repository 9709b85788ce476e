"""Unit tests for the billing calculator."""

import datetime as dt
from decimal import Decimal

import pytest

from billing_records.calculators.billing_calculator import (
    UNKNOWN_PROJECT_NAME,
    apply_update,
    build_record,
    calculate_hourly_amount,
)
from billing_records.exceptions import BillingValidationError
from billing_records.models.billing_record import (
    BillingRecordUpdate,
    BillingStatus,
    CountBasedBillingRecord,
    HourlyBillingRecord,
    NewCountBasedBillingRecord,
    NewHourlyBillingRecord,
)


@pytest.fixture
def hourly_payload():
    return NewHourlyBillingRecord(
        user_id="u1",
        project_id="proj1",
        client_name="Client Alpha",
        date=dt.date(2023, 10, 25),
        hours_billed="8",
        rate_applied="75",
    )


@pytest.fixture
def count_payload():
    return NewCountBasedBillingRecord(
        user_id="u2",
        project_id="proj3",
        client_name="Client Beta",
        date=dt.date(2023, 10, 26),
        calculated_amount="125",
        achieved_count_total="250",
        count_metric_label_used="Records Processed",
    )


@pytest.fixture
def website_project(reference_data):
    return reference_data.get_project("proj1")


@pytest.fixture
def hourly_record(hourly_payload, website_project):
    return build_record(hourly_payload, "br1", website_project)


@pytest.fixture
def count_record(count_payload, reference_data):
    return build_record(count_payload, "br2", reference_data.get_project("proj3"))


class TestCalculateHourlyAmount:
    """Test hours times rate."""

    def test_amount(self):
        """Test the amount is the exact product."""
        assert calculate_hourly_amount(Decimal("8"), Decimal("75")) == Decimal("600")

    def test_fractional_values(self):
        """Test that fractional hours are not rounded."""
        assert calculate_hourly_amount("7.25", "80.5") == Decimal("583.625")

    @pytest.mark.parametrize(
        "hours,rate",
        [(None, 75), (8, None), (0, 75), (8, 0), (-1, 75), ("x", 75)],
    )
    def test_invalid_inputs(self, hours, rate):
        """Test that missing, zero, negative or non-numeric inputs fail."""
        with pytest.raises(BillingValidationError, match="must be a positive number"):
            calculate_hourly_amount(hours, rate)


class TestBuildRecord:
    """Test record creation."""

    def test_hourly_record(self, hourly_record):
        """Test the amount is hours times rate and the name snapshot is set."""
        assert isinstance(hourly_record, HourlyBillingRecord)
        assert hourly_record.id == "br1"
        assert hourly_record.calculated_amount == Decimal("600")
        assert hourly_record.project_name == "Website Redesign"
        assert hourly_record.status == BillingStatus.PENDING

    def test_count_based_record_keeps_amount(self, count_record):
        """Test the supplied amount is used verbatim."""
        assert isinstance(count_record, CountBasedBillingRecord)
        assert count_record.calculated_amount == Decimal("125")
        assert count_record.count_metric_label_used == "Records Processed"

    def test_unknown_project_name(self, hourly_payload):
        """Test the fallback name when no project is known."""
        record = build_record(hourly_payload, "br3")
        assert record.project_name == UNKNOWN_PROJECT_NAME

    def test_payload_project_name_wins(self, hourly_payload, website_project):
        """Test an explicit name snapshot is kept."""
        payload = hourly_payload.model_copy(update={"project_name": "Old Name"})
        assert build_record(payload, "br4", website_project).project_name == "Old Name"

    def test_hourly_requires_explicit_rate(self, hourly_payload, website_project):
        """Test that the project rate is not substituted on create."""
        payload = hourly_payload.model_copy(update={"rate_applied": None})

        with pytest.raises(BillingValidationError, match="rate_applied"):
            build_record(payload, "br5", website_project)


class TestApplyUpdateHourly:
    """Test updates of hourly records."""

    def test_hours_change_recomputes_with_existing_rate(self, hourly_record, website_project):
        """Test updating hours uses the record's previous rate."""
        updated = apply_update(
            hourly_record, BillingRecordUpdate(hours_billed="10"), website_project
        )

        assert updated.hours_billed == Decimal("10")
        assert updated.rate_applied == Decimal("75")
        assert updated.calculated_amount == Decimal("750")

    def test_rate_change_recomputes(self, hourly_record, website_project):
        updated = apply_update(
            hourly_record, BillingRecordUpdate(rate_applied="100"), website_project
        )
        assert updated.calculated_amount == Decimal("800")

    def test_cleared_rate_falls_back_to_project(self, hourly_record, reference_data):
        """Test a cleared rate uses the project's rate and is persisted."""
        updated = apply_update(
            hourly_record,
            BillingRecordUpdate(rate_applied=None, hours_billed="2"),
            reference_data.get_project("proj2"),
        )

        assert updated.rate_applied == Decimal("90")
        assert updated.calculated_amount == Decimal("180")

    def test_cleared_rate_without_project(self, hourly_record):
        """Test the rate becomes zero when nothing else is known."""
        updated = apply_update(hourly_record, BillingRecordUpdate(rate_applied=None))

        assert updated.rate_applied == Decimal("0")
        assert updated.calculated_amount == Decimal("0")

    def test_cleared_hours_become_zero(self, hourly_record, website_project):
        updated = apply_update(
            hourly_record, BillingRecordUpdate(hours_billed=None), website_project
        )
        assert updated.hours_billed == Decimal("0")
        assert updated.calculated_amount == Decimal("0")

    def test_other_fields_do_not_recompute(self, hourly_record, website_project):
        """Test that a status change leaves the amount untouched."""
        updated = apply_update(
            hourly_record,
            BillingRecordUpdate(status="paid", notes="Settled"),
            website_project,
        )

        assert updated.status == BillingStatus.PAID
        assert updated.notes == "Settled"
        assert updated.calculated_amount == Decimal("600")

    def test_original_record_unchanged(self, hourly_record, website_project):
        apply_update(hourly_record, BillingRecordUpdate(hours_billed="1"), website_project)
        assert hourly_record.hours_billed == Decimal("8")

    def test_cannot_convert_to_count_based(self, hourly_record):
        with pytest.raises(BillingValidationError, match="cannot be converted"):
            apply_update(hourly_record, BillingRecordUpdate(is_count_based=True))

    def test_cannot_set_amount_directly(self, hourly_record):
        """Test that derived fields are rejected."""
        with pytest.raises(BillingValidationError, match="calculated_amount"):
            apply_update(hourly_record, BillingRecordUpdate(calculated_amount="1"))

    def test_invalid_merged_record(self, hourly_record):
        """Test that model validation failures become billing errors."""
        with pytest.raises(BillingValidationError, match="Invalid billing record update"):
            apply_update(hourly_record, BillingRecordUpdate(client_name="  "))


class TestApplyUpdateCountBased:
    """Test updates of count-based records."""

    def test_status_and_notes_allowed(self, count_record):
        updated = apply_update(
            count_record, BillingRecordUpdate(status="overdue", notes="Chase client")
        )

        assert updated.status == BillingStatus.OVERDUE
        assert updated.calculated_amount == Decimal("125")

    @pytest.mark.parametrize(
        "field,value",
        [
            ("hours_billed", "8"),
            ("rate_applied", "75"),
            ("calculated_amount", "999"),
            ("achieved_count_total", "1"),
            ("count_metric_label_used", "Other"),
            ("is_count_based", False),
        ],
    )
    def test_calculated_fields_rejected(self, count_record, field, value):
        """Test that calculated fields of count-based records are locked."""
        with pytest.raises(BillingValidationError, match=field):
            apply_update(count_record, BillingRecordUpdate(**{field: value}))
