"""Billing record data models.

A billing record is either hourly or count-based. The two shapes are
separate models sharing a common base, and ``is_count_based`` tells them
apart. ``calculated_amount`` is the authoritative total for both.
"""

import datetime as dt
import secrets
import time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import Field, field_validator, model_validator

from billing_records.models.base import BaseDataModel, to_decimal


class BillingStatus(str, Enum):
    """Payment status of a billing record."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"

    @classmethod
    def values(cls) -> List[str]:
        return [status.value for status in cls]


def generate_record_id() -> str:
    """Generate a new billing record id.

    Returns:
        Id of the form ``br<epoch-ms>-<hex>``
    """
    return f"br{int(time.time() * 1000)}-{secrets.token_hex(6)}"


class AttendanceSummary(BaseDataModel):
    """Attendance totals for the billing period of a record."""

    days_present: int = Field(..., ge=0)
    days_on_leave: int = Field(..., ge=0)


class ProjectBillingDetail(BaseDataModel):
    """One project's share of a record that spans several projects.

    Attributes:
        project_id: Project identifier
        project_name: Project name at the time of billing
        amount: Amount billed for this project
        hours: Hours worked (hourly projects)
        achieved_count: Counted quantity (count-based projects)
    """

    project_id: str = Field(..., min_length=1)
    project_name: str = Field(..., min_length=1)
    amount: Decimal
    hours: Optional[Decimal] = Field(None, ge=0)
    achieved_count: Optional[Decimal] = Field(None, ge=0)

    @field_validator("amount", "hours", "achieved_count", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)


class _BillingFields(BaseDataModel):
    """Fields shared by stored records and creation payloads."""

    user_id: str = Field(..., min_length=1, description="Billed employee id")
    project_id: str = Field(..., min_length=1, description="Project id")
    client_name: str = Field(..., min_length=1, description="Client name")
    date: dt.date = Field(..., description="Billing date")
    status: BillingStatus = Field(BillingStatus.PENDING)
    notes: Optional[str] = None
    billing_period_start_date: Optional[dt.date] = None
    billing_period_end_date: Optional[dt.date] = None
    attendance_summary: Optional[AttendanceSummary] = None
    details: Optional[List[ProjectBillingDetail]] = None

    @field_validator("user_id", "project_id", "client_name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Validate that string fields are not empty or whitespace only.

        Args:
            v: The value to validate
            info: Field validation info

        Returns:
            The stripped value

        Raises:
            ValueError: If the value is empty or whitespace only
        """
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @model_validator(mode="after")
    def validate_billing_period(self):
        """Ensure the billing period does not end before it starts."""
        start = self.billing_period_start_date
        end = self.billing_period_end_date
        if start is not None and end is not None and end < start:
            raise ValueError(
                f"billing_period_end_date ({end}) is before "
                f"billing_period_start_date ({start})"
            )
        return self


class _StoredRecordFields(_BillingFields):
    id: str = Field(..., min_length=1, description="Record identifier")
    project_name: str = Field(..., min_length=1, description="Project name snapshot")
    calculated_amount: Decimal = Field(..., description="Authoritative total")

    @field_validator("calculated_amount", mode="before")
    @classmethod
    def convert_amount(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)


class HourlyBillingRecord(_StoredRecordFields):
    """A billing record derived from hours times rate.

    Example:
        >>> record = HourlyBillingRecord(
        ...     id="br1",
        ...     user_id="u2",
        ...     project_id="proj1",
        ...     project_name="Website Redesign",
        ...     client_name="Client Alpha",
        ...     date=dt.date(2023, 10, 25),
        ...     hours_billed=8,
        ...     rate_applied=75,
        ...     calculated_amount=600,
        ... )
        >>> record.is_count_based
        False
    """

    is_count_based: Literal[False] = False
    hours_billed: Decimal = Field(..., ge=0)
    rate_applied: Decimal = Field(..., ge=0)

    @field_validator("hours_billed", "rate_applied", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)


class CountBasedBillingRecord(_StoredRecordFields):
    """A billing record whose amount was computed from a counted metric.

    The amount is supplied when the record is created and is never
    recomputed by this package.
    """

    is_count_based: Literal[True] = True
    achieved_count_total: Optional[Decimal] = Field(None, ge=0)
    count_metric_label_used: Optional[str] = None

    @field_validator("achieved_count_total", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)


BillingRecord = Union[HourlyBillingRecord, CountBasedBillingRecord]


class NewHourlyBillingRecord(_BillingFields):
    """Creation payload for an hourly record.

    Hours and rate are validated by the billing calculator when the record
    is built, so that a missing or non-positive rate is reported as a
    billing error rather than a schema error.
    """

    is_count_based: Literal[False] = False
    project_name: Optional[str] = None
    hours_billed: Optional[Decimal] = None
    rate_applied: Optional[Decimal] = None

    @field_validator("hours_billed", "rate_applied", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)


class NewCountBasedBillingRecord(_BillingFields):
    """Creation payload for a count-based record with a pre-computed amount."""

    is_count_based: Literal[True] = True
    project_name: Optional[str] = None
    calculated_amount: Decimal
    achieved_count_total: Optional[Decimal] = Field(None, ge=0)
    count_metric_label_used: Optional[str] = None

    @field_validator("calculated_amount", "achieved_count_total", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)


NewBillingRecord = Union[NewHourlyBillingRecord, NewCountBasedBillingRecord]


class BillingRecordUpdate(BaseDataModel):
    """Partial update for an existing record.

    Only fields explicitly set on the instance are applied; see
    :meth:`changes`.
    """

    user_id: Optional[str] = None
    project_id: Optional[str] = None
    project_name: Optional[str] = None
    client_name: Optional[str] = None
    date: Optional[dt.date] = None
    status: Optional[BillingStatus] = None
    notes: Optional[str] = None
    is_count_based: Optional[bool] = None
    hours_billed: Optional[Decimal] = None
    rate_applied: Optional[Decimal] = None
    calculated_amount: Optional[Decimal] = None
    achieved_count_total: Optional[Decimal] = None
    count_metric_label_used: Optional[str] = None
    billing_period_start_date: Optional[dt.date] = None
    billing_period_end_date: Optional[dt.date] = None
    attendance_summary: Optional[AttendanceSummary] = None
    details: Optional[List[ProjectBillingDetail]] = None

    @field_validator(
        "hours_billed",
        "rate_applied",
        "calculated_amount",
        "achieved_count_total",
        mode="before",
    )
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)

    def changes(self) -> Dict[str, Any]:
        """Return only the fields that were explicitly set."""
        return self.model_dump(exclude_unset=True)


def record_from_dict(data: Dict[str, Any]) -> BillingRecord:
    """Build the right record model from a plain dictionary.

    Args:
        data: Serialized record, e.g. from ``model_dump(mode="json")``

    Returns:
        HourlyBillingRecord or CountBasedBillingRecord
    """
    if data.get("is_count_based"):
        return CountBasedBillingRecord.model_validate(data)
    return HourlyBillingRecord.model_validate(data)
