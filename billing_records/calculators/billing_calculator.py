"""Billing calculator keeping ``calculated_amount`` authoritative.

This module implements the amount rules for billing records:
- Hourly records: amount = hours billed × rate applied
- Count-based records: amount supplied by the caller, never recomputed
- Updates to hourly hours or rate recompute the amount
- Updates to count-based calculated fields are rejected
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import ValidationError

from billing_records.exceptions import BillingValidationError
from billing_records.models.base import to_decimal
from billing_records.models.billing_record import (
    BillingRecord,
    BillingRecordUpdate,
    CountBasedBillingRecord,
    HourlyBillingRecord,
    NewBillingRecord,
    NewHourlyBillingRecord,
)
from billing_records.models.project import Project

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT_NAME = "Unknown Project"

# Fields a count-based record cannot change outside the count calculator
COUNT_BASED_LOCKED_FIELDS = frozenset(
    {
        "is_count_based",
        "hours_billed",
        "rate_applied",
        "calculated_amount",
        "achieved_count_total",
        "count_metric_label_used",
    }
)


def _positive(value: Any, field_name: str) -> Decimal:
    try:
        number = to_decimal(value)
    except ValueError:
        number = None
    if number is None or number <= 0:
        raise BillingValidationError(
            f"{field_name} must be a positive number, got {value!r}"
        )
    return number


def calculate_hourly_amount(hours_billed: Any, rate_applied: Any) -> Decimal:
    """Calculate the amount of an hourly record.

    Args:
        hours_billed: Hours worked, must be positive
        rate_applied: Hourly rate, must be positive

    Returns:
        hours_billed × rate_applied

    Raises:
        BillingValidationError: If hours or rate are missing or not positive

    Example:
        >>> calculate_hourly_amount(Decimal("8"), Decimal("75"))
        Decimal('600')
    """
    hours = _positive(hours_billed, "hours_billed")
    rate = _positive(rate_applied, "rate_applied")
    return hours * rate


def build_record(
    payload: NewBillingRecord,
    record_id: str,
    project: Optional[Project] = None,
) -> BillingRecord:
    """Build a stored record from a creation payload.

    Hourly payloads must carry an explicit positive rate; no project rate
    is substituted here. Count-based payloads keep their supplied amount.

    Args:
        payload: Hourly or count-based creation payload
        record_id: Id to assign to the new record
        project: Project the record belongs to, for the name snapshot

    Returns:
        HourlyBillingRecord or CountBasedBillingRecord

    Raises:
        BillingValidationError: If hours or rate are invalid, or the record
            data fails model validation
    """
    data = payload.model_dump()
    data["id"] = record_id
    data["project_name"] = payload.project_name or (
        project.name if project else UNKNOWN_PROJECT_NAME
    )

    if isinstance(payload, NewHourlyBillingRecord):
        data["calculated_amount"] = calculate_hourly_amount(
            payload.hours_billed, payload.rate_applied
        )
        model = HourlyBillingRecord
    else:
        model = CountBasedBillingRecord

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise BillingValidationError(f"Invalid billing record: {e}") from e


def apply_update(
    record: BillingRecord,
    update: BillingRecordUpdate,
    project: Optional[Project] = None,
) -> BillingRecord:
    """Apply a partial update and reconcile the amount.

    For hourly records, a change to ``hours_billed`` or ``rate_applied``
    recomputes the amount with rate = updated rate, else the record's rate,
    else the project's rate, else 0, and hours = updated hours or 0. The
    resolved rate is stored on the record.

    Count-based records accept only non-calculated fields.

    Args:
        record: Current stored record
        update: Partial update; only explicitly set fields apply
        project: The record's project after the update, for the default rate

    Returns:
        A new record instance with the update applied

    Raises:
        BillingValidationError: If the update touches fields it may not
    """
    changes = update.changes()

    if isinstance(record, CountBasedBillingRecord):
        locked = sorted(COUNT_BASED_LOCKED_FIELDS & changes.keys())
        if locked:
            raise BillingValidationError(
                "Count-based records only allow non-calculated fields to be "
                f"updated; cannot change: {', '.join(locked)}"
            )
        return _revalidate(CountBasedBillingRecord, record, changes)

    if changes.get("is_count_based"):
        raise BillingValidationError(
            "An hourly record cannot be converted to a count-based record"
        )
    changes.pop("is_count_based", None)

    disallowed = sorted(
        {"calculated_amount", "achieved_count_total", "count_metric_label_used"}
        & changes.keys()
    )
    if disallowed:
        raise BillingValidationError(
            f"Hourly records derive these fields; cannot set: {', '.join(disallowed)}"
        )

    merged = _merge(record, changes)

    if "hours_billed" in changes or "rate_applied" in changes:
        rate = merged.get("rate_applied")
        if rate is None:
            rate = (
                project.rate_per_hour
                if project is not None and project.rate_per_hour is not None
                else Decimal("0")
            )
        hours = merged.get("hours_billed")
        if hours is None:
            hours = Decimal("0")

        merged["rate_applied"] = rate
        merged["hours_billed"] = hours
        merged["calculated_amount"] = to_decimal(hours) * to_decimal(rate)
        logger.debug(
            f"Recalculated record {record.id}: {hours} h × {rate} = "
            f"{merged['calculated_amount']}"
        )

    return _validate(HourlyBillingRecord, merged)


def _merge(record: BillingRecord, changes: Dict[str, Any]) -> Dict[str, Any]:
    merged = record.model_dump()
    merged.update(changes)
    return merged


def _revalidate(model, record: BillingRecord, changes: Dict[str, Any]):
    return _validate(model, _merge(record, changes))


def _validate(model, data: Dict[str, Any]):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise BillingValidationError(f"Invalid billing record update: {e}") from e
