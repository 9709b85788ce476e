"""Projection of billing records into labeled export rows.

This module produces the human-readable columns used for record exports
and the example rows of the import template.
"""

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from billing_records.models.billing_record import BillingRecord
from billing_records.repositories.reference_data import ReferenceData
from billing_records.validators.import_validator import IMPORT_HEADERS

NOT_APPLICABLE = "N/A"

EXPORT_COLUMNS = [
    "Date",
    "Employee Name",
    "Project Name",
    "Client Name",
    "Amount",
    "Status",
    "Type",
    "Hours Billed",
    "Rate Applied",
    "Achieved Count",
    "Metric Label",
    "Billing Period Start",
    "Billing Period End",
    "Notes",
]


def _two_places(value: Optional[Decimal]) -> str:
    if value is None:
        return NOT_APPLICABLE
    return str(value.quantize(Decimal("0.01")))


def _date_or_na(value: Optional[dt.date]) -> str:
    return value.isoformat() if value is not None else NOT_APPLICABLE


def record_to_export_row(
    record: BillingRecord, reference_data: ReferenceData
) -> Dict[str, Any]:
    """Project one record onto the export columns.

    Args:
        record: Billing record
        reference_data: Used to resolve the employee and project names

    Returns:
        Dictionary keyed by ``EXPORT_COLUMNS``
    """
    project = reference_data.get_project(record.project_id)
    project_name = record.project_name or (project.name if project else NOT_APPLICABLE)

    if record.is_count_based:
        hours = rate = NOT_APPLICABLE
        achieved = (
            record.achieved_count_total
            if record.achieved_count_total is not None
            else NOT_APPLICABLE
        )
        metric_label = record.count_metric_label_used or NOT_APPLICABLE
    else:
        hours = _two_places(record.hours_billed)
        rate = _two_places(record.rate_applied)
        achieved = metric_label = NOT_APPLICABLE

    return {
        "Date": record.date.isoformat(),
        "Employee Name": reference_data.user_display_name(record.user_id),
        "Project Name": project_name,
        "Client Name": record.client_name,
        "Amount": record.calculated_amount,
        "Status": record.status.value,
        "Type": "Count-Based" if record.is_count_based else "Hourly",
        "Hours Billed": hours,
        "Rate Applied": rate,
        "Achieved Count": achieved,
        "Metric Label": metric_label,
        "Billing Period Start": _date_or_na(record.billing_period_start_date),
        "Billing Period End": _date_or_na(record.billing_period_end_date),
        "Notes": record.notes or "",
    }


def build_export_rows(
    records: Sequence[BillingRecord], reference_data: ReferenceData
) -> List[Dict[str, Any]]:
    """Project records onto the export columns, preserving order."""
    return [record_to_export_row(r, reference_data) for r in records]


def default_export_filename(today: Optional[dt.date] = None) -> str:
    """Get the default export file name, e.g. ``billing_records_2024-05-01.csv``."""
    today = today or dt.date.today()
    return f"billing_records_{today.isoformat()}.csv"


def import_template_rows() -> List[Dict[str, str]]:
    """Get the example rows of the import template.

    Returns:
        One hourly and one count-based example row, keyed by the import headers
    """
    hourly = {
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
        "notes": "Hourly work example",
    }
    count_based = {
        "employeeIdentifier": "employee2",
        "projectIdentifier": "proj3",
        "clientName": "Client Beta",
        "date": "2023-10-26",
        "status": "pending",
        "isCountBased": "true",
        "hoursBilled": "",
        "rateApplied": "",
        "calculatedAmount": "125",
        "achievedCountTotal": "250",
        "countMetricLabelUsed": "",
        "notes": "Count-based work example",
    }
    return [{h: row[h] for h in IMPORT_HEADERS} for row in (hourly, count_based)]
