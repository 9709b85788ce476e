"""Billing summary tables built as pandas DataFrames.

Totals are computed in Decimal for the grand total and in float inside the
DataFrames, which are meant for display and reporting.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Sequence

import pandas as pd

from billing_records.models.billing_record import BillingRecord, BillingStatus

RECORD_COLUMNS = [
    "id",
    "date",
    "user_id",
    "project_id",
    "project_name",
    "client_name",
    "status",
    "type",
    "calculated_amount",
]


@dataclass
class BillingSummary:
    """Aggregated billing figures.

    Attributes:
        by_status: Record count and amount per status
        by_project: Record count and amount per project
        total_amount: Sum of all calculated amounts
        record_count: Number of records summarized
    """

    by_status: pd.DataFrame
    by_project: pd.DataFrame
    total_amount: Decimal
    record_count: int


def records_to_dataframe(records: Sequence[BillingRecord]) -> pd.DataFrame:
    """Flatten records into a DataFrame with one row per record.

    Args:
        records: Billing records

    Returns:
        DataFrame with the columns in ``RECORD_COLUMNS``
    """
    rows = [
        {
            "id": r.id,
            "date": r.date,
            "user_id": r.user_id,
            "project_id": r.project_id,
            "project_name": r.project_name,
            "client_name": r.client_name,
            "status": r.status.value,
            "type": "Count-Based" if r.is_count_based else "Hourly",
            "calculated_amount": float(r.calculated_amount),
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def summarize_records(records: Sequence[BillingRecord]) -> BillingSummary:
    """Summarize records by status and by project.

    Every status appears in ``by_status`` even when it has no records.

    Args:
        records: Billing records

    Returns:
        BillingSummary

    Example:
        >>> summary = summarize_records(records)
        >>> summary.by_status.loc["pending", "amount"]
        725.0
    """
    df = records_to_dataframe(records)
    statuses: List[str] = BillingStatus.values()

    by_status = (
        df.groupby("status")["calculated_amount"]
        .agg(records="count", amount="sum")
        .reindex(statuses, fill_value=0)
    )
    by_status.index.name = "status"

    by_project = (
        df.groupby(["project_id", "project_name"])["calculated_amount"]
        .agg(records="count", amount="sum")
        .reset_index()
        .sort_values("amount", ascending=False, kind="stable")
        .reset_index(drop=True)
    )

    total = sum((r.calculated_amount for r in records), Decimal("0"))

    return BillingSummary(
        by_status=by_status,
        by_project=by_project,
        total_amount=total,
        record_count=len(records),
    )
