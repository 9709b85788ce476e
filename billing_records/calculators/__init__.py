"""Calculator modules for billing records."""

from billing_records.calculators.billing_calculator import (
    COUNT_BASED_LOCKED_FIELDS,
    apply_update,
    build_record,
    calculate_hourly_amount,
)
from billing_records.calculators.billing_summary import (
    BillingSummary,
    records_to_dataframe,
    summarize_records,
)

__all__ = [
    # billing_calculator
    "COUNT_BASED_LOCKED_FIELDS",
    "apply_update",
    "build_record",
    "calculate_hourly_amount",
    # billing_summary
    "BillingSummary",
    "records_to_dataframe",
    "summarize_records",
]
