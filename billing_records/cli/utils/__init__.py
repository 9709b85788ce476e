"""CLI utility functions."""

from billing_records.cli.utils.formatters import (
    format_amount,
    format_error,
    format_info,
    format_section,
    format_success,
    format_table,
    format_warning,
)
from billing_records.cli.utils.progress import ProgressTracker, create_progress_bar

__all__ = [
    "format_amount",
    "format_error",
    "format_info",
    "format_section",
    "format_success",
    "format_table",
    "format_warning",
    "ProgressTracker",
    "create_progress_bar",
]
