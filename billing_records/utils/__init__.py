"""Shared utilities."""

from billing_records.utils.logging_utils import (
    ContextFilter,
    LogContext,
    current_context,
    generate_correlation_id,
    log_function_call,
)

__all__ = [
    "ContextFilter",
    "LogContext",
    "current_context",
    "generate_correlation_id",
    "log_function_call",
]
