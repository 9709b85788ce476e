"""Validation report for collecting import issues without writing records."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, List, Optional


class ValidationSeverity(IntEnum):
    """Severity levels for validation issues."""

    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class ValidationIssue:
    """Represents a single validation issue.

    Attributes:
        severity: The severity level of the issue
        field: Column or concern the issue relates to
        message: Human-readable description of the issue
        value: The offending value, if any
        row_number: 1-based source row, if the issue is row-scoped
    """

    severity: ValidationSeverity
    field: str
    message: str
    value: Any = None
    row_number: Optional[int] = None

    def __str__(self) -> str:
        """Return string representation of the issue.

        Returns:
            Formatted string with severity, row, field and message
        """
        location = f" (row {self.row_number})" if self.row_number is not None else ""
        return f"[{self.severity.name}] {self.field}: {self.message}{location}"


class ValidationReport:
    """Collects validation issues found during a dry-run import.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("status", "Invalid status", "done", row_number=3)
        >>> report.is_valid()
        False
    """

    def __init__(self) -> None:
        self.issues: List[ValidationIssue] = []
        self.valid_row_count = 0

    def _count(self, severity: ValidationSeverity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        return self._count(ValidationSeverity.INFO)

    def is_valid(self) -> bool:
        """Check if validation passed (no errors).

        Warnings and info messages do not affect validity.

        Returns:
            True if no errors are present, False otherwise
        """
        return self.error_count == 0

    def add(
        self,
        severity: ValidationSeverity,
        field: str,
        message: str,
        value: Any = None,
        row_number: Optional[int] = None,
    ) -> None:
        self.issues.append(
            ValidationIssue(
                severity=severity,
                field=field,
                message=message,
                value=value,
                row_number=row_number,
            )
        )

    def add_error(
        self,
        field: str,
        message: str,
        value: Any = None,
        row_number: Optional[int] = None,
    ) -> None:
        self.add(ValidationSeverity.ERROR, field, message, value, row_number)

    def add_warning(
        self,
        field: str,
        message: str,
        value: Any = None,
        row_number: Optional[int] = None,
    ) -> None:
        self.add(ValidationSeverity.WARNING, field, message, value, row_number)

    def add_info(
        self,
        field: str,
        message: str,
        value: Any = None,
        row_number: Optional[int] = None,
    ) -> None:
        self.add(ValidationSeverity.INFO, field, message, value, row_number)

    def issues_at_least(self, severity: ValidationSeverity) -> List[ValidationIssue]:
        """Get issues at or above a severity level, in the order found.

        Args:
            severity: Minimum severity to include

        Returns:
            List of matching issues
        """
        return [issue for issue in self.issues if issue.severity >= severity]

    def summary(self) -> str:
        """Get a summary of the validation report.

        Returns:
            Summary string with counts of valid rows, errors and warnings
        """
        parts = [f"{self.valid_row_count} valid row(s)"]
        if self.error_count > 0:
            parts.append(f"{self.error_count} error(s)")
        if self.warning_count > 0:
            parts.append(f"{self.warning_count} warning(s)")
        if self.info_count > 0:
            parts.append(f"{self.info_count} info message(s)")
        return ", ".join(parts)

    def format(self) -> str:
        """Format the validation report for display.

        Returns:
            Formatted string with all issues grouped by severity
        """
        if not self.issues:
            return f"Validation successful - {self.summary()}"

        lines = [f"Validation Report - {self.summary()}", "=" * 60]
        for severity in (
            ValidationSeverity.ERROR,
            ValidationSeverity.WARNING,
            ValidationSeverity.INFO,
        ):
            grouped = [i for i in self.issues if i.severity == severity]
            if grouped:
                lines.append(f"\n{severity.name}S:")
                lines.extend(f"  - {issue}" for issue in grouped)

        return "\n".join(lines)
