"""Output formatting utilities for CLI."""

from decimal import Decimal
from typing import List, Optional, Sequence

import click


def format_success(message: str) -> str:
    """Format a success message with green color."""
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message with red color."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message with yellow color."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message with blue color."""
    return click.style(f"ℹ {message}", fg="blue")


def format_amount(amount: Decimal) -> str:
    """Format an amount with two decimals and thousands separators."""
    return f"{amount:,.2f}"


def format_section(title: str, width: int = 60) -> str:
    """Format a section heading framed by rules of ``=``."""
    rule = "=" * width
    return f"{rule}\n{title}\n{rule}"


def format_table(
    headers: List[str],
    rows: List[List[str]],
    max_width: int = 40,
    right_align: Optional[Sequence[int]] = None,
) -> str:
    """Format data as a table.

    Cells longer than ``max_width`` are truncated.

    Args:
        headers: List of column headers
        rows: List of data rows (each row is a list of cell values)
        max_width: Maximum width for each column (default: 40)
        right_align: Indexes of columns to right-align, e.g. amounts

    Returns:
        Formatted table as a string, or "" if there are no headers
    """
    if not headers:
        return ""

    right = set(right_align or ())

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(str(cell)))
    widths = [min(w, max_width) for w in widths]

    def render(cells: Sequence) -> str:
        parts = []
        for i, width in enumerate(widths):
            text = str(cells[i])[:width] if i < len(cells) else ""
            align = ">" if i in right else "<"
            parts.append(f" {text:{align}{width}} ")
        return "|" + "|".join(parts) + "|"

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    lines = [separator, render(headers), separator]
    if rows:
        lines.extend(render(row) for row in rows)
        lines.append(separator)

    return "\n".join(lines)
