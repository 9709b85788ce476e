"""CSV serialization of flat row dictionaries.

Rows are assumed to share the key order of the first row, which defines
the header. A field is quoted only when it contains the delimiter, a quote
or a line break; embedded quotes are doubled. In single-column output
blank values are quoted as well.
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from billing_records.exceptions import ExportError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def format_field(value: Any, delimiter: str = ",", quote_blank: bool = False) -> str:
    """Render one value as a CSV field.

    Args:
        value: Field value; None becomes an empty field
        delimiter: Field delimiter
        quote_blank: Quote empty and whitespace-only values, so a
            single-column line is not read back as a blank line

    Returns:
        The field text, quoted if needed
    """
    if value is None:
        text = ""
    elif isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, Decimal):
        text = format(value, "f")
    else:
        text = str(value)

    if any(ch in text for ch in (delimiter, '"', "\n", "\r")) or (
        quote_blank and not text.strip()
    ):
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv_text(rows: Sequence[Row], delimiter: str = ",") -> str:
    """Serialize rows to CSV text.

    Args:
        rows: Flat dictionaries with the same keys as the first row
        delimiter: Field delimiter (default: ",")

    Returns:
        CSV text with rows joined by newlines, or "" for no rows

    Example:
        >>> to_csv_text([{"Client": "Doe, Jane", "Amount": 10}])
        'Client,Amount\\n"Doe, Jane",10'
    """
    if not rows:
        return ""

    headers: List[str] = list(rows[0].keys())
    single_column = len(headers) == 1
    lines = [
        delimiter.join(format_field(h, delimiter, single_column) for h in headers)
    ]
    for row in rows:
        lines.append(
            delimiter.join(
                format_field(row.get(h), delimiter, single_column) for h in headers
            )
        )
    return "\n".join(lines)


def export_to_csv(
    rows: Sequence[Row],
    filename: Union[str, Path],
    delimiter: str = ",",
) -> Path:
    """Write rows to a CSV file.

    Parent directories are created if they do not exist.

    Args:
        rows: Flat dictionaries to export
        filename: Destination path
        delimiter: Field delimiter (default: ",")

    Returns:
        Path of the written file

    Raises:
        ExportError: If there is nothing to export or the file cannot be written
    """
    if not rows:
        raise ExportError("No data to export.")

    path = Path(filename)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(to_csv_text(rows, delimiter), encoding="utf-8")
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e

    logger.info(f"Exported {len(rows)} row(s) to {path}")
    return path
