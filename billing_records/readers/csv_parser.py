"""CSV parser for billing import files.

This module turns raw CSV text into ordered row mappings keyed by header,
collecting structurally broken rows as diagnostics instead of failing.

Row numbering is 1-based over non-blank records: the header is row 1 and
every following non-blank record (kept or skipped) takes the next number.
Blank lines do not consume a number.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from billing_records.exceptions import ParseError

logger = logging.getLogger(__name__)

BOM = "\ufeff"


@dataclass
class SkippedRow:
    """A row that was dropped because of a structural defect.

    Attributes:
        row_number: 1-based row number (header is row 1)
        reason: Why the row was skipped
        row_content: Raw text of the row as found in the file
    """

    row_number: int
    reason: str
    row_content: str

    def preview(self, length: int = 50) -> str:
        """Return the first ``length`` characters of the raw row."""
        return self.row_content[:length]


@dataclass
class CSVRow:
    """A parsed data row.

    Attributes:
        row_number: 1-based row number (header is row 1)
        values: Mapping of header name (as found) to raw field value
    """

    row_number: int
    values: Dict[str, str]

    def get(self, header: str, default: str = "") -> str:
        """Look up a value by header name, ignoring case.

        Args:
            header: Header name in any casing
            default: Value returned when the header is absent

        Returns:
            The field value with surrounding whitespace removed
        """
        wanted = header.lower()
        for key, value in self.values.items():
            if key.lower() == wanted:
                return (value or "").strip()
        return default


@dataclass
class ParsedCSV:
    """Result of parsing CSV text.

    Attributes:
        headers: Header names in column order, casing preserved
        rows: Data rows in file order
        skipped_rows: Rows dropped for structural defects
    """

    headers: List[str]
    rows: List[CSVRow] = field(default_factory=list)
    skipped_rows: List[SkippedRow] = field(default_factory=list)

    @property
    def data(self) -> List[Dict[str, str]]:
        """Row mappings without row numbers."""
        return [row.values for row in self.rows]


def _check_duplicate_headers(headers: List[str]) -> None:
    seen = set()
    duplicates: List[str] = []
    for name in headers:
        key = name.lower()
        if key in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(key)
    if duplicates:
        # Headers are looked up case-insensitively downstream
        raise ParseError(f"Duplicate CSV headers: {', '.join(duplicates)}")


def parse_csv(text: str, delimiter: str = ",") -> ParsedCSV:
    """Parse CSV text with a mandatory header row.

    Fields may be wrapped in double quotes; a quoted field may contain the
    delimiter and line breaks, and ``""`` inside it is a literal quote.
    Rows whose field count differs from the header are skipped with reason
    "column count mismatch" and reported in ``skipped_rows``.

    Args:
        text: Raw CSV content
        delimiter: Single-character field delimiter (default: ",")

    Returns:
        ParsedCSV with headers, rows and skipped rows

    Raises:
        ParseError: If the content is empty or structurally unreadable, or
            the header row names a column twice (ignoring case)

    Example:
        >>> parsed = parse_csv('name,amount\\n"Doe, Jane",10\\n')
        >>> parsed.rows[0].values
        {'name': 'Doe, Jane', 'amount': '10'}
    """
    if text is None or not text.strip(BOM).strip():
        raise ParseError("CSV content is empty")

    if text.startswith(BOM):
        text = text[len(BOM):]

    raw_lines: List[str] = []

    def _line_source() -> Iterator[str]:
        # newline="" keeps CR/LF so raw row text can be rebuilt
        for line in io.StringIO(text, newline=""):
            raw_lines.append(line)
            yield line

    reader = csv.reader(
        _line_source(), delimiter=delimiter, quotechar='"', strict=True
    )

    headers: List[str] = []
    parsed = ParsedCSV(headers=headers)
    row_number = 0
    consumed = 0

    try:
        for fields in reader:
            raw = "".join(raw_lines[consumed : reader.line_num]).rstrip("\r\n")
            consumed = reader.line_num

            if not raw.strip():
                continue

            row_number += 1

            if row_number == 1:
                headers.extend(name.strip() for name in fields)
                _check_duplicate_headers(headers)
                logger.debug(f"CSV header row: {headers}")
                continue

            if len(fields) != len(headers):
                parsed.skipped_rows.append(
                    SkippedRow(
                        row_number=row_number,
                        reason=(
                            f"column count mismatch (expected {len(headers)}, "
                            f"got {len(fields)})"
                        ),
                        row_content=raw,
                    )
                )
                continue

            parsed.rows.append(
                CSVRow(row_number=row_number, values=dict(zip(headers, fields)))
            )
    except csv.Error as e:
        raise ParseError(f"Malformed CSV near row {row_number + 1}: {e}") from e

    if not headers:
        raise ParseError("CSV header row is missing")

    logger.info(
        f"Parsed {len(parsed.rows)} CSV row(s), "
        f"skipped {len(parsed.skipped_rows)}"
    )
    return parsed
