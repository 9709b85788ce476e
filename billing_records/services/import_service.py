"""CSV import of billing records.

An import parses the file, checks the header set, then maps and creates
each row independently. Problems with one row never stop the others; a
parse failure or a missing required header aborts the whole import before
any record is created.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Union

from billing_records.exceptions import (
    BillingValidationError,
    MissingHeaderError,
    ParseError,
    PersistenceError,
    RowValidationError,
)
from billing_records.models.billing_record import BillingRecord
from billing_records.readers.csv_parser import ParsedCSV, parse_csv
from billing_records.repositories.reference_data import ReferenceData
from billing_records.services.billing_service import BillingService
from billing_records.utils.logging_utils import (
    LogContext,
    generate_correlation_id,
    log_function_call,
)
from billing_records.validators.import_validator import BillingImportValidator
from billing_records.validators.validation_report import ValidationReport

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


@dataclass
class ImportResult:
    """Outcome of one CSV import.

    Attributes:
        success_messages: One message per created record
        error_messages: Skip, validation and storage messages, in row order
            within each kind
        created_records: Records created by the import
        aborted: True if the import stopped before processing rows
    """

    success_messages: List[str] = field(default_factory=list)
    error_messages: List[str] = field(default_factory=list)
    created_records: List[BillingRecord] = field(default_factory=list)
    aborted: bool = False

    @property
    def created_count(self) -> int:
        return len(self.created_records)

    @property
    def error_count(self) -> int:
        return len(self.error_messages)

    @property
    def has_errors(self) -> bool:
        return bool(self.error_messages)


class BillingImportService:
    """Imports billing records from CSV text or files.

    Attributes:
        billing_service: Service used to create records
        validator: Row validator built from the reference data
        delimiter: CSV field delimiter
        preview_length: Characters of a skipped row shown in its message

    Example:
        >>> importer = BillingImportService(service, reference_data)
        >>> result = importer.import_csv(text)
        >>> result.success_messages[0]
        'Row 2: Record for employee1 / Website Redesign imported.'
    """

    def __init__(
        self,
        billing_service: BillingService,
        reference_data: ReferenceData,
        delimiter: str = ",",
        preview_length: int = 50,
    ):
        self.billing_service = billing_service
        self.validator = BillingImportValidator(reference_data)
        self.delimiter = delimiter
        self.preview_length = preview_length

    @log_function_call
    def import_csv(
        self,
        text: str,
        source_name: Optional[str] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        """Import records from CSV text.

        Skipped-row messages come first, followed by the per-row outcomes
        in file order.

        Args:
            text: Raw CSV content
            source_name: Name of the source, used in log context only
            progress: Called with the number of rows processed so far

        Returns:
            ImportResult with messages and created records
        """
        result = ImportResult()

        with LogContext(import_id=generate_correlation_id(), source=source_name or "<text>"):
            try:
                parsed = parse_csv(text, self.delimiter)
            except ParseError as e:
                logger.error(f"Import aborted: {e}")
                result.error_messages.append(str(e))
                result.aborted = True
                return result

            for skipped in parsed.skipped_rows:
                result.error_messages.append(
                    f"Row {skipped.row_number}: Skipped - {skipped.reason} "
                    f'(Content: "{skipped.preview(self.preview_length)}...")'
                )

            try:
                self.validator.check_headers(parsed.headers)
            except MissingHeaderError as e:
                logger.error(f"Import aborted: {e}")
                result.error_messages = [str(e)]
                result.aborted = True
                return result

            self._import_rows(parsed, result, progress)

        logger.info(
            f"Import finished: {result.created_count} created, "
            f"{result.error_count} error(s)"
        )
        return result

    def import_file(
        self,
        path: Union[str, Path],
        progress: Optional[ProgressCallback] = None,
    ) -> ImportResult:
        """Import records from a CSV file.

        Args:
            path: Path to a UTF-8 CSV file (a byte order mark is allowed)
            progress: Called with the number of rows processed so far

        Returns:
            ImportResult with messages and created records

        Raises:
            OSError: If the file cannot be read
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8-sig")
        return self.import_csv(text, source_name=path.name, progress=progress)

    def count_rows(self, text: str) -> int:
        """Count the data rows an import of ``text`` will process.

        Quoted fields spanning several lines count once.

        Raises:
            ParseError: If the content cannot be parsed
        """
        return len(parse_csv(text, self.delimiter).rows)

    def validate_csv(self, text: str) -> ValidationReport:
        """Check CSV text without creating records.

        Raises:
            ParseError: If the content cannot be parsed
        """
        parsed = parse_csv(text, self.delimiter)
        return self.validator.validate(parsed)

    def _import_rows(
        self,
        parsed: ParsedCSV,
        result: ImportResult,
        progress: Optional[ProgressCallback],
    ) -> None:
        for processed, row in enumerate(parsed.rows, start=1):
            with LogContext(row=row.row_number):
                try:
                    mapped = self.validator.map_row(row)
                except RowValidationError as e:
                    logger.warning(str(e))
                    result.error_messages.append(str(e))
                else:
                    try:
                        record = self.billing_service.create_record(mapped.payload)
                    except (PersistenceError, BillingValidationError) as e:
                        logger.warning(f"Row {row.row_number}: create failed: {e}")
                        result.error_messages.append(
                            f"Row {row.row_number}: API Error - {e}"
                        )
                    else:
                        result.created_records.append(record)
                        result.success_messages.append(
                            f"Row {row.row_number}: Record for "
                            f"{mapped.user.username} / {mapped.project.name} imported."
                        )

            if progress is not None:
                progress(processed)
