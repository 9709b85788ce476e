"""Import records and validate import files."""

from pathlib import Path

import click

from billing_records.cli.error_handlers import DataValidationError, with_error_handling
from billing_records.cli.utils.formatters import (
    format_error,
    format_info,
    format_section,
    format_success,
    format_warning,
)
from billing_records.cli.utils.progress import create_progress_bar
from billing_records.cli.utils.services import build_import_service
from billing_records.config.settings import get_config
from billing_records.exceptions import ParseError
from billing_records.validators.validation_report import ValidationSeverity

# Issues listed per severity before the rest are counted
MAX_ISSUES_SHOWN = 20


def _read_csv(csv_file: str) -> str:
    return Path(csv_file).read_text(encoding="utf-8-sig")


@click.command(name="import-records")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def import_records(csv_file: str, debug: bool):
    """Import billing records from a CSV file.

    Each row is imported on its own: invalid rows are reported and skipped
    while the remaining rows are still imported. A file missing a required
    column is rejected before any record is created.

    Returns non-zero exit code if the import was aborted or any row failed.

    Example:
        billing-cli import-records billing.csv
    """
    with with_error_handling(debug):
        config = get_config()
        importer = build_import_service(config)

        click.echo(format_info(f"Importing billing records from {csv_file}..."))
        text = _read_csv(csv_file)
        try:
            row_count = importer.count_rows(text)
        except ParseError:
            # import_csv reports the parse error itself
            row_count = 0

        with create_progress_bar(row_count) as bar:
            result = importer.import_csv(
                text,
                source_name=Path(csv_file).name,
                progress=lambda _: bar.update(1),
            )

        click.echo()
        for message in result.success_messages:
            click.echo(format_success(message))
        for message in result.error_messages:
            click.echo(format_error(message))

        click.echo()
        click.echo(format_section("Import Summary"))
        click.echo(f"Records created:  {result.created_count}")
        click.echo(f"Errors:           {result.error_count}")
        click.echo("=" * 60)

        if result.aborted:
            raise DataValidationError(
                "Import aborted, no records were created",
                "Run 'billing-cli export-template' for the expected columns",
            )
        if result.has_errors:
            raise DataValidationError(
                f"{result.error_count} row(s) could not be imported"
            )

        click.echo()
        click.echo(format_success(f"Imported {result.created_count} record(s)"))


@click.command(name="validate-file")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--severity",
    type=click.Choice(["error", "warning", "info"], case_sensitive=False),
    default="warning",
    help="Minimum severity level to display (default: warning)",
)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def validate_file(csv_file: str, severity: str, debug: bool):
    """Check an import file without creating any records.

    Example:
        billing-cli validate-file billing.csv
        billing-cli validate-file billing.csv --severity error
    """
    with with_error_handling(debug):
        config = get_config()
        importer = build_import_service(config)

        click.echo(format_info(f"Validating {csv_file}..."))
        report = importer.validate_csv(_read_csv(csv_file))

        click.echo()
        click.echo(format_section("Validation Summary"))
        click.echo(f"Valid rows:       {report.valid_row_count}")
        click.echo(f"Errors:           {report.error_count}")
        click.echo(f"Warnings:         {report.warning_count}")
        click.echo()

        shown = report.issues_at_least(ValidationSeverity[severity.upper()])
        styles = {
            ValidationSeverity.ERROR: format_error,
            ValidationSeverity.WARNING: format_warning,
            ValidationSeverity.INFO: format_info,
        }
        for sev in (
            ValidationSeverity.ERROR,
            ValidationSeverity.WARNING,
            ValidationSeverity.INFO,
        ):
            issues = [i for i in shown if i.severity == sev]
            if not issues:
                continue
            click.echo(f"{sev.name}S ({len(issues)}):")
            for issue in issues[:MAX_ISSUES_SHOWN]:
                prefix = f"Row {issue.row_number}: " if issue.row_number else ""
                click.echo(styles[sev](f"  {prefix}{issue.message}"))
            if len(issues) > MAX_ISSUES_SHOWN:
                click.echo(f"  ... and {len(issues) - MAX_ISSUES_SHOWN} more")
            click.echo()

        if not report.is_valid():
            raise DataValidationError(
                f"Validation failed with {report.error_count} error(s)"
            )

        if report.warning_count:
            click.echo(
                format_warning(
                    f"Validation completed with {report.warning_count} warning(s)"
                )
            )
        else:
            click.echo(format_success("Validation passed! No issues found."))
