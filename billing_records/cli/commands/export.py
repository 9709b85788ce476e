"""Export records and the import template."""

from pathlib import Path
from typing import Optional

import click

from billing_records.cli.error_handlers import with_error_handling
from billing_records.cli.utils.formatters import format_info, format_success
from billing_records.cli.utils.progress import ProgressTracker
from billing_records.cli.utils.services import (
    build_filters,
    build_services,
    record_filter_options,
)
from billing_records.config.settings import get_config
from billing_records.writers.billing_export import (
    build_export_rows,
    default_export_filename,
    import_template_rows,
)
from billing_records.writers.csv_exporter import export_to_csv

TEMPLATE_FILENAME = "billing_import_template.csv"


@click.command(name="export-records")
@click.argument("output", type=click.Path(dir_okay=False), required=False)
@record_filter_options
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def export_records(
    output: Optional[str],
    search: Optional[str],
    employee: Optional[str],
    project: Optional[str],
    status: Optional[str],
    start_date,
    end_date,
    debug: bool,
):
    """Export billing records to a CSV file.

    OUTPUT defaults to billing_records_<today>.csv in EXPORT_DIR. Filters
    narrow the export the same way they narrow list-records.

    Example:
        billing-cli export-records
        billing-cli export-records out.csv --status overdue
        billing-cli export-records --start-date 2024-01-01 --end-date 2024-03-31
    """
    with with_error_handling(debug):
        config = get_config()
        tracker = ProgressTracker(["Loading records", "Writing CSV"])

        click.echo(format_info(tracker.get_current_message()))
        service, reference_data = build_services(config)
        filters = build_filters(
            reference_data, employee, project, status, start_date, end_date
        )
        records = service.list_records(filters, search)
        tracker.advance(f"Found {len(records)} record(s)")

        click.echo(format_info(tracker.get_current_message()))
        target = Path(output) if output else config.export_dir / default_export_filename()
        path = export_to_csv(
            build_export_rows(records, reference_data),
            target,
            delimiter=config.csv_delimiter,
        )
        tracker.advance()

        click.echo(format_success(f"Exported {len(records)} record(s) to {path}"))


@click.command(name="export-template")
@click.argument("output", type=click.Path(dir_okay=False), required=False)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def export_template(output: Optional[str], debug: bool):
    """Write an import template with one hourly and one count-based example.

    Example:
        billing-cli export-template
        billing-cli export-template template.csv
    """
    with with_error_handling(debug):
        config = get_config()
        target = Path(output) if output else config.export_dir / TEMPLATE_FILENAME
        path = export_to_csv(
            import_template_rows(), target, delimiter=config.csv_delimiter
        )
        click.echo(format_success(f"Import template written to {path}"))
