"""List records and summarize billing totals."""

from typing import Optional

import click

from billing_records.calculators.billing_summary import summarize_records
from billing_records.cli.error_handlers import with_error_handling
from billing_records.cli.utils.formatters import (
    format_amount,
    format_info,
    format_section,
    format_success,
    format_table,
)
from billing_records.cli.utils.services import (
    build_filters,
    build_services,
    record_filter_options,
)
from billing_records.config.settings import get_config


@click.command(name="list-records")
@record_filter_options
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def list_records(
    search: Optional[str],
    employee: Optional[str],
    project: Optional[str],
    status: Optional[str],
    start_date,
    end_date,
    debug: bool,
):
    """List billing records, newest first.

    Displays a table with:
    - Record id and date
    - Employee, project and client
    - Amount, status and billing type

    Example:
        billing-cli list-records
        billing-cli list-records --search alpha --status pending
    """
    with with_error_handling(debug):
        config = get_config()
        service, reference_data = build_services(config)
        filters = build_filters(
            reference_data, employee, project, status, start_date, end_date
        )
        records = service.list_records(filters, search)

        if not records:
            click.echo(format_info("No billing records found."))
            return

        headers = ["ID", "Date", "Employee", "Project", "Client", "Amount", "Status", "Type"]
        rows = [
            [
                r.id,
                r.date.isoformat(),
                reference_data.user_display_name(r.user_id),
                r.project_name,
                r.client_name,
                format_amount(r.calculated_amount),
                r.status.value.capitalize(),
                "Count-Based" if r.is_count_based else "Hourly",
            ]
            for r in records
        ]

        click.echo(format_table(headers, rows, right_align=[5]))
        click.echo()
        click.echo(format_success(f"Found {len(records)} record(s)"))


@click.command(name="summary")
@record_filter_options
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def summary(
    search: Optional[str],
    employee: Optional[str],
    project: Optional[str],
    status: Optional[str],
    start_date,
    end_date,
    debug: bool,
):
    """Show billing totals by status and by project.

    Example:
        billing-cli summary
        billing-cli summary --start-date 2024-01-01 --end-date 2024-12-31
    """
    with with_error_handling(debug):
        config = get_config()
        service, reference_data = build_services(config)
        filters = build_filters(
            reference_data, employee, project, status, start_date, end_date
        )
        records = service.list_records(filters, search)

        if not records:
            click.echo(format_info("No billing records found."))
            return

        result = summarize_records(records)

        click.echo(format_section("By Status"))
        click.echo(result.by_status.to_string(float_format="{:,.2f}".format))
        click.echo()
        click.echo(format_section("By Project"))
        click.echo(
            result.by_project.to_string(index=False, float_format="{:,.2f}".format)
        )
        click.echo()
        click.echo(
            format_success(
                f"Total: {format_amount(result.total_amount)} "
                f"across {result.record_count} record(s)"
            )
        )
