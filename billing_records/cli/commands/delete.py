"""Delete a record and show record notifications."""

import click

from billing_records.cli.error_handlers import with_error_handling
from billing_records.cli.utils.formatters import format_info, format_success
from billing_records.cli.utils.services import build_services
from billing_records.config.settings import get_config
from billing_records.services.notification import build_billing_notification


@click.command(name="delete-record")
@click.argument("record_id", type=str)
@click.option("--yes", "-y", is_flag=True, help="Delete without asking for confirmation")
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def delete_record(record_id: str, yes: bool, debug: bool):
    """Delete a billing record by id.

    Example:
        billing-cli delete-record br1700000000000-a1b2c3d4e5f6 --yes
    """
    with with_error_handling(debug):
        config = get_config()
        service, _ = build_services(config)

        record = service.get_record(record_id)
        if not yes:
            click.confirm(
                f"Delete record {record.id} ({record.client_name}, "
                f"{record.date.isoformat()})?",
                abort=True,
            )

        service.delete_record(record_id)
        click.echo(format_success(f"Deleted record {record_id}"))


@click.command(name="notify-record")
@click.argument("record_id", type=str)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def notify_record(record_id: str, debug: bool):
    """Print the notification message for a record's employee.

    Example:
        billing-cli notify-record br1700000000000-a1b2c3d4e5f6
    """
    with with_error_handling(debug):
        config = get_config()
        service, reference_data = build_services(config)
        record = service.get_record(record_id)

        name = reference_data.user_display_name(record.user_id)
        click.echo(format_info(f"Message for {name}:"))
        click.echo()
        click.echo(build_billing_notification(record, reference_data))
