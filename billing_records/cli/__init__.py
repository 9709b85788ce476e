"""Billing Records CLI.

This module provides a command-line interface for billing records.
It includes commands for importing and validating CSV files, exporting and
listing records, summarizing totals, and deleting records.
"""

import click

from billing_records import __version__
from billing_records.cli.commands.delete import delete_record, notify_record
from billing_records.cli.commands.export import export_records, export_template
from billing_records.cli.commands.import_records import import_records, validate_file
from billing_records.cli.commands.list import list_records, summary
from billing_records.cli.error_handlers import handle_cli_error
from billing_records.config.logging_config import LoggingConfig, configure_logging
from billing_records.config.settings import get_config


@click.group(
    help="Billing Records CLI - Import, export and manage employee billing records"
)
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx: click.Context):
    """Billing Records CLI main entry point."""
    if ctx.resilient_parsing:
        return
    try:
        configure_logging(LoggingConfig.from_settings(get_config()))
    except Exception as e:
        ctx.exit(handle_cli_error(e))


# Register commands
cli.add_command(import_records)
cli.add_command(validate_file)
cli.add_command(export_records)
cli.add_command(export_template)
cli.add_command(list_records)
cli.add_command(summary)
cli.add_command(delete_record)
cli.add_command(notify_record)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
