"""CLI commands."""

from billing_records.cli.commands.delete import delete_record, notify_record
from billing_records.cli.commands.export import export_records, export_template
from billing_records.cli.commands.import_records import import_records, validate_file
from billing_records.cli.commands.list import list_records, summary

__all__ = [
    "delete_record",
    "export_records",
    "export_template",
    "import_records",
    "list_records",
    "notify_record",
    "summary",
    "validate_file",
]
