"""Writers that serialize billing data to CSV."""

from billing_records.writers.billing_export import (
    EXPORT_COLUMNS,
    build_export_rows,
    default_export_filename,
    import_template_rows,
    record_to_export_row,
)
from billing_records.writers.csv_exporter import export_to_csv, format_field, to_csv_text

__all__ = [
    "EXPORT_COLUMNS",
    "build_export_rows",
    "default_export_filename",
    "export_to_csv",
    "format_field",
    "import_template_rows",
    "record_to_export_row",
    "to_csv_text",
]
