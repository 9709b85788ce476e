"""Plain-text notification about a billing record, addressed to its employee."""

from decimal import Decimal
from typing import List

from billing_records.models.billing_record import BillingRecord
from billing_records.repositories.reference_data import ReferenceData


def format_currency(amount: Decimal) -> str:
    """Format an amount as dollars, e.g. ``$1,234.50``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def build_billing_notification(
    record: BillingRecord, reference_data: ReferenceData
) -> str:
    """Build the message telling an employee about one of their records.

    Args:
        record: Billing record to describe
        reference_data: Used to resolve the employee and project names

    Returns:
        Message text with ``*Label:*`` lines for the record's fields
    """
    employee_name = reference_data.user_display_name(record.user_id)
    project = reference_data.get_project(record.project_id)
    project_name = record.project_name or (project.name if project else "N/A")

    if record.billing_period_start_date:
        end = record.billing_period_end_date or record.date
        period = f"{record.billing_period_start_date.isoformat()} to {end.isoformat()}"
    else:
        period = record.date.isoformat()

    lines: List[str] = [
        f"Hello {employee_name.split(' ')[0]},",
        "",
        "Here is an update on one of your billing records:",
        "",
        f"*Date/Period:* {period}",
        f"*Project:* {project_name}",
        f"*Client:* {record.client_name}",
        f"*Amount:* {format_currency(record.calculated_amount)}",
        f"*Status:* {record.status.value.capitalize()}",
    ]

    if record.is_count_based:
        lines.append("*Type:* Count-Based")
        if record.achieved_count_total is not None:
            label = record.count_metric_label_used or ""
            lines.append(f"*Total Achieved:* {record.achieved_count_total} {label}".rstrip())
    else:
        lines.append("*Type:* Hourly")
        lines.append(f"*Hours Billed:* {record.hours_billed:.2f}")
        lines.append(f"*Rate:* {format_currency(record.rate_applied)}/hr")

    if record.attendance_summary:
        summary = record.attendance_summary
        lines.extend(
            [
                "",
                "*Attendance Summary for Period:*",
                f"- Days Present: {summary.days_present}",
                f"- Days on Leave (Approved): {summary.days_on_leave}",
            ]
        )

    if record.notes:
        lines.extend(["", "*Notes from Admin:*", record.notes])

    if record.details:
        lines.extend(
            [
                "",
                "A detailed project breakdown is available in the "
                '"My Billing" section on your dashboard.',
            ]
        )

    lines.extend(["", 'You can view full details in the "My Billing" section.'])
    return "\n".join(lines)
