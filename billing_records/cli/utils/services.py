"""Construction of the services commands run against."""

import datetime as dt
import logging
from typing import Optional, Tuple

import click

from billing_records.cli.error_handlers import ConfigurationError, DataValidationError
from billing_records.config.settings import BillingRecordsConfig
from billing_records.models.billing_record import BillingStatus
from billing_records.repositories.billing_repository import (
    BillingFilters,
    JsonFileBillingRepository,
)
from billing_records.repositories.reference_data import ReferenceData
from billing_records.services.billing_service import BillingService
from billing_records.services.import_service import BillingImportService

logger = logging.getLogger(__name__)


def load_reference_data(config: BillingRecordsConfig) -> ReferenceData:
    """Load users and projects from ``REFERENCE_DATA_FILE``, or the defaults.

    Raises:
        ConfigurationError: If the configured file is missing or invalid
    """
    path = config.reference_data_file
    if path is None:
        logger.debug("No reference data file configured, using sample projects")
        return ReferenceData.default()

    if not path.exists():
        raise ConfigurationError(
            f"Reference data file not found: {path}",
            "Set REFERENCE_DATA_FILE to an existing JSON file",
        )
    try:
        return ReferenceData.from_file(path)
    except ValueError as e:
        raise ConfigurationError(str(e))


def build_services(
    config: BillingRecordsConfig,
) -> Tuple[BillingService, ReferenceData]:
    """Build the billing service on the JSON data file from the config."""
    reference_data = load_reference_data(config)
    repository = JsonFileBillingRepository(config.billing_data_file)
    return BillingService(repository, reference_data), reference_data


def build_import_service(config: BillingRecordsConfig) -> BillingImportService:
    service, reference_data = build_services(config)
    return BillingImportService(
        service,
        reference_data,
        delimiter=config.csv_delimiter,
        preview_length=config.skipped_row_preview_length,
    )


def record_filter_options(command):
    """Add the shared record filter options to a command."""
    options = [
        click.option(
            "--search",
            type=str,
            default=None,
            help="Match employee name, project name or client name",
        ),
        click.option(
            "--employee",
            type=str,
            default=None,
            help="Only records of this employee (id, username or full name)",
        ),
        click.option(
            "--project",
            type=str,
            default=None,
            help="Only records of this project (id or name)",
        ),
        click.option(
            "--status",
            type=click.Choice(BillingStatus.values(), case_sensitive=False),
            default=None,
            help="Only records with this status",
        ),
        click.option(
            "--start-date",
            type=click.DateTime(formats=["%Y-%m-%d"]),
            default=None,
            help="Only records dated on or after this date (YYYY-MM-DD)",
        ),
        click.option(
            "--end-date",
            type=click.DateTime(formats=["%Y-%m-%d"]),
            default=None,
            help="Only records dated on or before this date (YYYY-MM-DD)",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def build_filters(
    reference_data: ReferenceData,
    employee: Optional[str] = None,
    project: Optional[str] = None,
    status: Optional[str] = None,
    start_date: Optional[dt.datetime] = None,
    end_date: Optional[dt.datetime] = None,
) -> BillingFilters:
    """Turn command options into repository filters.

    Raises:
        DataValidationError: If the employee or project cannot be resolved,
            or the date range is reversed
    """
    user_id = None
    if employee:
        user = reference_data.find_user(employee)
        if user is None:
            raise DataValidationError(f'Employee "{employee}" not found.')
        user_id = user.id

    project_id = None
    if project:
        found = reference_data.find_project(project)
        if found is None:
            raise DataValidationError(f'Project "{project}" not found.')
        project_id = found.id

    start = start_date.date() if start_date else None
    end = end_date.date() if end_date else None
    if start and end and end < start:
        raise DataValidationError(
            f"--end-date ({end}) is before --start-date ({start})"
        )

    return BillingFilters(
        user_id=user_id,
        status=BillingStatus(status.lower()) if status else None,
        project_id=project_id,
        start_date=start,
        end_date=end,
    )
