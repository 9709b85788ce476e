"""Billing service coordinating the calculator and the record store.

All writes go through this service so that amounts are computed by the
billing calculator before anything reaches the repository.
"""

import logging
from typing import List, Optional

from billing_records.calculators.billing_calculator import apply_update, build_record
from billing_records.models.billing_record import (
    BillingRecord,
    BillingRecordUpdate,
    NewBillingRecord,
    generate_record_id,
)
from billing_records.repositories.billing_repository import (
    BillingFilters,
    BillingRepository,
)
from billing_records.repositories.reference_data import ReferenceData
from billing_records.utils.logging_utils import log_function_call

logger = logging.getLogger(__name__)


class BillingService:
    """Creates, updates, deletes and lists billing records.

    Attributes:
        repository: Record store
        reference_data: Known users and projects

    Example:
        >>> service = BillingService(InMemoryBillingRepository(), ReferenceData.default())
        >>> record = service.create_record(payload)
        >>> service.get_record(record.id) == record
        True
    """

    def __init__(self, repository: BillingRepository, reference_data: ReferenceData):
        self.repository = repository
        self.reference_data = reference_data

    @log_function_call
    def create_record(self, payload: NewBillingRecord) -> BillingRecord:
        """Create and store a record from a validated payload.

        Args:
            payload: Hourly or count-based creation payload

        Returns:
            The stored record with id, project name and amount set

        Raises:
            BillingValidationError: If hours or rate are not positive
            PersistenceError: If the store rejects the record
        """
        project = self.reference_data.get_project(payload.project_id)
        record = build_record(payload, generate_record_id(), project)
        stored = self.repository.add(record)
        logger.info(
            f"Created {'count-based' if stored.is_count_based else 'hourly'} "
            f"record {stored.id} for {stored.user_id} ({stored.calculated_amount})"
        )
        return stored

    def get_record(self, record_id: str) -> BillingRecord:
        return self.repository.get(record_id)

    @log_function_call
    def update_record(self, record_id: str, update: BillingRecordUpdate) -> BillingRecord:
        """Apply a partial update to a stored record.

        The default rate comes from the project the record belongs to after
        the update.

        Args:
            record_id: Id of the record to update
            update: Fields to change

        Returns:
            The updated record

        Raises:
            RecordNotFoundError: If the id is unknown
            BillingValidationError: If the update is not allowed
        """
        current = self.repository.get(record_id)
        project_id = update.changes().get("project_id", current.project_id)
        project = self.reference_data.get_project(project_id)

        updated = apply_update(current, update, project)
        self.repository.update(updated)
        logger.info(f"Updated record {record_id}")
        return updated

    @log_function_call(include_args=True, level="INFO")
    def delete_record(self, record_id: str) -> None:
        """Delete a record.

        Raises:
            RecordNotFoundError: If the id is unknown
        """
        self.repository.delete(record_id)

    def list_records(
        self,
        filters: Optional[BillingFilters] = None,
        search: Optional[str] = None,
    ) -> List[BillingRecord]:
        """List records, newest first.

        Args:
            filters: Store-level criteria
            search: Case-insensitive text matched against the employee's
                full name, the project name and the client name

        Returns:
            Matching records sorted by date, descending
        """
        records = self.repository.list(filters)

        if search:
            term = search.strip().lower()
            records = [
                r for r in records
                if any(term in text.lower() for text in self._search_fields(r))
            ]

        return sorted(records, key=lambda r: r.date, reverse=True)

    def _search_fields(self, record: BillingRecord) -> List[str]:
        user = self.reference_data.get_user(record.user_id)
        employee = user.full_name if user else ""
        return [employee, record.project_name, record.client_name]
