"""Billing record repositories.

This module defines the storage interface the billing services depend on,
an in-memory implementation, and a JSON-file implementation that survives
between command-line invocations.
"""

import datetime as dt
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from billing_records.exceptions import PersistenceError, RecordNotFoundError
from billing_records.models.billing_record import (
    BillingRecord,
    BillingStatus,
    record_from_dict,
)

logger = logging.getLogger(__name__)


@dataclass
class BillingFilters:
    """Criteria for listing records. Unset criteria match everything.

    Attributes:
        user_id: Only records of this employee
        status: Only records with this status
        project_id: Only records of this project
        start_date: Only records dated on or after this date
        end_date: Only records dated on or before this date
    """

    user_id: Optional[str] = None
    status: Optional[BillingStatus] = None
    project_id: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    def matches(self, record: BillingRecord) -> bool:
        if self.user_id and record.user_id != self.user_id:
            return False
        if self.status and record.status != self.status:
            return False
        if self.project_id and record.project_id != self.project_id:
            return False
        if self.start_date and record.date < self.start_date:
            return False
        if self.end_date and record.date > self.end_date:
            return False
        return True


class BillingRepository(ABC):
    """Storage interface for billing records."""

    @abstractmethod
    def add(self, record: BillingRecord) -> BillingRecord:
        """Store a new record.

        Raises:
            PersistenceError: If a record with the same id exists
        """

    @abstractmethod
    def get(self, record_id: str) -> BillingRecord:
        """Fetch a record by id.

        Raises:
            RecordNotFoundError: If the id is unknown
        """

    @abstractmethod
    def update(self, record: BillingRecord) -> BillingRecord:
        """Replace the stored record that has the same id.

        Raises:
            RecordNotFoundError: If the id is unknown
        """

    @abstractmethod
    def delete(self, record_id: str) -> None:
        """Remove a record by id.

        Raises:
            RecordNotFoundError: If the id is unknown
        """

    @abstractmethod
    def list(self, filters: Optional[BillingFilters] = None) -> List[BillingRecord]:
        """List records matching the filters, in insertion order."""


class InMemoryBillingRepository(BillingRepository):
    """Repository holding records in a dictionary.

    Not safe for concurrent use.

    Example:
        >>> repo = InMemoryBillingRepository()
        >>> repo.add(record)
        >>> repo.get(record.id) == record
        True
    """

    def __init__(self) -> None:
        self._records: Dict[str, BillingRecord] = {}

    def add(self, record: BillingRecord) -> BillingRecord:
        if record.id in self._records:
            raise PersistenceError(f"Billing record already exists: {record.id}")
        self._records[record.id] = record
        logger.debug(f"Added record {record.id} ({len(self._records)} total)")
        return record

    def get(self, record_id: str) -> BillingRecord:
        try:
            return self._records[record_id]
        except KeyError:
            raise RecordNotFoundError(record_id)

    def update(self, record: BillingRecord) -> BillingRecord:
        if record.id not in self._records:
            raise RecordNotFoundError(record.id)
        self._records[record.id] = record
        logger.debug(f"Updated record {record.id}")
        return record

    def delete(self, record_id: str) -> None:
        if record_id not in self._records:
            logger.warning(f"Record to delete not found: {record_id}")
            raise RecordNotFoundError(record_id)
        del self._records[record_id]
        logger.debug(f"Deleted record {record_id} ({len(self._records)} total)")

    def list(self, filters: Optional[BillingFilters] = None) -> List[BillingRecord]:
        records = list(self._records.values())
        if filters is not None:
            records = [r for r in records if filters.matches(r)]
        logger.debug(f"Listed {len(records)} of {len(self._records)} record(s)")
        return records


class JsonFileBillingRepository(InMemoryBillingRepository):
    """In-memory repository persisted to a JSON file after every change.

    Attributes:
        path: Location of the JSON file
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        self._load()

    def add(self, record: BillingRecord) -> BillingRecord:
        previous = dict(self._records)
        result = super().add(record)
        self._save_or_restore(previous)
        return result

    def update(self, record: BillingRecord) -> BillingRecord:
        previous = dict(self._records)
        result = super().update(record)
        self._save_or_restore(previous)
        return result

    def delete(self, record_id: str) -> None:
        previous = dict(self._records)
        super().delete(record_id)
        self._save_or_restore(previous)

    def _save_or_restore(self, previous: Dict[str, BillingRecord]) -> None:
        """Write the file, or roll memory back to ``previous`` if it fails."""
        try:
            self._save()
        except PersistenceError:
            self._records = previous
            logger.warning(f"Write to {self.path} failed, change discarded")
            raise

    def _load(self) -> None:
        if not self.path.exists():
            logger.info(f"No billing data file at {self.path}, starting empty")
            return

        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            for item in payload.get("records", []):
                record = record_from_dict(item)
                self._records[record.id] = record
        except (json.JSONDecodeError, ValidationError) as e:
            raise PersistenceError(
                f"Billing data file {self.path} is corrupt: {e}"
            ) from e

        logger.info(f"Loaded {len(self._records)} record(s) from {self.path}")

    def _save(self) -> None:
        payload = {
            "records": [r.model_dump(mode="json") for r in self._records.values()]
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Failed to write {self.path}: {e}") from e
