"""Data models for the billing records package.

This package contains Pydantic models for all business entities:
- BaseDataModel: Base class with common configuration
- Project, User: Reference data looked up during import
- HourlyBillingRecord, CountBasedBillingRecord: Stored billing records
- NewHourlyBillingRecord, NewCountBasedBillingRecord: Creation payloads
- BillingRecordUpdate: Partial update payload
"""

from billing_records.models.base import BaseDataModel, to_decimal
from billing_records.models.billing_record import (
    AttendanceSummary,
    BillingRecord,
    BillingRecordUpdate,
    BillingStatus,
    CountBasedBillingRecord,
    HourlyBillingRecord,
    NewBillingRecord,
    NewCountBasedBillingRecord,
    NewHourlyBillingRecord,
    ProjectBillingDetail,
    generate_record_id,
    record_from_dict,
)
from billing_records.models.project import Project, ProjectBillingType, User

__all__ = [
    "AttendanceSummary",
    "BaseDataModel",
    "BillingRecord",
    "BillingRecordUpdate",
    "BillingStatus",
    "CountBasedBillingRecord",
    "HourlyBillingRecord",
    "NewBillingRecord",
    "NewCountBasedBillingRecord",
    "NewHourlyBillingRecord",
    "Project",
    "ProjectBillingDetail",
    "ProjectBillingType",
    "User",
    "generate_record_id",
    "record_from_dict",
    "to_decimal",
]
