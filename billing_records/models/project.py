"""Project and user reference models.

Projects carry the billing configuration a record is created against;
users are the employees a record is billed for. Both are reference data:
they are looked up, never modified, by the billing workflow.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from billing_records.models.base import BaseDataModel, to_decimal


class ProjectBillingType(str, Enum):
    """How a project's work is billed."""

    HOURLY = "hourly"
    COUNT_BASED = "count_based"


class Project(BaseDataModel):
    """Represents a billable project.

    Hourly projects define ``rate_per_hour``. Count-based projects define the
    metric label together with the divisor and multiplier used to turn an
    achieved count into an amount. The two groups are mutually exclusive.

    Attributes:
        id: Unique project identifier (e.g., "proj1")
        name: Project name
        billing_type: Hourly or count-based billing
        rate_per_hour: Default hourly rate (hourly projects only)
        count_metric_label: Name of the counted quantity (count-based only)
        count_divisor: Count units per billing unit (count-based only)
        count_multiplier: Amount per billing unit (count-based only)

    Example:
        >>> project = Project(
        ...     id="proj1",
        ...     name="Website Redesign",
        ...     billing_type="hourly",
        ...     rate_per_hour=75,
        ... )
        >>> project.rate_per_hour
        Decimal('75')
    """

    id: str = Field(..., min_length=1, description="Unique project identifier")
    name: str = Field(..., min_length=1, description="Project name")
    billing_type: ProjectBillingType = Field(..., description="Billing type")
    rate_per_hour: Optional[Decimal] = Field(None, gt=0)
    count_metric_label: Optional[str] = Field(None)
    count_divisor: Optional[Decimal] = Field(None, gt=0)
    count_multiplier: Optional[Decimal] = Field(None, ge=0)

    @field_validator("id", "name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Validate that string fields are not empty or whitespace only."""
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @field_validator(
        "rate_per_hour", "count_divisor", "count_multiplier", mode="before"
    )
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)

    @model_validator(mode="after")
    def validate_billing_configuration(self) -> "Project":
        """Ensure exactly the field group matching the billing type is set.

        Returns:
            The validated model instance

        Raises:
            ValueError: If the configuration does not match the billing type
        """
        count_fields = (
            self.count_metric_label,
            self.count_divisor,
            self.count_multiplier,
        )
        if self.billing_type == ProjectBillingType.HOURLY:
            if self.rate_per_hour is None:
                raise ValueError("Hourly projects require rate_per_hour")
            if any(f is not None for f in count_fields):
                raise ValueError("Hourly projects cannot define count settings")
        else:
            if self.rate_per_hour is not None:
                raise ValueError("Count-based projects cannot define rate_per_hour")
            if any(f is None for f in count_fields):
                raise ValueError(
                    "Count-based projects require count_metric_label, "
                    "count_divisor and count_multiplier"
                )
        return self

    @property
    def is_hourly(self) -> bool:
        return self.billing_type == ProjectBillingType.HOURLY

    def matches(self, identifier: str) -> bool:
        """Check whether an identifier refers to this project.

        Matches the exact id or the name, case-insensitively.

        Args:
            identifier: Project id or name as written by a human

        Returns:
            True if the identifier refers to this project
        """
        return self.id == identifier or self.name.lower() == identifier.lower()


class User(BaseDataModel):
    """Represents an employee that billing records belong to.

    Attributes:
        id: Unique user identifier
        username: Login name
        first_name: Given name
        last_name: Family name
        email: Optional e-mail address
    """

    id: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: Optional[str] = None

    @field_validator("id", "username", "first_name", "last_name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def matches(self, identifier: str) -> bool:
        """Check whether an identifier refers to this user.

        Matches the exact id, the username (case-insensitive) or
        "first last" (case-insensitive).

        Args:
            identifier: User id, username or full name

        Returns:
            True if the identifier refers to this user
        """
        lowered = identifier.lower()
        return (
            self.id == identifier
            or self.username.lower() == lowered
            or self.full_name.lower() == lowered
        )
