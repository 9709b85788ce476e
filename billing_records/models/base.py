"""Base model for all data models in the billing records package.

This module provides a base Pydantic model with common configuration
and the shared Decimal coercion used by monetary and quantity fields.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a numeric value to Decimal, passing None through.

    Floats go through ``str`` so that 0.1 becomes Decimal("0.1") rather
    than its binary expansion.

    Args:
        value: The value to convert

    Returns:
        The value as a Decimal, or None

    Raises:
        ValueError: If the value cannot be converted or is not finite
    """
    if value is None or isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to Decimal")
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError) as e:
            raise ValueError(f"Cannot convert {value!r} to Decimal: {e}")

    if result is not None and not result.is_finite():
        raise ValueError(f"Value must be a finite number, got {value!r}")
    return result


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Provides common configuration:
    - Validation with type checking
    - Validation on assignment
    - Unknown fields rejected

    Example:
        >>> class Client(BaseDataModel):
        ...     name: str
        >>> Client(name="Acme").model_dump()
        {'name': 'Acme'}
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        strict=False,
        extra="forbid",
        frozen=False,
    )
