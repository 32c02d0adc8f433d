"""
Field rule implementations.

Provides validators for required fields, type coercion and numeric ranges.
"""

from .base_validator import BaseValidator, ValidationError
from .range_validator import RangeValidator
from .required_field_validator import RequiredFieldValidator
from .type_validator import TypeValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "TypeValidator",
    "RangeValidator",
]
