"""
Core data models for the transaction cleaning pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .cleaning_policy import CleaningPolicy
from .cleaning_stats import CleaningStats
from .transaction import (
    BUSINESS_KEY_FIELDS,
    CLEANED_FIELDS,
    RAW_FIELDS,
    UNKNOWN_CUSTOMER_TYPE,
    CleanedRecord,
    NormalizedRecord,
    ValidatedRecord,
)
from .validation_result import ValidationResult

__all__ = [
    "RAW_FIELDS",
    "BUSINESS_KEY_FIELDS",
    "CLEANED_FIELDS",
    "UNKNOWN_CUSTOMER_TYPE",
    "NormalizedRecord",
    "ValidatedRecord",
    "CleanedRecord",
    "CleaningPolicy",
    "CleaningStats",
    "ValidationResult",
]
