"""
ValidationResult model representing the outcome of the completeness check (ephemeral).
"""

from pydantic import BaseModel, Field, field_validator
from typing import List


class ValidationResult(BaseModel):
    """
    Outcome of checking a record against the completeness rules.

    Note: ValidationResult is ephemeral, used in-memory while filtering.

    Attributes:
        record_id: Which record was checked
        passed: Overall status
        passed_rules: Rules that succeeded
        failed_rules: Rules that failed (each one a drop reason)
        warnings: Rules with severity "warning" that failed without dropping the record
    """

    record_id: str
    passed: bool
    passed_rules: List[str] = Field(default_factory=list)
    failed_rules: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @field_validator('failed_rules')
    @classmethod
    def check_passed_consistency(cls, v, info):
        """Validate that passed=True implies failed_rules is empty."""
        if info.data.get('passed') and len(v) > 0:
            raise ValueError("passed=True but failed_rules is not empty")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "record_id": "T1",
                "passed": False,
                "passed_rules": [
                    "transaction_id_required",
                    "customer_id_required"
                ],
                "failed_rules": [
                    "unit_price_required"
                ],
                "warnings": []
            }
        }
