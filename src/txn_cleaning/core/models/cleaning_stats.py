"""
CleaningStats model summarizing one pipeline run.
"""

from typing import Dict

from pydantic import BaseModel, Field


class CleaningStats(BaseModel):
    """
    Record counts for one run of the cleaning pipeline.

    Attributes:
        total_records: Raw records read
        duplicate_records: Records discarded by deduplication
        dropped_records: Deduplicated records removed by the filter
        dropped_by_reason: Failed rule name -> number of records it failed
        price_problem_records: Emitted records flagged with a price problem
        output_records: Records emitted
    """

    total_records: int = Field(0, ge=0)
    duplicate_records: int = Field(0, ge=0)
    dropped_records: int = Field(0, ge=0)
    dropped_by_reason: Dict[str, int] = Field(default_factory=dict)
    price_problem_records: int = Field(0, ge=0)
    output_records: int = Field(0, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "total_records": 1000,
                "duplicate_records": 42,
                "dropped_records": 17,
                "dropped_by_reason": {"unit_price_required": 9, "transaction_timestamp_required": 8},
                "price_problem_records": 5,
                "output_records": 941
            }
        }
