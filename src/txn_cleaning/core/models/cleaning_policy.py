"""
CleaningPolicy model holding the tunable parts of the cleaning rules.
"""

from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field, field_validator


class CleaningPolicy(BaseModel):
    """
    Tunable parameters for normalization, validation and filtering.

    Attributes:
        category_delimiter: Separator between category path segments
        price_problem_threshold: Diff above which a row is flagged
        drop_price_problems: Drop flagged rows instead of keeping them
        valid_customer_types: Customer types kept as-is (others become UNKNOWN)
        timestamp_formats: strptime formats tried after ISO-8601 parsing
    """

    category_delimiter: str = Field(">", min_length=1)
    price_problem_threshold: Decimal = Field(Decimal("1.00"), ge=0)
    drop_price_problems: bool = False
    valid_customer_types: List[str] = Field(default_factory=lambda: ["B2B", "B2C"])
    timestamp_formats: List[str] = Field(
        default_factory=lambda: ["%Y-%m-%d %H:%M:%S", "%Y/%m/%d %H:%M:%S"]
    )

    @field_validator("valid_customer_types")
    @classmethod
    def upper_case_types(cls, v):
        """Customer types are compared after upper-casing."""
        return [item.strip().upper() for item in v]

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "category_delimiter": ">",
                "price_problem_threshold": "1.00",
                "drop_price_problems": False,
                "valid_customer_types": ["B2B", "B2C"],
                "timestamp_formats": ["%Y-%m-%d %H:%M:%S"]
            }
        }
