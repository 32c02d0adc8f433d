"""
Transaction record models for each stage of the cleaning pipeline.

RawRecord is a plain mapping read from the source. Every later stage
produces a frozen Pydantic model; ``None`` marks a field with no valid value.
"""

from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field

RAW_FIELDS = (
    "transaction_id",
    "timestamp",
    "customer_id",
    "customer_name",
    "city",
    "customer_type",
    "product_name",
    "category",
    "price",
    "quantity",
    "total_amount",
)

BUSINESS_KEY_FIELDS = ("transaction_id", "customer_id", "product_name", "total_amount")

UNKNOWN_CUSTOMER_TYPE = "UNKNOWN"


class NormalizedRecord(BaseModel):
    """
    A raw transaction after per-field parsing and cleaning.

    Attributes:
        transaction_id: Transaction identifier as text
        transaction_timestamp: Parsed event time (naive, UTC)
        transaction_date: Calendar date of transaction_timestamp
        customer_id: Customer identifier as text
        customer_name: Trimmed, initcapped customer name
        city: Trimmed, initcapped city
        customer_type: Trimmed, upper-cased customer type
        product_name: Trimmed product name
        main_category: First segment of the category path
        sub_category: Second segment of the category path
        unit_price: Price rounded to 2 dp, only when > 0
        quantity: Whole quantity, only when > 0
        total_amount: Total rounded to 2 dp, only when > 0
        price_calculation_diff: |round(price * quantity, 2) - total| on raw values
        source_row: Ingestion ordinal, used to break ranking ties
    """

    transaction_id: str | None = None
    transaction_timestamp: datetime | None = None
    transaction_date: date | None = None
    customer_id: str | None = None
    customer_name: str | None = None
    city: str | None = None
    customer_type: str | None = None
    product_name: str | None = None
    main_category: str | None = None
    sub_category: str | None = None
    unit_price: Decimal | None = None
    quantity: int | None = None
    total_amount: Decimal | None = None
    price_calculation_diff: Decimal | None = Field(None, ge=0)
    source_row: int = Field(0, ge=0)

    class Config:
        frozen = True


class ValidatedRecord(NormalizedRecord):
    """
    A normalized record plus row-level quality signals and time fields.

    The four time fields are derived together from the transaction time, so
    they are either all present or all absent.
    """

    has_price_problem: bool = False
    transaction_hour: int | None = Field(None, ge=0, le=23)
    transaction_day_of_week: int | None = Field(None, ge=1, le=7)
    transaction_month: int | None = Field(None, ge=1, le=12)
    transaction_year: int | None = None
    validated_customer_type: str = UNKNOWN_CUSTOMER_TYPE


class CleanedRecord(BaseModel):
    """
    A transaction that survived deduplication and the completeness filter.

    This is the contract handed to the sink writer and the reporting layer.
    Both partition columns, transaction_date and main_category, are always set.
    ``customer_type`` carries the validated value (B2B, B2C or UNKNOWN
    under the default policy).
    """

    transaction_id: str = Field(..., min_length=1)
    transaction_timestamp: datetime
    transaction_date: date
    transaction_hour: int = Field(..., ge=0, le=23)
    transaction_day_of_week: int = Field(..., ge=1, le=7)
    transaction_month: int = Field(..., ge=1, le=12)
    transaction_year: int

    customer_id: str = Field(..., min_length=1)
    customer_name: str | None = None
    city: str | None = None
    customer_type: str = Field(..., min_length=1)

    product_name: str | None = None
    main_category: str = Field(..., min_length=1)
    sub_category: str | None = None

    unit_price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., gt=0, le=2**63 - 1)
    total_amount: Decimal = Field(..., ge=0)
    has_price_problem: bool

    source_row: int = Field(0, ge=0, exclude=True)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "transaction_id": "T1",
                "transaction_timestamp": "2024-01-02T10:00:00",
                "transaction_date": "2024-01-02",
                "transaction_hour": 10,
                "transaction_day_of_week": 3,
                "transaction_month": 1,
                "transaction_year": 2024,
                "customer_id": "C1",
                "customer_name": "Jane Doe",
                "city": "New York",
                "customer_type": "B2C",
                "product_name": "Widget",
                "main_category": "Electronics",
                "sub_category": "Phones",
                "unit_price": "3.33",
                "quantity": 3,
                "total_amount": "9.99",
                "has_price_problem": False
            }
        }


CLEANED_FIELDS = tuple(
    name for name, field in CleanedRecord.model_fields.items() if not field.exclude
)
