"""
Spark schema of the cleaned transaction output.
"""

from pyspark.sql.types import (
    BooleanType,
    DateType,
    DecimalType,
    IntegerType,
    LongType,
    StringType,
    StructField,
    StructType,
    TimestampNTZType,
)

from txn_cleaning.core.models import CLEANED_FIELDS, CleanedRecord

MONEY = DecimalType(38, 2)

# Timestamps are naive UTC, so NTZ keeps them free of session time zone shifts
CLEANED_SCHEMA = StructType([
    StructField("transaction_id", StringType(), False),
    StructField("transaction_timestamp", TimestampNTZType(), False),
    StructField("transaction_date", DateType(), False),
    StructField("transaction_hour", IntegerType(), False),
    StructField("transaction_day_of_week", IntegerType(), False),
    StructField("transaction_month", IntegerType(), False),
    StructField("transaction_year", IntegerType(), False),
    StructField("customer_id", StringType(), False),
    StructField("customer_name", StringType(), True),
    StructField("city", StringType(), True),
    StructField("customer_type", StringType(), False),
    StructField("product_name", StringType(), True),
    StructField("main_category", StringType(), False),
    StructField("sub_category", StringType(), True),
    StructField("unit_price", MONEY, False),
    StructField("quantity", LongType(), False),
    StructField("total_amount", MONEY, False),
    StructField("has_price_problem", BooleanType(), False),
])


def to_row(record: CleanedRecord) -> tuple:
    """Values of a cleaned record in CLEANED_SCHEMA column order."""
    return tuple(getattr(record, name) for name in CLEANED_FIELDS)
