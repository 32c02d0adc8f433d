"""
Completeness filter and final ordering of deduplicated records.
"""

from datetime import datetime
from typing import Iterable

from pydantic import ValidationError as PydanticValidationError

from txn_cleaning.core.models import CleanedRecord, CleaningPolicy, ValidatedRecord
from txn_cleaning.core.rules import RuleEngine

PRICE_PROBLEM_REASON = "price_problem"
INVALID_OUTPUT_REASON = "invalid_output"

_DEFAULT_POLICY = CleaningPolicy()


def to_cleaned_record(record: ValidatedRecord) -> CleanedRecord:
    """Project a validated record onto the output contract."""
    return CleanedRecord(
        transaction_id=record.transaction_id,
        transaction_timestamp=record.transaction_timestamp,
        transaction_date=record.transaction_date,
        transaction_hour=record.transaction_hour,
        transaction_day_of_week=record.transaction_day_of_week,
        transaction_month=record.transaction_month,
        transaction_year=record.transaction_year,
        customer_id=record.customer_id,
        customer_name=record.customer_name,
        city=record.city,
        customer_type=record.validated_customer_type,
        product_name=record.product_name,
        main_category=record.main_category,
        sub_category=record.sub_category,
        unit_price=record.unit_price,
        quantity=record.quantity,
        total_amount=record.total_amount,
        has_price_problem=record.has_price_problem,
        source_row=record.source_row,
    )


def finalize_record(
    record: ValidatedRecord,
    engine: RuleEngine,
    policy: CleaningPolicy | None = None,
) -> tuple[CleanedRecord | None, list[str]]:
    """
    Apply the completeness rules (and the optional price-problem drop).

    Args:
        record: A deduplicated record
        engine: Completeness rule engine
        policy: Cleaning policy (defaults when None)

    Returns:
        (cleaned record, []) when kept, (None, drop reasons) when dropped
    """
    policy = policy or _DEFAULT_POLICY

    result = engine.validate_record(record.model_dump(), record_id=record.transaction_id)
    reasons = list(result.failed_rules)
    if policy.drop_price_problems and record.has_price_problem:
        reasons.append(PRICE_PROBLEM_REASON)
    if reasons:
        return None, reasons

    try:
        return to_cleaned_record(record), []
    except PydanticValidationError:
        # the rule set in use does not guard every field the output needs
        return None, [INVALID_OUTPUT_REASON]


def order_key(record: CleanedRecord) -> tuple[datetime, str, int]:
    """Ascending output order: event time, then transaction_id, then input row."""
    return (record.transaction_timestamp, record.transaction_id, record.source_row)


def filter_and_sort(
    records: Iterable[ValidatedRecord],
    engine: RuleEngine,
    policy: CleaningPolicy | None = None,
) -> list[CleanedRecord]:
    """Drop incomplete records and return the rest in output order."""
    kept = []
    for record in records:
        cleaned, _ = finalize_record(record, engine, policy)
        if cleaned is not None:
            kept.append(cleaned)
    return sorted(kept, key=order_key)
