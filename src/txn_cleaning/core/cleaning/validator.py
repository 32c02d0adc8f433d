"""
Row-level quality signals and time-derived fields.
"""

from txn_cleaning.core.models import (
    UNKNOWN_CUSTOMER_TYPE,
    CleaningPolicy,
    NormalizedRecord,
    ValidatedRecord,
)

_DEFAULT_POLICY = CleaningPolicy()


def day_of_week(record: NormalizedRecord) -> int | None:
    """Day of week of the transaction date, 1 = Sunday ... 7 = Saturday."""
    if record.transaction_date is None:
        return None
    return record.transaction_date.isoweekday() % 7 + 1


def has_price_problem(record: NormalizedRecord, policy: CleaningPolicy) -> bool:
    """True only when the diff is present and above the threshold."""
    diff = record.price_calculation_diff
    return diff is not None and diff > policy.price_problem_threshold


def validate_record(record: NormalizedRecord, policy: CleaningPolicy | None = None) -> ValidatedRecord:
    """
    Derive quality flags and time fields for one normalized record.

    Args:
        record: Output of normalize_record
        policy: Cleaning policy (defaults when None)

    Returns:
        ValidatedRecord
    """
    policy = policy or _DEFAULT_POLICY

    timestamp = record.transaction_timestamp
    txn_date = record.transaction_date
    if timestamp is None or txn_date is None:
        time_fields = {}
    else:
        time_fields = {
            "transaction_hour": timestamp.hour,
            "transaction_day_of_week": day_of_week(record),
            "transaction_month": txn_date.month,
            "transaction_year": txn_date.year,
        }

    if record.customer_type in policy.valid_customer_types:
        customer_type = record.customer_type
    else:
        customer_type = UNKNOWN_CUSTOMER_TYPE

    fields = record.model_dump(include=set(NormalizedRecord.model_fields))
    fields.update(time_fields)
    fields["has_price_problem"] = has_price_problem(record, policy)
    fields["validated_customer_type"] = customer_type
    return ValidatedRecord(**fields)
