"""
Business-key deduplication: keep the most recent record of each group.

Ranking is a total order (timestamp present, newest timestamp, earliest
input row), so ``select_rank_one`` is associative and commutative and can
run as a Spark ``reduceByKey`` as well as over an in-memory map.
"""

from datetime import datetime
from typing import Iterable

from txn_cleaning.core.models import BUSINESS_KEY_FIELDS, ValidatedRecord

BusinessKey = tuple


def business_key(record: ValidatedRecord) -> BusinessKey:
    """(transaction_id, customer_id, product_name, total_amount); None components group together."""
    return tuple(getattr(record, name) for name in BUSINESS_KEY_FIELDS)


def rank_key(record: ValidatedRecord) -> tuple[bool, datetime, int]:
    """Larger is better: absent timestamps rank last, ties go to the earlier input row."""
    timestamp = record.transaction_timestamp
    return (
        timestamp is not None,
        timestamp if timestamp is not None else datetime.min,
        -record.source_row,
    )


def select_rank_one(left: ValidatedRecord, right: ValidatedRecord) -> ValidatedRecord:
    """Return whichever of two same-key records ranks first."""
    return left if rank_key(left) >= rank_key(right) else right


def deduplicate(records: Iterable[ValidatedRecord]) -> list[ValidatedRecord]:
    """
    Keep the rank-1 record of every business-key group.

    One pass over the input with a map from key to best-seen record.

    Returns:
        Surviving records in first-seen key order
    """
    best: dict[BusinessKey, ValidatedRecord] = {}
    for record in records:
        key = business_key(record)
        current = best.get(key)
        best[key] = record if current is None else select_rank_one(current, record)
    return list(best.values())
