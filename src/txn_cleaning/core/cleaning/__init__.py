"""
Transaction cleaning stages.

Normalizer -> Validator -> Deduplicator -> Filter & Sort.
"""

from .clean import CleaningOutcome, clean_records
from .deduplicator import business_key, deduplicate, rank_key, select_rank_one
from .finalizer import (
    INVALID_OUTPUT_REASON,
    PRICE_PROBLEM_REASON,
    filter_and_sort,
    finalize_record,
    order_key,
    to_cleaned_record,
)
from .normalizer import normalize_record, parse_timestamp, split_category
from .validator import validate_record

__all__ = [
    "CleaningOutcome",
    "clean_records",
    "normalize_record",
    "parse_timestamp",
    "split_category",
    "validate_record",
    "business_key",
    "rank_key",
    "select_rank_one",
    "deduplicate",
    "finalize_record",
    "filter_and_sort",
    "order_key",
    "to_cleaned_record",
    "PRICE_PROBLEM_REASON",
    "INVALID_OUTPUT_REASON",
]
