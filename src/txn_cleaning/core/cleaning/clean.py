"""
In-memory composition of the four cleaning stages.

normalize -> validate -> deduplicate -> filter & sort. Stateless: every
call builds its own intermediate collections and shares nothing.
"""

from collections import Counter
from typing import Any, Iterable, Mapping, NamedTuple

from txn_cleaning.core.models import CleanedRecord, CleaningPolicy, CleaningStats
from txn_cleaning.core.rules import RuleEngine
from txn_cleaning.observability.logger import get_logger

from .deduplicator import deduplicate
from .finalizer import finalize_record, order_key
from .normalizer import normalize_record
from .validator import validate_record

logger = get_logger(__name__)


class CleaningOutcome(NamedTuple):
    """Cleaned records in output order plus the run's counts."""

    records: list[CleanedRecord]
    stats: CleaningStats


def clean_records(
    raw_records: Iterable[Mapping[str, Any]],
    policy: CleaningPolicy | None = None,
    engine: RuleEngine | None = None,
) -> CleaningOutcome:
    """
    Run the cleaning stages over a finite collection of raw records.

    Args:
        raw_records: Raw transaction mappings, in ingestion order
        policy: Cleaning policy (defaults when None)
        engine: Completeness rule engine (default required fields when None)

    Returns:
        CleaningOutcome with records ordered by transaction_timestamp
    """
    policy = policy or CleaningPolicy()
    engine = engine or RuleEngine.with_defaults()

    validated = [
        validate_record(normalize_record(raw, source_row=row, policy=policy), policy)
        for row, raw in enumerate(raw_records)
    ]
    survivors = deduplicate(validated)

    kept: list[CleanedRecord] = []
    drop_reasons: Counter = Counter()
    dropped = 0
    for record in survivors:
        cleaned, reasons = finalize_record(record, engine, policy)
        if cleaned is None:
            dropped += 1
            drop_reasons.update(reasons)
        else:
            kept.append(cleaned)
    kept.sort(key=order_key)

    stats = CleaningStats(
        total_records=len(validated),
        duplicate_records=len(validated) - len(survivors),
        dropped_records=dropped,
        dropped_by_reason=dict(drop_reasons),
        price_problem_records=sum(1 for record in kept if record.has_price_problem),
        output_records=len(kept),
    )
    logger.debug(
        "Cleaned records in memory",
        extra={"total_records": stats.total_records, "output_records": stats.output_records},
    )
    return CleaningOutcome(kept, stats)
