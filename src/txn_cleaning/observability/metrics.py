"""
Prometheus metrics for the transaction cleaning pipeline

Batch runs are short-lived, so metrics are exported to a text file for the
node exporter textfile collector rather than served over HTTP.
"""
from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    write_to_textfile,
)

from txn_cleaning.core.models import CleaningStats

REGISTRY = CollectorRegistry()


# =======================
# RECORD COUNTS
# =======================

records_read_total = Counter(
    name="pipeline_records_read_total",
    documentation="Raw transaction records read from the source",
    registry=REGISTRY,
)

duplicate_records_total = Counter(
    name="pipeline_duplicate_records_total",
    documentation="Records discarded by business-key deduplication",
    registry=REGISTRY,
)

records_dropped_total = Counter(
    name="pipeline_records_dropped_total",
    documentation="Deduplicated records dropped by the completeness filter, per failed rule",
    labelnames=["reason"],
    registry=REGISTRY,
)

price_problem_records_total = Counter(
    name="pipeline_price_problem_records_total",
    documentation="Emitted records flagged with a price calculation problem",
    registry=REGISTRY,
)

records_written_total = Counter(
    name="pipeline_records_written_total",
    documentation="Cleaned records written to the sink",
    registry=REGISTRY,
)

# =======================
# RUNS
# =======================

runs_total = Counter(
    name="pipeline_runs_total",
    documentation="Pipeline runs by outcome",
    labelnames=["status"],  # status: success, failure
    registry=REGISTRY,
)

stage_duration_seconds = Histogram(
    name="pipeline_stage_duration_seconds",
    documentation="Time spent in each pipeline stage in seconds",
    labelnames=["stage"],  # stage: read, clean, write, report
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def write_metrics_file(path: str) -> None:
    """
    Write all metrics to a file for the node exporter textfile collector

    Args:
        path: Target file (written atomically by prometheus_client)
    """
    write_to_textfile(path, REGISTRY)


class track_duration:
    """
    Context manager observing a stage's duration

    Usage:
        with track_duration("clean"):
            ...
    """

    def __init__(self, stage: str):
        self.stage = stage
        self.timer = None

    def __enter__(self):
        self.timer = stage_duration_seconds.labels(stage=self.stage).time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def record_cleaning_run(stats: CleaningStats) -> None:
    """
    Record the counts of one cleaning run.

    Args:
        stats: Counts returned by the pipeline
    """
    records_read_total.inc(stats.total_records)
    duplicate_records_total.inc(stats.duplicate_records)
    for reason, count in stats.dropped_by_reason.items():
        records_dropped_total.labels(reason=reason).inc(count)
    price_problem_records_total.inc(stats.price_problem_records)


def record_write(count: int) -> None:
    """Record records written to the sink."""
    records_written_total.inc(count)


def record_run_status(success: bool) -> None:
    """Record a finished run."""
    runs_total.labels(status="success" if success else "failure").inc()
