"""
Batch cleaning pipeline orchestration on Spark.

Coordinates the flow: read -> normalize/validate -> deduplicate -> filter & sort -> write
"""

from pathlib import Path
from typing import Any, Sequence

from pyspark.sql import DataFrame, SparkSession

from txn_cleaning.batch.readers import TransactionReader
from txn_cleaning.batch.spark_schema import CLEANED_SCHEMA, to_row
from txn_cleaning.batch.writers import DEFAULT_PARTITION_COLUMNS, CleanedDataWriter
from txn_cleaning.core.cleaning import (
    business_key,
    finalize_record,
    normalize_record,
    order_key,
    select_rank_one,
    validate_record,
)
from txn_cleaning.core.models import RAW_FIELDS, CleaningPolicy, CleaningStats
from txn_cleaning.core.rules import PolicyConfigLoader, RuleEngine
from txn_cleaning.observability.logger import get_logger, log_operation
from txn_cleaning.observability.metrics import (
    record_cleaning_run,
    record_run_status,
    record_write,
    track_duration,
)

logger = get_logger(__name__)


class CleaningPipeline:
    """
    Runs the transaction cleaning stages over a Spark DataFrame.

    Flow:
    1. Read raw transactions (CSV/JSON/Parquet)
    2. Normalize and validate every record (per partition, no shared state)
    3. Keep the most recent record per business key (shuffle by key)
    4. Drop incomplete records and sort by transaction time
    5. Write partitioned Parquet
    """

    def __init__(
        self,
        spark: SparkSession,
        policy: CleaningPolicy | None = None,
        rules: list[dict[str, Any]] | None = None
    ):
        """
        Initialize the pipeline.

        Args:
            spark: Active Spark session
            policy: Cleaning policy (defaults when None)
            rules: Completeness rule configurations (default required fields when None)
        """
        self.spark = spark
        self.policy = policy or CleaningPolicy()
        self.engine = RuleEngine(rules) if rules is not None else RuleEngine.with_defaults()
        self.reader = TransactionReader(spark)

        logger.info(
            "Completeness rules loaded",
            extra={"required_fields": self.engine.required_fields, **self.engine.get_rule_summary()},
        )

    @classmethod
    def from_config(cls, spark: SparkSession, policy_path: str | None) -> "CleaningPipeline":
        """
        Build a pipeline from a policy YAML file.

        A missing file falls back to the default policy and rules.
        """
        if policy_path and Path(policy_path).exists():
            loader = PolicyConfigLoader(policy_path)
            return cls(spark, policy=loader.load_policy(), rules=loader.load_rules())

        if policy_path:
            logger.warning(f"Cleaning policy file not found: {policy_path}, using defaults")
        return cls(spark)

    def clean_dataframe(self, raw_df: DataFrame) -> tuple[DataFrame, CleaningStats]:
        """
        Clean a DataFrame of raw transactions.

        Args:
            raw_df: DataFrame with the raw transaction columns

        The cleaned DataFrame comes back cached and materialized; the caller
        unpersists it once written.

        Returns:
            Tuple of (cleaned DataFrame ordered by transaction_timestamp, run counts)
        """
        TransactionReader.check_columns(raw_df, "input DataFrame")

        # Bound to locals so the closures shipped to executors do not capture self
        policy = self.policy
        engine = self.engine

        cached = []
        try:
            validated = raw_df.select(*RAW_FIELDS).rdd \
                .zipWithIndex() \
                .map(lambda pair: validate_record(
                    normalize_record(pair[0].asDict(), source_row=pair[1], policy=policy),
                    policy,
                )) \
                .cache()
            cached.append(validated)
            total_records = validated.count()

            finalized = validated \
                .keyBy(business_key) \
                .reduceByKey(select_rank_one) \
                .values() \
                .map(lambda record: finalize_record(record, engine, policy)) \
                .cache()
            cached.append(finalized)
            survivor_count = finalized.count()

            dropped_by_reason = dict(finalized.flatMap(lambda outcome: outcome[1]).countByValue())
            kept = finalized.filter(lambda outcome: outcome[0] is not None).map(lambda outcome: outcome[0])
            output_records = kept.count()
            price_problem_records = kept.filter(lambda record: record.has_price_problem).count()

            ordered = kept.sortBy(order_key)
            cleaned_df = self.spark.createDataFrame(ordered.map(to_row), CLEANED_SCHEMA).cache()
            cleaned_df.count()
        finally:
            for rdd in cached:
                rdd.unpersist()

        stats = CleaningStats(
            total_records=total_records,
            duplicate_records=total_records - survivor_count,
            dropped_records=survivor_count - output_records,
            dropped_by_reason=dropped_by_reason,
            price_problem_records=price_problem_records,
            output_records=output_records,
        )
        return cleaned_df, stats

    def run(
        self,
        input_path: str,
        output_path: str,
        file_format: str = "csv",
        partition_by: Sequence[str] = DEFAULT_PARTITION_COLUMNS,
        **read_options
    ) -> CleaningStats:
        """
        Read, clean and write one input.

        Args:
            input_path: Raw transaction file or directory
            output_path: Parquet output directory
            file_format: Input format (csv, json, parquet)
            partition_by: Output partition columns
            **read_options: Additional CSV read options

        Returns:
            Counts for the run

        Raises:
            PipelineError: If the reader or the writer fails

        Any failure, expected or not, is counted as a failed run before it propagates.
        """
        try:
            with log_operation("Reading transactions", logger, input_path=input_path), track_duration("read"):
                raw_df = self.reader.read(input_path, file_format=file_format, **read_options)

            with log_operation("Cleaning transactions", logger) as op, track_duration("clean"):
                cleaned_df, stats = self.clean_dataframe(raw_df)
                op.extra_fields.update(stats.model_dump(exclude={"dropped_by_reason"}))
            record_cleaning_run(stats)

            writer = CleanedDataWriter(output_path, partition_by=partition_by)
            try:
                with log_operation("Writing cleaned transactions", logger, output_path=output_path), track_duration("write"):
                    written = writer.write(cleaned_df)
            finally:
                cleaned_df.unpersist()
            record_write(written)
        except Exception:
            record_run_status(False)
            raise

        record_run_status(True)
        logger.info(
            "Cleaning run complete",
            extra={"dropped_by_reason": stats.dropped_by_reason, **stats.model_dump(exclude={"dropped_by_reason"})},
        )
        return stats
