"""
Command-line interface for batch transaction cleaning.

Usage:
    txn-clean process --input <file_path> --output <parquet_dir> [options]
    txn-clean report --input <parquet_dir>
"""

import argparse
import os
import sys
from pathlib import Path

from pyspark.sql import SparkSession

from txn_cleaning.batch.errors import PipelineError
from txn_cleaning.batch.pipeline import CleaningPipeline
from txn_cleaning.observability.logger import configure_logging, get_logger
from txn_cleaning.observability.metrics import write_metrics_file
from txn_cleaning.reporting import TransactionReport

logger = get_logger(__name__)

DEFAULT_POLICY_PATH = "config/cleaning_policy.yaml"


def create_spark_session(app_name: str = "TransactionCleaning", master: str | None = None) -> SparkSession:
    """
    Create Spark session for batch processing.

    Args:
        app_name: Application name
        master: Spark master URL (SPARK_MASTER env var, else local[*])

    Returns:
        SparkSession
    """
    spark = SparkSession.builder \
        .appName(app_name) \
        .master(master or os.getenv("SPARK_MASTER", "local[*]")) \
        .config("spark.sql.session.timeZone", "UTC") \
        .config("spark.sql.adaptive.enabled", "true") \
        .config("spark.sql.adaptive.coalescePartitions.enabled", "true") \
        .getOrCreate()
    spark.sparkContext.setLogLevel("WARN")

    return spark


def process_command(args) -> int:
    """
    Execute the cleaning run.

    Args:
        args: Command-line arguments

    Returns:
        Process exit status
    """
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}", extra={"component": "reader"})
        return 1

    spark = create_spark_session(master=args.master)
    try:
        pipeline = CleaningPipeline.from_config(spark, args.policy)
        if args.drop_price_problems:
            pipeline.policy = pipeline.policy.model_copy(update={"drop_price_problems": True})

        stats = pipeline.run(
            input_path=str(input_path),
            output_path=args.output,
            file_format=args.format,
        )

        logger.info("=" * 60)
        logger.info("CLEANING COMPLETE")
        logger.info("=" * 60)
        logger.info(f"Raw records read: {stats.total_records}")
        logger.info(f"Duplicate records removed: {stats.duplicate_records}")
        logger.info(f"Incomplete records dropped: {stats.dropped_records}")
        for reason, count in sorted(stats.dropped_by_reason.items()):
            logger.info(f"  {reason}: {count}")
        logger.info(f"Records flagged with price problems: {stats.price_problem_records}")
        logger.info(f"Cleaned records written: {stats.output_records}")
        logger.info("=" * 60)

        if args.report:
            TransactionReport(spark.read.parquet(args.output)).log_summary()

    except PipelineError as e:
        logger.error(f"Cleaning run failed: {e.message}", extra={"component": e.component})
        return 1
    except Exception as e:
        logger.error(f"Error during cleaning run: {e}", exc_info=True)
        return 1
    finally:
        metrics_file = args.metrics_file or os.getenv("METRICS_FILE")
        if metrics_file:
            write_metrics_file(metrics_file)
        spark.stop()

    return 0


def report_command(args) -> int:
    """
    Log summaries of an existing cleaned output.

    Args:
        args: Command-line arguments

    Returns:
        Process exit status
    """
    if not Path(args.input).exists():
        logger.error(f"Cleaned output not found: {args.input}")
        return 1

    spark = create_spark_session("TransactionReport", master=args.master)
    try:
        TransactionReport(spark.read.parquet(args.input)).log_summary()
    finally:
        spark.stop()
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        description="E-commerce transaction cleaning pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Clean a CSV file into partitioned Parquet
  txn-clean process --input data/ecommerce_data.csv --output data/cleaned

  # Drop rows whose total does not match price x quantity
  txn-clean process --input data/ecommerce_data.csv --output data/cleaned --drop-price-problems

  # Clean, then log summary reports and export metrics
  txn-clean process --input data/ecommerce_data.csv --output data/cleaned \\
      --report --metrics-file /var/lib/node_exporter/txn_cleaning.prom

  # Summaries of an existing output
  txn-clean report --input data/cleaned
        """
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOG_LEVEL env var or INFO)"
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "text"],
        help="Log format (default: LOG_FORMAT env var or json)"
    )
    parser.add_argument(
        "--master",
        default=None,
        help="Spark master URL (default: SPARK_MASTER env var or local[*])"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser("process", help="Clean a raw transaction file")
    process_parser.add_argument(
        "--input",
        required=True,
        help="Path to raw transaction file"
    )
    process_parser.add_argument(
        "--output",
        required=True,
        help="Parquet output directory"
    )
    process_parser.add_argument(
        "--format",
        default="csv",
        choices=["csv", "json", "parquet"],
        help="Input file format (default: csv)"
    )
    process_parser.add_argument(
        "--policy",
        default=DEFAULT_POLICY_PATH,
        help=f"Path to cleaning policy YAML file (default: {DEFAULT_POLICY_PATH})"
    )
    process_parser.add_argument(
        "--drop-price-problems",
        action="store_true",
        help="Drop rows flagged with a price calculation problem instead of keeping them"
    )
    process_parser.add_argument(
        "--report",
        action="store_true",
        help="Log summary reports after writing"
    )
    process_parser.add_argument(
        "--metrics-file",
        default=None,
        help="Write Prometheus metrics to this file (default: METRICS_FILE env var)"
    )

    report_parser = subparsers.add_parser("report", help="Summarize a cleaned output")
    report_parser.add_argument(
        "--input",
        required=True,
        help="Parquet directory written by 'process'"
    )

    return parser


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    configure_logging(level=args.log_level, format_type=args.log_format)

    if args.command == "process":
        sys.exit(process_command(args))
    elif args.command == "report":
        sys.exit(report_command(args))


if __name__ == "__main__":
    main()
