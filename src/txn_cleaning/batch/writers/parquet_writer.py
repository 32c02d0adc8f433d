"""
Batch sink writer for cleaned transactions.

Writes the cleaned DataFrame as Parquet, partitioned for storage.
"""

from typing import Sequence

from py4j.protocol import Py4JJavaError
from pyspark.errors import PySparkException
from pyspark.sql import DataFrame

from txn_cleaning.batch.errors import SinkWriteError
from txn_cleaning.observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PARTITION_COLUMNS = ("transaction_date", "main_category")


class CleanedDataWriter:
    """
    Writes cleaned records from a Spark DataFrame to partitioned Parquet.
    """

    def __init__(
        self,
        output_path: str,
        partition_by: Sequence[str] = DEFAULT_PARTITION_COLUMNS,
        mode: str = "overwrite"
    ):
        """
        Initialize the writer.

        Args:
            output_path: Target directory
            partition_by: Partition columns (storage concern, not a cleaning one)
            mode: Spark save mode (overwrite, append, error, ignore)
        """
        self.output_path = output_path
        self.partition_by = list(partition_by)
        self.mode = mode

    def write(self, df: DataFrame) -> int:
        """
        Write the DataFrame.

        Args:
            df: Cleaned records

        Returns:
            Number of records written

        Raises:
            SinkWriteError: If a partition column is missing or Spark fails to write
        """
        missing = [name for name in self.partition_by if name not in df.columns]
        if missing:
            raise SinkWriteError(f"Partition columns not in output: {', '.join(missing)}")

        try:
            # counting runs the DataFrame's lineage, which can fail like the write
            count = df.count()
            df.write \
                .mode(self.mode) \
                .partitionBy(*self.partition_by) \
                .parquet(self.output_path)
        except (PySparkException, Py4JJavaError) as e:
            raise SinkWriteError(f"Cannot write Parquet output to {self.output_path}: {e}") from e

        logger.info(
            f"Wrote {count} records to {self.output_path}",
            extra={"output_path": self.output_path, "partition_by": self.partition_by},
        )
        return count
