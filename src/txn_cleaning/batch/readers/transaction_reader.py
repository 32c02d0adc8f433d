"""
Transaction source reader supporting CSV, JSON and Parquet inputs.
"""

from py4j.protocol import Py4JJavaError
from pyspark.errors import PySparkException
from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import StructType

from txn_cleaning.batch.errors import SourceReadError, SourceSchemaError
from txn_cleaning.core.models import RAW_FIELDS
from txn_cleaning.observability.logger import get_logger

logger = get_logger(__name__)


class TransactionReader:
    """
    Reads raw transaction files and checks they carry every raw column.
    """

    SUPPORTED_FORMATS = ("csv", "json", "parquet")

    def __init__(self, spark: SparkSession):
        """
        Initialize transaction reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark

    def read(
        self,
        file_path: str,
        file_format: str = "csv",
        schema: StructType | None = None,
        **options
    ) -> DataFrame:
        """
        Read a transaction file into a Spark DataFrame.

        Args:
            file_path: Path to file
            file_format: Format (csv, json, parquet)
            schema: Optional explicit schema
            **options: CSV options (header, delimiter)

        Returns:
            Spark DataFrame with at least the raw transaction columns

        Raises:
            ValueError: If file format is unsupported
            SourceReadError: If Spark cannot read the input
            SourceSchemaError: If required columns are missing
        """
        file_format = file_format.lower()
        if file_format not in self.SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported file format: {file_format}")

        try:
            if file_format == "csv":
                df = self.read_csv(file_path, schema=schema, **options)
            elif file_format == "json":
                reader = self.spark.read
                if schema:
                    reader = reader.schema(schema)
                df = reader.json(file_path)
            else:
                df = self.spark.read.parquet(file_path)
        except (PySparkException, Py4JJavaError) as e:
            raise SourceReadError(f"Cannot read {file_format} input {file_path}: {e}") from e

        self.check_columns(df, file_path)
        logger.debug(f"Opened {file_format} input {file_path}", extra={"columns": df.columns})
        return df

    def read_csv(
        self,
        file_path: str,
        schema: StructType | None = None,
        header: bool = True,
        delimiter: str = ","
    ) -> DataFrame:
        """
        Read a delimited file.

        Without a schema every column is text, so raw values reach the
        normalizer unchanged. Empty cells are null and malformed lines are
        kept (PERMISSIVE mode).

        Args:
            file_path: Path to CSV file
            schema: Optional explicit schema
            header: Whether the file has a header row
            delimiter: Field delimiter

        Returns:
            Spark DataFrame
        """
        reader = self.spark.read
        if schema:
            reader = reader.schema(schema)

        return reader \
            .option("header", str(header).lower()) \
            .option("delimiter", delimiter) \
            .option("inferSchema", "false") \
            .option("mode", "PERMISSIVE") \
            .csv(file_path)

    @staticmethod
    def check_columns(df: DataFrame, source: str) -> None:
        """
        Raise SourceSchemaError unless every raw transaction column exists.

        Args:
            df: DataFrame to check
            source: Description of the input for the error message
        """
        present = set(df.columns)
        missing = [name for name in RAW_FIELDS if name not in present]
        if missing:
            logger.error(
                "Input is missing required columns",
                extra={"source": source, "missing_columns": missing},
            )
            raise SourceSchemaError(missing, source)
