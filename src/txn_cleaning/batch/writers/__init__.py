"""
Batch sink writers.
"""

from .parquet_writer import DEFAULT_PARTITION_COLUMNS, CleanedDataWriter

__all__ = [
    "CleanedDataWriter",
    "DEFAULT_PARTITION_COLUMNS",
]
