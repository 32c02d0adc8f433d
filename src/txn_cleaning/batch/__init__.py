"""
Spark batch processing module.
"""

from .errors import PipelineError, SinkWriteError, SourceReadError, SourceSchemaError
from .pipeline import CleaningPipeline
from .readers import TransactionReader
from .writers import CleanedDataWriter

__all__ = [
    "CleaningPipeline",
    "TransactionReader",
    "CleanedDataWriter",
    "PipelineError",
    "SourceReadError",
    "SourceSchemaError",
    "SinkWriteError",
]
