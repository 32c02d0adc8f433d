"""
Batch transaction source readers.
"""

from .transaction_reader import TransactionReader

__all__ = [
    "TransactionReader",
]
