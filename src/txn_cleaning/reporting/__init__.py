"""
Reporting over cleaned transactions.
"""

from .summary import TransactionReport

__all__ = ["TransactionReport"]
