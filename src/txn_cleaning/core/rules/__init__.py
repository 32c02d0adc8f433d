"""
Completeness rule engine and cleaning policy configuration.
"""

from .rule_config import (
    REQUIRED_OUTPUT_FIELDS,
    PolicyConfigLoader,
    RuleConfigBuilder,
    default_completeness_rules,
)
from .rule_engine import RuleEngine

__all__ = [
    "REQUIRED_OUTPUT_FIELDS",
    "PolicyConfigLoader",
    "RuleConfigBuilder",
    "RuleEngine",
    "default_completeness_rules",
]
