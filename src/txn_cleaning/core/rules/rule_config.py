"""
Cleaning policy and rule configuration management.

Loads the cleaning policy and the completeness rules from a YAML file and
provides utilities for building rule configurations in code.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from txn_cleaning.core.models import CleaningPolicy

REQUIRED_OUTPUT_FIELDS = (
    "transaction_id",
    "transaction_timestamp",
    "customer_id",
    "unit_price",
    "quantity",
    "total_amount",
    "main_category",
)


class PolicyConfigLoader:
    """
    Loads the cleaning policy and completeness rules from YAML.

    Expected YAML format:
    ```yaml
    policy:
      category_delimiter: ">"
      price_problem_threshold: 1.00
      drop_price_problems: false
      valid_customer_types: [B2B, B2C]

    rules:
      transaction_id:
        - type: required_field
      unit_price:
        - type: required_field
        - type: range
          params:
            min_exclusive: 0
    ```

    Both sections are optional; a missing section falls back to defaults.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the policy config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Policy configuration file not found: {config_path}")
        self._config: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._config is None:
            with open(self.config_path) as f:
                config = yaml.safe_load(f)
            if config is None:
                config = {}
            if not isinstance(config, dict):
                raise ValueError("Configuration file must contain a mapping at the top level")
            self._config = config
        return self._config

    def load_policy(self) -> CleaningPolicy:
        """
        Load the cleaning policy section.

        Returns:
            CleaningPolicy (defaults for every key not given)

        Raises:
            ValueError: If the section is malformed
        """
        section = self._load().get("policy") or {}
        if not isinstance(section, dict):
            raise ValueError("'policy' section must be a mapping")
        try:
            return CleaningPolicy(**section)
        except PydanticValidationError as e:
            raise ValueError(f"Invalid cleaning policy in {self.config_path}: {e}") from e

    def load_rules(self) -> list[dict[str, Any]]:
        """
        Load and parse the completeness rules.

        Returns:
            List of rule dictionaries suitable for RuleEngine

        Raises:
            ValueError: If the rules section is malformed
        """
        field_rules = self._load().get("rules")
        if field_rules is None:
            return default_completeness_rules()
        if not isinstance(field_rules, dict):
            raise ValueError("'rules' section must map field names to rule lists")

        rules = []
        for field_name, field_rule_list in field_rules.items():
            if not isinstance(field_rule_list, list):
                raise ValueError(f"Rules for field '{field_name}' must be a list")

            for idx, rule_def in enumerate(field_rule_list):
                rules.append(self._parse_rule(field_name, rule_def, idx))

        return rules

    def _parse_rule(self, field_name: str, rule_def: dict[str, Any], idx: int) -> dict[str, Any]:
        """
        Parse a single rule definition.

        Args:
            field_name: The field this rule applies to
            rule_def: The rule definition from YAML
            idx: Index of this rule for the field (for naming)

        Returns:
            Parsed rule dictionary

        Raises:
            ValueError: If rule definition is invalid
        """
        if not isinstance(rule_def, dict) or "type" not in rule_def:
            raise ValueError(f"Rule for field '{field_name}' is missing 'type'")

        rule_type = rule_def["type"]

        # required_field rules get the same names as the built-in defaults
        default_name = f"{field_name}_required" if rule_type == "required_field" else f"{field_name}_{rule_type}_{idx}"
        rule_name = rule_def.get("name", default_name)

        parameters = rule_def.get("params", rule_def.get("parameters", {}))

        severity = rule_def.get("severity", "error")
        if severity not in ("error", "warning"):
            raise ValueError(f"Invalid severity '{severity}' for rule '{rule_name}'. Must be 'error' or 'warning'")

        enabled = rule_def.get("enabled", True)

        return {
            "rule_name": rule_name,
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "severity": severity,
            "enabled": enabled,
        }


class RuleConfigBuilder:
    """
    Programmatically build rule configurations (for defaults, tests or dynamic rules).
    """

    def __init__(self):
        """Initialize empty rule configuration."""
        self.rules: list[dict[str, Any]] = []

    def add_required_field(self, field_name: str, allow_empty_string: bool = False) -> "RuleConfigBuilder":
        """Add a required field rule."""
        self.rules.append({
            "rule_name": f"{field_name}_required",
            "rule_type": "required_field",
            "field_name": field_name,
            "parameters": {"allow_empty_string": allow_empty_string},
            "severity": "error",
            "enabled": True,
        })
        return self

    def build(self) -> list[dict[str, Any]]:
        """Build and return the rule configuration."""
        return self.rules


def default_completeness_rules() -> list[dict[str, Any]]:
    """Required-field rules for every field a cleaned record must carry."""
    builder = RuleConfigBuilder()
    for field_name in REQUIRED_OUTPUT_FIELDS:
        builder.add_required_field(field_name)
    return builder.build()
