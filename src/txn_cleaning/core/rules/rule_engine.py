"""
Rule engine for the completeness filter.

The rule engine builds validators from rule configurations, applies them
to a record's fields and produces a ValidationResult. Failed rule names
double as drop reasons in the run statistics.
"""

from collections import Counter
from typing import Any

from txn_cleaning.core.models import ValidationResult
from txn_cleaning.core.validators import (
    BaseValidator,
    RangeValidator,
    RequiredFieldValidator,
    TypeValidator,
    ValidationError,
)

from .rule_config import default_completeness_rules


class RuleEngine:
    """
    Orchestrates field rules on cleaned-candidate records.

    Applies every enabled rule in order and collects all failures,
    so a record dropped for several reasons reports each of them.
    """

    VALIDATOR_REGISTRY = {
        "required_field": RequiredFieldValidator,
        "type_check": TypeValidator,
        "range": RangeValidator,
    }

    def __init__(self, rules: list[dict[str, Any]]):
        """
        Initialize the rule engine.

        Args:
            rules: List of rule configurations, each containing:
                   - rule_name: str
                   - rule_type: str (required_field, type_check, range)
                   - field_name: str
                   - parameters: Dict[str, Any] (optional)
                   - severity: str (error or warning)
                   - enabled: bool (default True)
        """
        self.rules = rules
        self.validators: list[tuple[str, str, BaseValidator]] = []
        self._build_validators()

    @classmethod
    def with_defaults(cls) -> "RuleEngine":
        """Engine enforcing the default required output fields."""
        return cls(default_completeness_rules())

    def _build_validators(self) -> None:
        """Build validator instances from rule configurations."""
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            rule_name = rule["rule_name"]
            rule_type = rule["rule_type"]
            field_name = rule["field_name"]
            parameters = rule.get("parameters", {})
            severity = rule.get("severity", "error")

            validator_class = self.VALIDATOR_REGISTRY.get(rule_type)
            if not validator_class:
                raise ValueError(f"Unknown rule type: {rule_type}")

            try:
                validator = validator_class(field_name, parameters)
            except ValueError as e:
                raise ValueError(f"Failed to create validator for rule '{rule_name}': {e}") from e
            self.validators.append((rule_name, severity, validator))

    def validate_record(self, payload: dict[str, Any], record_id: str | None = None) -> ValidationResult:
        """
        Validate a record payload against all rules.

        Args:
            payload: Field name -> value mapping
            record_id: Identifier used in the result (defaults to transaction_id)

        Returns:
            ValidationResult containing pass/fail status and detailed results
        """
        passed_rules = []
        failed_rules = []
        warnings = []

        for rule_name, severity, validator in self.validators:
            value = payload.get(validator.field_name)

            try:
                validator.validate(value, payload)
                passed_rules.append(rule_name)
            except ValidationError:
                if severity == "error":
                    failed_rules.append(rule_name)
                else:
                    warnings.append(rule_name)

        if record_id is None:
            record_id = payload.get("transaction_id") or "unknown"

        return ValidationResult(
            record_id=str(record_id),
            passed=len(failed_rules) == 0,
            passed_rules=passed_rules,
            failed_rules=failed_rules,
            warnings=warnings,
        )

    @property
    def required_fields(self) -> list[str]:
        """Fields guarded by an error-severity required_field rule."""
        return [
            validator.field_name
            for _, severity, validator in self.validators
            if severity == "error" and validator.rule_type == "required_field"
        ]

    def get_rule_summary(self) -> dict[str, Any]:
        """Rule counts by type and by severity, logged when a pipeline starts."""
        return {
            "total_rules": len(self.validators),
            "rules_by_type": dict(Counter(validator.rule_type for _, _, validator in self.validators)),
            "rules_by_severity": dict(Counter(severity for _, severity, _ in self.validators)),
        }
