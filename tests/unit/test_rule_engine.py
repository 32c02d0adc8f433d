"""
Unit tests for the rule engine and the policy configuration loader.
"""

from decimal import Decimal
from pathlib import Path

import pytest

from txn_cleaning.core.rules import (
    REQUIRED_OUTPUT_FIELDS,
    PolicyConfigLoader,
    RuleConfigBuilder,
    RuleEngine,
    default_completeness_rules,
)

SHIPPED_POLICY = Path(__file__).resolve().parents[2] / "config" / "cleaning_policy.yaml"


def _complete_payload(**overrides):
    payload = {name: "x" for name in REQUIRED_OUTPUT_FIELDS}
    payload.update(overrides)
    return payload


@pytest.mark.unit
class TestRuleEngine:
    """Tests for RuleEngine"""

    def test_defaults_guard_required_fields(self):
        engine = RuleEngine.with_defaults()
        assert engine.required_fields == list(REQUIRED_OUTPUT_FIELDS)
        assert "main_category" in engine.required_fields

    def test_complete_payload_passes(self):
        result = RuleEngine.with_defaults().validate_record(_complete_payload(transaction_id="T1"))
        assert result.passed
        assert result.record_id == "T1"
        assert len(result.passed_rules) == len(REQUIRED_OUTPUT_FIELDS)

    def test_failures_are_collected(self):
        result = RuleEngine.with_defaults().validate_record(
            _complete_payload(unit_price=None, quantity=None), record_id="T9"
        )
        assert not result.passed
        assert result.failed_rules == ["unit_price_required", "quantity_required"]
        assert result.record_id == "T9"

    def test_unknown_record_id(self):
        result = RuleEngine.with_defaults().validate_record(_complete_payload(transaction_id=None))
        assert result.record_id == "unknown"

    def test_warning_severity_does_not_fail(self):
        rules = [{
            "rule_name": "quantity_range",
            "rule_type": "range",
            "field_name": "quantity",
            "parameters": {"max": 100},
            "severity": "warning",
        }]
        result = RuleEngine(rules).validate_record({"quantity": 500})
        assert result.passed
        assert result.warnings == ["quantity_range"]

    def test_disabled_rules_are_skipped(self):
        rules = default_completeness_rules()
        rules[0]["enabled"] = False
        engine = RuleEngine(rules)
        assert "transaction_id" not in engine.required_fields

    def test_unknown_rule_type(self):
        with pytest.raises(ValueError, match="Unknown rule type"):
            RuleEngine([{"rule_name": "x", "rule_type": "regex", "field_name": "city"}])

    def test_bad_parameters(self):
        with pytest.raises(ValueError, match="quantity_range"):
            RuleEngine([{"rule_name": "quantity_range", "rule_type": "range", "field_name": "quantity"}])

    def test_rule_summary(self):
        rules = RuleConfigBuilder().add_required_field("unit_price").build() + [
            {"rule_name": "unit_price_range", "rule_type": "range", "field_name": "unit_price",
             "parameters": {"min_exclusive": 0}},
        ]
        summary = RuleEngine(rules).get_rule_summary()
        assert summary["total_rules"] == 2
        assert summary["rules_by_type"] == {"required_field": 1, "range": 1}
        assert summary["rules_by_severity"] == {"error": 2}


@pytest.mark.unit
class TestPolicyConfigLoader:
    """Tests for PolicyConfigLoader"""

    def test_shipped_config(self):
        loader = PolicyConfigLoader(SHIPPED_POLICY)
        policy = loader.load_policy()
        assert policy.price_problem_threshold == Decimal("1.00")
        assert policy.valid_customer_types == ["B2B", "B2C"]
        assert [rule["rule_name"] for rule in loader.load_rules()] == [
            f"{name}_required" for name in REQUIRED_OUTPUT_FIELDS
        ]

    def test_policy_overrides(self, tmp_path):
        path = tmp_path / "policy.yaml"
        path.write_text(
            "policy:\n"
            "  category_delimiter: '/'\n"
            "  drop_price_problems: true\n"
            "  valid_customer_types: [b2b, b2c, b2g]\n"
        )
        policy = PolicyConfigLoader(path).load_policy()
        assert policy.category_delimiter == "/"
        assert policy.drop_price_problems is True
        assert policy.valid_customer_types == ["B2B", "B2C", "B2G"]

    def test_missing_sections_use_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        loader = PolicyConfigLoader(path)
        assert loader.load_policy().category_delimiter == ">"
        assert loader.load_rules() == default_completeness_rules()

    def test_rule_parsing(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(
            "rules:\n"
            "  quantity:\n"
            "    - type: required_field\n"
            "    - type: range\n"
            "      severity: warning\n"
            "      params:\n"
            "        max: 1000\n"
        )
        rules = PolicyConfigLoader(path).load_rules()
        assert [rule["rule_name"] for rule in rules] == ["quantity_required", "quantity_range_1"]
        assert rules[1]["parameters"] == {"max": 1000}
        assert rules[1]["severity"] == "warning"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PolicyConfigLoader(tmp_path / "nope.yaml")

    @pytest.mark.parametrize("content", [
        "- a\n- b\n",
        "policy: [1, 2]\n",
        "policy:\n  price_problem_threshold: -1\n",
        "rules: [1]\n",
        "rules:\n  quantity: required\n",
        "rules:\n  quantity:\n    - params: {}\n",
        "rules:\n  quantity:\n    - type: required_field\n      severity: fatal\n",
    ])
    def test_malformed_config(self, tmp_path, content):
        path = tmp_path / "bad.yaml"
        path.write_text(content)
        loader = PolicyConfigLoader(path)
        with pytest.raises(ValueError):
            loader.load_policy()
            loader.load_rules()
