"""
Field rule interface shared by the completeness and coercion validators.
"""

from abc import ABC, abstractmethod
from typing import Any, NoReturn


class ValidationError(Exception):
    """A field failed one rule. Internal to rule evaluation, never a pipeline failure."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {message}")


class BaseValidator(ABC):
    """
    One rule applied to one field of a transaction record.

    Subclasses name their rule type and implement validate(); failures go
    through fail() so every message names the field it is about.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Args:
            field_name: Record field the rule reads
            parameters: Rule parameters from the policy file
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Identifier used in rule configurations (required_field, type_check, range)."""

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Check value, the record's field_name entry.

        Raises:
            ValidationError: If the rule fails
        """

    def fail(self, problem: str) -> NoReturn:
        """Raise a ValidationError for this field."""
        raise ValidationError(self.rule_type, self.field_name, f"{self.field_name} {problem}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
