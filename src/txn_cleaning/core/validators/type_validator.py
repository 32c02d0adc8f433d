"""
TypeValidator - validates and coerces raw field values to a target type.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from .base_validator import BaseValidator


class TypeValidator(BaseValidator):
    """
    Validates that a field matches, or can be coerced to, the expected type.

    Raw CSV values arrive as text or as whatever the reader inferred, so
    coercion is on by default (e.g., "99.99" -> Decimal("99.99")).

    Supported types:
    - decimal, integer, string
    - Aliases: "float", "double" (decimal), "int" (integer), "str" (string)
    """

    TYPE_MAPPING = {
        "decimal": Decimal,
        "float": Decimal,
        "double": Decimal,
        "integer": int,
        "int": int,
        "string": str,
        "str": str,
    }

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        expected_type = self.parameters.get("expected_type")
        if not expected_type:
            raise ValueError("TypeValidator requires 'expected_type' parameter")

        self.expected_type = self.TYPE_MAPPING.get(str(expected_type).lower())
        if not self.expected_type:
            raise ValueError(f"Unsupported type: {expected_type}")

        self.coerce_values = self.parameters.get("coerce", True)

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate that the value matches the expected type.

        Args:
            value: The field value to validate
            record: The entire record

        Raises:
            ValidationError: If type validation fails
        """
        self.coerce(value)

    def coerce(self, value: Any) -> Any:
        """
        Return the value converted to the expected type.

        None passes through untouched (absent stays absent).

        Raises:
            ValidationError: If the value cannot be coerced
        """
        if value is None:
            return None

        # bool is an int subclass but never a valid amount or count
        if isinstance(value, bool):
            self.fail(f"must be {self.expected_type.__name__}, got bool")

        if isinstance(value, self.expected_type) and self.expected_type is not Decimal:
            return value

        if not self.coerce_values:
            if isinstance(value, self.expected_type):
                return value
            self.fail(f"must be {self.expected_type.__name__}, got {type(value).__name__}")

        try:
            return self._coerce_type(value)
        except (ValueError, TypeError, InvalidOperation) as e:
            self.fail(f"cannot be read as {self.expected_type.__name__}: {e}")

    def _coerce_type(self, value: Any) -> Any:
        if self.expected_type is str:
            return str(value)

        # str() keeps the shortest float repr, so 10.1 becomes Decimal("10.1")
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        if not number.is_finite():
            raise ValueError(f"non-finite value {value!r}")

        if self.expected_type is int:
            if number != number.to_integral_value():
                raise ValueError(f"{value!r} is not a whole number")
            return int(number)

        return number

    @property
    def rule_type(self) -> str:
        return "type_check"
