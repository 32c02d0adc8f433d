"""
RangeValidator - checks a numeric value against inclusive or exclusive bounds.
"""

import operator
from decimal import Decimal
from typing import Any

from .base_validator import BaseValidator

# parameter -> (comparison that fails the rule, message template)
BOUNDS = {
    "min": (operator.lt, "is {value}, below the minimum {bound}"),
    "min_exclusive": (operator.le, "is {value}, must be greater than {bound}"),
    "max": (operator.gt, "is {value}, above the maximum {bound}"),
    "max_exclusive": (operator.ge, "is {value}, must be less than {bound}"),
}


class RangeValidator(BaseValidator):
    """
    Validates that a numeric field lies within the configured bounds.

    Parameters: any of ``min``, ``max`` (inclusive) and ``min_exclusive``,
    ``max_exclusive``. Prices, quantities and totals use ``min_exclusive: 0``.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.bounds = {
            name: self.parameters[name]
            for name in BOUNDS
            if self.parameters.get(name) is not None
        }
        if not self.bounds:
            raise ValueError(f"RangeValidator requires at least one of: {', '.join(BOUNDS)}")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Check every configured bound.

        Raises:
            ValidationError: If the value is not numeric or is out of range
        """
        # None is the required_field validator's concern
        if value is None:
            return

        if isinstance(value, bool) or not isinstance(value, int | float | Decimal):
            self.fail(f"must be numeric, got {type(value).__name__}")

        for name, bound in self.bounds.items():
            fails, message = BOUNDS[name]
            if fails(value, bound):
                self.fail(message.format(value=value, bound=bound))

    @property
    def rule_type(self) -> str:
        return "range"
