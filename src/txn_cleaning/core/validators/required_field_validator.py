"""
RequiredFieldValidator - the completeness check behind every drop reason.
"""

from typing import Any

from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Fails when a field a cleaned record must carry has no value.

    Absent means missing from the record, None, or (unless
    ``allow_empty_string`` is set) text that is blank after trimming.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.allow_empty_string = bool(self.parameters.get("allow_empty_string", False))

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if self.field_name not in record:
            self.fail("is not a field of the record")
        if value is None:
            self.fail("is absent")
        if isinstance(value, str) and not value.strip() and not self.allow_empty_string:
            self.fail("is blank")

    @property
    def rule_type(self) -> str:
        return "required_field"
