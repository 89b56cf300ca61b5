"""
RegexValidator - validates field values against a regular expression pattern.
"""

import re
from re import Pattern
from typing import Any, ClassVar

from rulechain.core.errors import RuleParameterError
from rulechain.utils.coercion import is_number

from .base_validator import BaseValidator


class RegexValidator(BaseValidator):
    """
    Validates that a field value matches a regular expression pattern.

    The parser hands over the pattern with its delimiters already stripped
    and any trailing flags turned into an inline group, so "/^[a-z]+$/i"
    arrives as "(?i)^[a-z]+$". The pattern is searched anywhere in the
    text; anchor it to match the whole value.

    Parameters:
    - pattern: Regular expression pattern (string or compiled Pattern)
    """

    rule_name = "regex"
    default_message = "The :attribute format is invalid."
    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)

        pattern = self.parameters[0]
        if not pattern:
            raise RuleParameterError(f"{self.rule_name} rule requires a pattern", rule=self.rule_name)

        # Compile pattern
        try:
            if isinstance(pattern, Pattern):
                self.pattern: Pattern = pattern
            else:
                self.pattern = re.compile(pattern)
        except re.error as e:
            raise RuleParameterError(f"invalid regex pattern: {e}", rule=self.rule_name)

    def matches(self, value: Any) -> bool | None:
        """Search the pattern in the value's text, or None for values that have no text form."""
        if isinstance(value, str):
            text = value
        elif is_number(value):
            text = str(value)
        else:
            return None
        return self.pattern.search(text) is not None

    def passes(self, attribute: str, value: Any) -> bool:
        return self.matches(value) is True


class NotRegexValidator(RegexValidator):
    """Validates that a field value does not match a regular expression pattern."""

    rule_name = "not_regex"

    def passes(self, attribute: str, value: Any) -> bool:
        return self.matches(value) is False
