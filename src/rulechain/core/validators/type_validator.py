"""
Type validators - string, integer, numeric, boolean, array, json and the digit family.

Values are checked as they arrive; nothing is coerced in the record. Text
that reads as a number ("42", "-3.5") satisfies numeric and integer rules,
because records loaded from forms, CSV or query strings carry numbers as text.
"""

import json
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

from rulechain.core.errors import RuleParameterError
from rulechain.core.models.field_context import INTEGER, NUMERIC
from rulechain.utils.coercion import format_number, is_integer, is_number, is_numeric, to_decimal, to_string

from .base_validator import BaseValidator

BOOLEAN_STRINGS = ("true", "false", "1", "0")


class StringValidator(BaseValidator):
    rule_name = "string"
    default_message = "The :attribute must be a string."

    def passes(self, attribute: str, value: Any) -> bool:
        return isinstance(value, str)


class IntegerValidator(BaseValidator):
    """
    Validates that a value is an integer.

    Accepts native ints, integral floats (2.0) and digit strings ("-12").
    Booleans are rejected.
    """

    rule_name = "integer"
    default_message = "The :attribute must be an integer."
    establishes = (INTEGER,)

    def passes(self, attribute: str, value: Any) -> bool:
        return is_integer(value)


class IntValidator(IntegerValidator):
    rule_name = "int"


class NumericValidator(BaseValidator):
    rule_name = "numeric"
    default_message = "The :attribute must be a number."
    establishes = (NUMERIC,)

    def passes(self, attribute: str, value: Any) -> bool:
        return is_numeric(value)


class BooleanValidator(BaseValidator):
    """
    Validates that a value can be read as a boolean.

    Default mode accepts True, False, 1, 0 and the strings "true", "false",
    "1", "0". boolean:strict accepts only True and False.
    """

    rule_name = "boolean"
    default_message = "The :attribute field must be true or false."

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.strict = bool(self.parameters) and self.parameters[0].lower() == "strict"

    def passes(self, attribute: str, value: Any) -> bool:
        if isinstance(value, bool):
            return True
        if self.strict:
            return False
        if is_number(value):
            return value in (0, 1)
        if isinstance(value, str):
            return value.strip().lower() in BOOLEAN_STRINGS
        return False


class ArrayValidator(BaseValidator):
    """
    Validates that a value is a list or mapping.

    array:key1,key2 additionally requires a mapping whose keys are all among
    the listed ones.
    """

    rule_name = "array"
    default_message = "The :attribute must be an array."

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.allowed_keys = list(self.parameters)

    def passes(self, attribute: str, value: Any) -> bool:
        if not self.allowed_keys:
            return isinstance(value, list | tuple | dict)
        if not isinstance(value, dict):
            return False
        return all(str(key) in self.allowed_keys for key in value)

    def message(self) -> str:
        if self.allowed_keys:
            return "The :attribute must be an array with allowed keys: :values."
        return self.default_message

    def replacements(self) -> dict[str, str]:
        return {"values": ", ".join(self.allowed_keys)}


class ListValidator(BaseValidator):
    rule_name = "list"
    default_message = "The :attribute must be a list."

    def passes(self, attribute: str, value: Any) -> bool:
        return isinstance(value, list | tuple)


class JsonValidator(BaseValidator):
    rule_name = "json"
    default_message = "The :attribute must be a valid JSON string."

    def passes(self, attribute: str, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            json.loads(value)
        except ValueError:
            return False
        return True


def _fraction_digits(value: Any) -> int | None:
    text = to_string(value)
    if not is_numeric(text):
        return None
    _, _, fraction = text.partition(".")
    return len(fraction)


class DecimalValidator(BaseValidator):
    """
    Validates the number of decimal places: decimal:2 or decimal:2,4.
    """

    rule_name = "decimal"
    default_message = "The :attribute must have :decimal decimal places."
    establishes = (NUMERIC,)
    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.min_places = self._places(0)
        self.max_places = self._places(1) if len(self.parameters) > 1 else self.min_places
        if self.max_places < self.min_places:
            raise RuleParameterError("decimal maximum is below its minimum", rule=self.rule_name)

    def _places(self, index: int) -> int:
        return self.parse_count(self.parameters[index], self.rule_name, "decimal places")

    def passes(self, attribute: str, value: Any) -> bool:
        places = _fraction_digits(value)
        if places is None:
            return False
        return self.min_places <= places <= self.max_places

    def replacements(self) -> dict[str, str]:
        if self.min_places == self.max_places:
            return {"decimal": str(self.min_places)}
        return {"decimal": f"{self.min_places}-{self.max_places}"}


def _digit_text(value: Any) -> str | None:
    """Digits of an integer value, or None when it is not made of digits only."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        value = str(value)
    if is_number(value) and is_integer(value):
        value = str(int(value))
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return value
    return None


class DigitsValidator(BaseValidator):
    """
    Validates that a value is made of digits only.

    digits:4 requires exactly four digits; bare digits accepts any length.
    """

    rule_name = "digits"
    default_message = "The :attribute must be :digits digits."
    establishes = (NUMERIC,)

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.length = self.parse_count(self.parameters[0], self.rule_name, "length") if self.parameters else None

    def passes(self, attribute: str, value: Any) -> bool:
        digits = _digit_text(value)
        if digits is None:
            return False
        return self.length is None or len(digits) == self.length

    def message(self) -> str:
        if self.length is None:
            return "The :attribute must contain only digits."
        return self.default_message

    def replacements(self) -> dict[str, str]:
        return {"digits": "" if self.length is None else str(self.length)}


class DigitsBetweenValidator(BaseValidator):
    rule_name = "digits_between"
    default_message = "The :attribute must be between :min and :max digits."
    establishes = (NUMERIC,)
    min_parameters: ClassVar[int] = 2

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.min_length = self.parse_count(self.parameters[0], self.rule_name, "minimum")
        self.max_length = self.parse_count(self.parameters[1], self.rule_name, "maximum")

    def passes(self, attribute: str, value: Any) -> bool:
        digits = _digit_text(value)
        return digits is not None and self.min_length <= len(digits) <= self.max_length

    def replacements(self) -> dict[str, str]:
        return {"min": str(self.min_length), "max": str(self.max_length)}


class MinDigitsValidator(BaseValidator):
    rule_name = "min_digits"
    default_message = "The :attribute must have at least :min digits."
    establishes = (NUMERIC,)
    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.min_length = self.parse_count(self.parameters[0], self.rule_name, "minimum")

    def passes(self, attribute: str, value: Any) -> bool:
        digits = _digit_text(value)
        return digits is not None and len(digits) >= self.min_length

    def replacements(self) -> dict[str, str]:
        return {"min": str(self.min_length)}


class MaxDigitsValidator(BaseValidator):
    rule_name = "max_digits"
    default_message = "The :attribute must not have more than :max digits."
    establishes = (NUMERIC,)
    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.max_length = self.parse_count(self.parameters[0], self.rule_name, "maximum")

    def passes(self, attribute: str, value: Any) -> bool:
        digits = _digit_text(value)
        return digits is not None and len(digits) <= self.max_length

    def replacements(self) -> dict[str, str]:
        return {"max": str(self.max_length)}


class MultipleOfValidator(BaseValidator):
    rule_name = "multiple_of"
    default_message = "The :attribute must be a multiple of :value."
    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        try:
            self.factor = Decimal(self.parameters[0])
        except InvalidOperation:
            raise RuleParameterError(f"invalid argument for multiple_of: {self.parameters[0]!r}", rule=self.rule_name)

    def passes(self, attribute: str, value: Any) -> bool:
        number = to_decimal(value)
        if number is None or self.factor == 0:
            return False
        return number % self.factor == 0

    def replacements(self) -> dict[str, str]:
        return {"value": format_number(float(self.factor))}


TYPE_VALIDATORS: tuple[type[BaseValidator], ...] = (
    StringValidator,
    IntegerValidator,
    IntValidator,
    NumericValidator,
    BooleanValidator,
    ArrayValidator,
    ListValidator,
    JsonValidator,
    DecimalValidator,
    DigitsValidator,
    DigitsBetweenValidator,
    MinDigitsValidator,
    MaxDigitsValidator,
    MultipleOfValidator,
)
