"""
Size validators - size, min, max, between and the gt/gte/lt/lte comparisons.

What "size" means depends on the value and on the rest of the chain: the
magnitude of a number, the element count of a list or mapping, and for text
either its numeric magnitude (when the chain is numeric) or its length.
"""

from abc import abstractmethod
from typing import Any, ClassVar

from rulechain.core.errors import RuleParameterError
from rulechain.utils.coercion import format_number, is_number, is_numeric, to_number

from .base_validator import BaseValidator

NUMERIC_KIND = "numeric"
STRING_KIND = "string"
ARRAY_KIND = "array"


class SizeRuleValidator(BaseValidator):
    """
    Base for size-consuming rules.

    Subclasses provide templates per value kind; the kind of the last value
    checked picks the message ("at least 5" vs "at least 5 characters").
    """

    needs_context = True
    templates: ClassVar[dict[str, str]] = {}

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.kind = NUMERIC_KIND

    def measure(self, value: Any) -> float | None:
        size = self.size_of(value)
        self.kind = self.kind_of(value)
        return size

    def kind_of(self, value: Any) -> str:
        if isinstance(value, list | tuple | dict | set | frozenset):
            return ARRAY_KIND
        if isinstance(value, str) and not (self.context is not None and self.context.is_numeric):
            return STRING_KIND
        return NUMERIC_KIND

    def message(self) -> str:
        return self.templates.get(self.kind, self.default_message)


class SizeValidator(SizeRuleValidator):
    rule_name = "size"
    default_message = "The :attribute must be :size."
    templates = {
        NUMERIC_KIND: "The :attribute must be :size.",
        STRING_KIND: "The :attribute must be :size characters.",
        ARRAY_KIND: "The :attribute must contain :size items.",
    }
    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.size = self.parse_number(self.parameters[0], self.rule_name)

    def passes(self, attribute: str, value: Any) -> bool:
        size = self.measure(value)
        return size is not None and size == self.size

    def replacements(self) -> dict[str, str]:
        return {"size": format_number(self.size)}


class MinValidator(SizeRuleValidator):
    rule_name = "min"
    default_message = "The :attribute must be at least :min."
    templates = {
        NUMERIC_KIND: "The :attribute must be at least :min.",
        STRING_KIND: "The :attribute must be at least :min characters.",
        ARRAY_KIND: "The :attribute must have at least :min items.",
    }
    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.minimum = self.parse_number(self.parameters[0], self.rule_name)

    def passes(self, attribute: str, value: Any) -> bool:
        size = self.measure(value)
        return size is not None and size >= self.minimum

    def replacements(self) -> dict[str, str]:
        return {"min": format_number(self.minimum)}


class MaxValidator(SizeRuleValidator):
    rule_name = "max"
    default_message = "The :attribute may not be greater than :max."
    templates = {
        NUMERIC_KIND: "The :attribute may not be greater than :max.",
        STRING_KIND: "The :attribute may not be greater than :max characters.",
        ARRAY_KIND: "The :attribute may not have more than :max items.",
    }
    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.maximum = self.parse_number(self.parameters[0], self.rule_name)

    def passes(self, attribute: str, value: Any) -> bool:
        size = self.measure(value)
        return size is not None and size <= self.maximum

    def replacements(self) -> dict[str, str]:
        return {"max": format_number(self.maximum)}


class BetweenValidator(SizeRuleValidator):
    rule_name = "between"
    default_message = "The :attribute must be between :min and :max."
    templates = {
        NUMERIC_KIND: "The :attribute must be between :min and :max.",
        STRING_KIND: "The :attribute must be between :min and :max characters.",
        ARRAY_KIND: "The :attribute must have between :min and :max items.",
    }
    min_parameters: ClassVar[int] = 2

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.minimum = self.parse_number(self.parameters[0], self.rule_name, "minimum")
        self.maximum = self.parse_number(self.parameters[1], self.rule_name, "maximum")
        if self.minimum > self.maximum:
            raise RuleParameterError("between minimum is greater than its maximum", rule=self.rule_name)

    def passes(self, attribute: str, value: Any) -> bool:
        size = self.measure(value)
        return size is not None and self.minimum <= size <= self.maximum

    def replacements(self) -> dict[str, str]:
        return {"min": format_number(self.minimum), "max": format_number(self.maximum)}


class ComparisonValidator(SizeRuleValidator):
    """
    Base for gt/gte/lt/lte.

    The parameter is another field (compared by its own size) or a numeric
    literal. A token that is neither makes the comparison fail.
    """

    needs_record = True
    needs_session = True
    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.operand = self.parameters[0]

    def resolve_operand(self) -> float | None:
        if self.session is not None:
            return self.session.resolver.size_operand(self, self.operand)
        found, other = self.lookup(self.operand)
        if found:
            return self.size_of(other)
        return to_number(self.operand) if is_numeric(self.operand) else None

    def passes(self, attribute: str, value: Any) -> bool:
        size = self.measure(value)
        operand = self.resolve_operand()
        if size is None or operand is None:
            return False
        return self.compare(size, operand)

    @abstractmethod
    def compare(self, size: float, operand: float) -> bool:
        """Compare the measured value with the resolved operand."""

    def replacements(self) -> dict[str, str]:
        found, other = self.lookup(self.operand)
        if found and is_number(other):
            shown = format_number(other)
        else:
            shown = self.operand
        return {"value": shown, "other": self.operand}


class GtValidator(ComparisonValidator):
    rule_name = "gt"
    default_message = "The :attribute must be greater than :value."
    templates = {
        NUMERIC_KIND: "The :attribute must be greater than :value.",
        STRING_KIND: "The :attribute must be greater than :value characters.",
        ARRAY_KIND: "The :attribute must have more than :value items.",
    }

    def compare(self, size: float, operand: float) -> bool:
        return size > operand


class GteValidator(ComparisonValidator):
    rule_name = "gte"
    default_message = "The :attribute must be greater than or equal to :value."
    templates = {
        NUMERIC_KIND: "The :attribute must be greater than or equal to :value.",
        STRING_KIND: "The :attribute must be greater than or equal to :value characters.",
        ARRAY_KIND: "The :attribute must have :value items or more.",
    }

    def compare(self, size: float, operand: float) -> bool:
        return size >= operand


class LtValidator(ComparisonValidator):
    rule_name = "lt"
    default_message = "The :attribute must be less than :value."
    templates = {
        NUMERIC_KIND: "The :attribute must be less than :value.",
        STRING_KIND: "The :attribute must be less than :value characters.",
        ARRAY_KIND: "The :attribute must have less than :value items.",
    }

    def compare(self, size: float, operand: float) -> bool:
        return size < operand


class LteValidator(ComparisonValidator):
    rule_name = "lte"
    default_message = "The :attribute must be less than or equal to :value."
    templates = {
        NUMERIC_KIND: "The :attribute must be less than or equal to :value.",
        STRING_KIND: "The :attribute must be less than or equal to :value characters.",
        ARRAY_KIND: "The :attribute must not have more than :value items.",
    }

    def compare(self, size: float, operand: float) -> bool:
        return size <= operand


SIZE_VALIDATORS: tuple[type[BaseValidator], ...] = (
    SizeValidator,
    MinValidator,
    MaxValidator,
    BetweenValidator,
    GtValidator,
    GteValidator,
    LtValidator,
    LteValidator,
)
