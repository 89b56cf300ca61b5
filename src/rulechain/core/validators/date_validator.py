"""
Date validators - date, date_format and the after/before comparisons.
"""

from abc import abstractmethod
from datetime import datetime
from typing import Any, ClassVar

from rulechain.utils.dates import parse_date, parse_with_format

from .base_validator import BaseValidator


class DateValidator(BaseValidator):
    """
    Validates that a value is a recognizable date.

    Extra accepted formats come from the registry's "date_formats" config.
    """

    rule_name = "date"
    default_message = "The :attribute is not a valid date."

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.formats = tuple(self.config.get("date_formats", ()))

    def passes(self, attribute: str, value: Any) -> bool:
        return parse_date(value, self.formats) is not None


class DateFormatValidator(BaseValidator):
    """
    Validates text against one or more explicit formats.

    Formats use date letters ("Y-m-d H:i:s") or strptime directives
    ("%Y-%m-%d"); the value must match at least one of them.
    """

    rule_name = "date_format"
    default_message = "The :attribute does not match the format :format."
    min_parameters: ClassVar[int] = 1

    def passes(self, attribute: str, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return any(parse_with_format(value, fmt) is not None for fmt in self.parameters)

    def replacements(self) -> dict[str, str]:
        return {"format": " or ".join(self.parameters)}


class DateComparisonValidator(BaseValidator):
    """
    Base for after, after_or_equal, before, before_or_equal and date_equals.

    The parameter names another field or is a date literal ("2024-01-01",
    "today", "tomorrow", "yesterday", "now"). When it is neither, there is
    nothing to compare against and the rule passes.
    """

    needs_record = True
    needs_session = True
    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.operand = self.parameters[0]
        self.formats = tuple(self.config.get("date_formats", ()))

    def resolve_operand(self) -> datetime | None:
        if self.session is not None:
            return self.session.resolver.date_operand(self, self.operand, self.formats)
        found, other = self.lookup(self.operand)
        if found and other is not None:
            return parse_date(other, self.formats)
        return parse_date(self.operand, self.formats)

    def passes(self, attribute: str, value: Any) -> bool:
        moment = parse_date(value, self.formats)
        if moment is None:
            return False
        reference = self.resolve_operand()
        if reference is None:
            return True
        return self.compare(moment, reference)

    @abstractmethod
    def compare(self, moment: datetime, reference: datetime) -> bool:
        """Compare the parsed date with the reference date."""

    def replacements(self) -> dict[str, str]:
        return {"date": self.operand}


class AfterValidator(DateComparisonValidator):
    rule_name = "after"
    default_message = "The :attribute must be a date after :date."

    def compare(self, moment: datetime, reference: datetime) -> bool:
        return moment > reference


class AfterOrEqualValidator(DateComparisonValidator):
    rule_name = "after_or_equal"
    default_message = "The :attribute must be a date after or equal to :date."

    def compare(self, moment: datetime, reference: datetime) -> bool:
        return moment >= reference


class BeforeValidator(DateComparisonValidator):
    rule_name = "before"
    default_message = "The :attribute must be a date before :date."

    def compare(self, moment: datetime, reference: datetime) -> bool:
        return moment < reference


class BeforeOrEqualValidator(DateComparisonValidator):
    rule_name = "before_or_equal"
    default_message = "The :attribute must be a date before or equal to :date."

    def compare(self, moment: datetime, reference: datetime) -> bool:
        return moment <= reference


class DateEqualsValidator(DateComparisonValidator):
    rule_name = "date_equals"
    default_message = "The :attribute must be a date equal to :date."

    def compare(self, moment: datetime, reference: datetime) -> bool:
        return moment == reference


DATE_VALIDATORS: tuple[type[BaseValidator], ...] = (
    DateValidator,
    DateFormatValidator,
    AfterValidator,
    AfterOrEqualValidator,
    BeforeValidator,
    BeforeOrEqualValidator,
    DateEqualsValidator,
)
