"""
Relationship and list-membership validators.

same, different and confirmed compare the field with sibling fields read
from the record, so they give the same answer whichever field the record
lists first. in, not_in and distinct compare against literal lists or
against the other elements of a wildcard collection.
"""

from collections import Counter
from typing import Any, ClassVar

from rulechain.core.errors import RuleParameterError
from rulechain.utils.coercion import to_string
from rulechain.utils.paths import MISSING, expand_wildcards, resolve_path

from .base_validator import BaseValidator

CONFIRMATION_SUFFIX = "_confirmation"


def loosely_equal(left: Any, right: Any) -> bool:
    """Compare scalars by their text form ("1" equals 1), collections structurally."""
    if isinstance(left, list | tuple | dict) or isinstance(right, list | tuple | dict):
        return left == right
    return to_string(left) == to_string(right)


class SameValidator(BaseValidator):
    rule_name = "same"
    default_message = "The :attribute and :other must match."
    needs_record = True
    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.other = self.parameters[0]

    def passes(self, attribute: str, value: Any) -> bool:
        found, other_value = self.lookup(self.other)
        return found and loosely_equal(value, other_value)

    def replacements(self) -> dict[str, str]:
        return {"other": self.other}


class DifferentValidator(BaseValidator):
    """Passes when every listed field is absent or holds a different value."""

    rule_name = "different"
    default_message = "The :attribute and :other must be different."
    needs_record = True
    min_parameters: ClassVar[int] = 1

    def passes(self, attribute: str, value: Any) -> bool:
        for name in self.parameters:
            found, other_value = self.lookup(name)
            if found and loosely_equal(value, other_value):
                return False
        return True

    def replacements(self) -> dict[str, str]:
        return {"other": ", ".join(self.parameters)}


class ConfirmedValidator(BaseValidator):
    """
    Requires a matching "<field>_confirmation" entry.

    confirmed:repeat_password names the confirmation field explicitly.
    """

    rule_name = "confirmed"
    default_message = "The :attribute confirmation does not match."
    needs_record = True

    def passes(self, attribute: str, value: Any) -> bool:
        name = self.parameters[0] if self.parameters else attribute + CONFIRMATION_SUFFIX
        found, other_value = self.lookup(name)
        return found and loosely_equal(value, other_value)


class InValidator(BaseValidator):
    """
    The value must be one of the listed values.

    For a list value every element must be listed.
    """

    rule_name = "in"
    default_message = "The selected :attribute is invalid."
    min_parameters: ClassVar[int] = 1

    def contains(self, value: Any) -> bool:
        if isinstance(value, list | tuple | set):
            return all(self.contains(item) for item in value)
        if isinstance(value, dict):
            return False
        return to_string(value) in self.parameters

    def passes(self, attribute: str, value: Any) -> bool:
        return self.contains(value)

    def replacements(self) -> dict[str, str]:
        return {"values": ", ".join(self.parameters)}


class NotInValidator(InValidator):
    rule_name = "not_in"

    def passes(self, attribute: str, value: Any) -> bool:
        if isinstance(value, list | tuple | set):
            return not any(to_string(item) in self.parameters for item in value)
        return not self.contains(value)


class DistinctValidator(BaseValidator):
    """
    Values must not repeat.

    On a list value the check runs over its elements. On a wildcard field
    ("tags.*") each element must not equal any sibling element. Modes:
    loose (default, by text form), strict (type and value) and ignore_case.
    """

    rule_name = "distinct"
    default_message = "The :attribute field has a duplicate value."
    needs_record = True

    MODES = ("strict", "ignore_case")

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.mode = self.parameters[0].lower() if self.parameters else "loose"
        if self.parameters and self.mode not in self.MODES:
            raise RuleParameterError(f"unknown distinct mode: {self.parameters[0]!r}", rule=self.rule_name)

    def key(self, value: Any) -> Any:
        if isinstance(value, dict | list):
            return repr(value)
        if self.mode == "strict":
            return (type(value).__name__, value)
        text = to_string(value)
        return text.lower() if self.mode == "ignore_case" else text

    def passes(self, attribute: str, value: Any) -> bool:
        if self.field_pattern and "*" in self.field_pattern:
            siblings = [
                resolve_path(self.record, path)
                for path, _ in expand_wildcards(self.record, self.field_pattern)
            ]
            counts = Counter(self.key(item) for item in siblings if item is not MISSING)
            return counts[self.key(value)] <= 1
        if isinstance(value, list | tuple):
            keys = [self.key(item) for item in value]
            return len(keys) == len(set(keys))
        return True


RELATIONSHIP_VALIDATORS: tuple[type[BaseValidator], ...] = (
    SameValidator,
    DifferentValidator,
    ConfirmedValidator,
    InValidator,
    NotInValidator,
    DistinctValidator,
)
