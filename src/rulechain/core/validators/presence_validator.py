"""
Presence validators - required, present, missing, prohibited, accepted, declined.

All of these are implicit: they run even when the field is absent or None,
because absence is exactly what they judge. Conditional variants read a
trigger field from the record; when an "_if" trigger field is absent the
condition is not met and the rule passes.
"""

from typing import Any, ClassVar

from rulechain.utils.coercion import is_empty, to_bool, to_string

from .base_validator import BaseValidator

ACCEPTED_STRINGS = ("yes", "on", "1", "true")
DECLINED_STRINGS = ("no", "off", "0", "false")


def is_accepted(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ACCEPTED_STRINGS
    return to_bool(value) is True


def is_declined(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in DECLINED_STRINGS
    return to_bool(value) is False


class PresenceValidator(BaseValidator):
    """Base for implicit rules that inspect the record around the field."""

    implicit = True
    needs_record = True

    def exists(self, attribute: str) -> bool:
        found, _ = self.lookup(attribute)
        return found

    def filled(self, name: str) -> bool:
        """Whether another field is present with a non-empty value."""
        found, value = self.lookup(name)
        return found and not is_empty(value)


class RequiredValidator(PresenceValidator):
    """
    Validates that a field is present and not empty.

    Empty means None, a blank string, or an empty collection. 0 and False
    are values.
    """

    rule_name = "required"
    default_message = "The :attribute field is required."

    def passes(self, attribute: str, value: Any) -> bool:
        return not is_empty(value)


class ConditionalValidator(PresenceValidator):
    """
    Base for rules conditioned on another field's value (rule:other,v1,v2).

    Subclasses implement check(); condition() reports whether the trigger
    field holds one of the listed values, or None when it is absent.
    """

    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.other = self.parameters[0]
        self.values = [to_string(v) for v in self.parameters[1:]]

    def condition(self) -> bool | None:
        found, other_value = self.lookup(self.other)
        if not found:
            return None
        if isinstance(other_value, bool):
            return to_string(other_value) in self.values or (
                to_string(int(other_value)) in self.values
            )
        return to_string(other_value) in self.values

    def replacements(self) -> dict[str, str]:
        return {"other": self.other, "value": ", ".join(self.values), "values": ", ".join(self.values)}


class RequiredIfValidator(ConditionalValidator):
    rule_name = "required_if"
    default_message = "The :attribute field is required when :other is :value."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.condition():
            return not is_empty(value)
        return True


class RequiredUnlessValidator(ConditionalValidator):
    rule_name = "required_unless"
    default_message = "The :attribute field is required unless :other is in :values."

    def passes(self, attribute: str, value: Any) -> bool:
        # An absent trigger cannot hold an exempting value
        if self.condition():
            return True
        return not is_empty(value)


class FieldListValidator(PresenceValidator):
    """Base for rules that take a list of other field names (rule:f1,f2)."""

    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.fields = list(self.parameters)

    def any_filled(self) -> bool:
        return any(self.filled(name) for name in self.fields)

    def all_filled(self) -> bool:
        return all(self.filled(name) for name in self.fields)

    def replacements(self) -> dict[str, str]:
        return {"values": " / ".join(self.fields)}


class RequiredWithValidator(FieldListValidator):
    rule_name = "required_with"
    default_message = "The :attribute field is required when :values is present."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.any_filled():
            return not is_empty(value)
        return True


class RequiredWithAllValidator(FieldListValidator):
    rule_name = "required_with_all"
    default_message = "The :attribute field is required when :values are present."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.all_filled():
            return not is_empty(value)
        return True


class RequiredWithoutValidator(FieldListValidator):
    rule_name = "required_without"
    default_message = "The :attribute field is required when :values is not present."

    def passes(self, attribute: str, value: Any) -> bool:
        if not self.all_filled():
            return not is_empty(value)
        return True


class RequiredWithoutAllValidator(FieldListValidator):
    rule_name = "required_without_all"
    default_message = "The :attribute field is required when none of :values are present."

    def passes(self, attribute: str, value: Any) -> bool:
        if not self.any_filled():
            return not is_empty(value)
        return True


class TriggerValidator(PresenceValidator):
    """Base for rules conditioned on another field being accepted or declined."""

    min_parameters: ClassVar[int] = 1

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.other = self.parameters[0]

    def replacements(self) -> dict[str, str]:
        return {"other": self.other}


class RequiredIfAcceptedValidator(TriggerValidator):
    rule_name = "required_if_accepted"
    default_message = "The :attribute field is required when :other is accepted."

    def passes(self, attribute: str, value: Any) -> bool:
        found, other_value = self.lookup(self.other)
        if found and is_accepted(other_value):
            return not is_empty(value)
        return True


class RequiredIfDeclinedValidator(TriggerValidator):
    rule_name = "required_if_declined"
    default_message = "The :attribute field is required when :other is declined."

    def passes(self, attribute: str, value: Any) -> bool:
        found, other_value = self.lookup(self.other)
        if found and is_declined(other_value):
            return not is_empty(value)
        return True


class FilledValidator(PresenceValidator):
    """When the field is present it must not be empty."""

    rule_name = "filled"
    default_message = "The :attribute field must have a value when present."

    def passes(self, attribute: str, value: Any) -> bool:
        if not self.exists(attribute):
            return True
        return not is_empty(value)


class PresentValidator(PresenceValidator):
    """The field must exist in the record (it may be empty)."""

    rule_name = "present"
    default_message = "The :attribute field must be present."

    def passes(self, attribute: str, value: Any) -> bool:
        return self.exists(attribute)


class PresentIfValidator(ConditionalValidator):
    rule_name = "present_if"
    default_message = "The :attribute field must be present when :other is :value."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.condition():
            return self.exists(attribute)
        return True


class PresentUnlessValidator(ConditionalValidator):
    rule_name = "present_unless"
    default_message = "The :attribute field must be present unless :other is :value."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.condition():
            return True
        return self.exists(attribute)


class PresentWithValidator(FieldListValidator):
    rule_name = "present_with"
    default_message = "The :attribute field must be present when :values is present."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.any_filled():
            return self.exists(attribute)
        return True


class PresentWithAllValidator(FieldListValidator):
    rule_name = "present_with_all"
    default_message = "The :attribute field must be present when :values are present."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.all_filled():
            return self.exists(attribute)
        return True


class MissingValidator(PresenceValidator):
    """The field must not exist in the record at all."""

    rule_name = "missing"
    default_message = "The :attribute field must be missing."

    def passes(self, attribute: str, value: Any) -> bool:
        return not self.exists(attribute)


class MissingIfValidator(ConditionalValidator):
    rule_name = "missing_if"
    default_message = "The :attribute field must be missing when :other is :value."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.condition():
            return not self.exists(attribute)
        return True


class MissingUnlessValidator(ConditionalValidator):
    rule_name = "missing_unless"
    default_message = "The :attribute field must be missing unless :other is :value."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.condition():
            return True
        return not self.exists(attribute)


class MissingWithValidator(FieldListValidator):
    rule_name = "missing_with"
    default_message = "The :attribute field must be missing when :values is present."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.any_filled():
            return not self.exists(attribute)
        return True


class MissingWithAllValidator(FieldListValidator):
    rule_name = "missing_with_all"
    default_message = "The :attribute field must be missing when :values are present."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.all_filled():
            return not self.exists(attribute)
        return True


class ProhibitedValidator(PresenceValidator):
    """The field must be absent or empty."""

    rule_name = "prohibited"
    default_message = "The :attribute field is prohibited."

    def passes(self, attribute: str, value: Any) -> bool:
        return is_empty(value)


class ProhibitedIfValidator(ConditionalValidator):
    rule_name = "prohibited_if"
    default_message = "The :attribute field is prohibited when :other is :value."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.condition():
            return is_empty(value)
        return True


class ProhibitedUnlessValidator(ConditionalValidator):
    rule_name = "prohibited_unless"
    default_message = "The :attribute field is prohibited unless :other is in :values."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.condition():
            return True
        return is_empty(value)


class ProhibitsValidator(FieldListValidator):
    """When this field is filled, the listed fields must be absent or empty."""

    rule_name = "prohibits"
    default_message = "The :attribute field prohibits :values from being present."

    def passes(self, attribute: str, value: Any) -> bool:
        if is_empty(value):
            return True
        return not self.any_filled()


class AcceptedValidator(PresenceValidator):
    """Value must be "yes", "on", "1", "true", 1 or True."""

    rule_name = "accepted"
    default_message = "The :attribute must be accepted."

    def passes(self, attribute: str, value: Any) -> bool:
        return is_accepted(value)


class AcceptedIfValidator(ConditionalValidator):
    rule_name = "accepted_if"
    default_message = "The :attribute must be accepted when :other is :value."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.condition():
            return is_accepted(value)
        return True


class DeclinedValidator(PresenceValidator):
    """Value must be "no", "off", "0", "false", 0 or False."""

    rule_name = "declined"
    default_message = "The :attribute must be declined."

    def passes(self, attribute: str, value: Any) -> bool:
        return is_declined(value)


class DeclinedIfValidator(ConditionalValidator):
    rule_name = "declined_if"
    default_message = "The :attribute must be declined when :other is :value."

    def passes(self, attribute: str, value: Any) -> bool:
        if self.condition():
            return is_declined(value)
        return True


PRESENCE_VALIDATORS: tuple[type[BaseValidator], ...] = (
    RequiredValidator,
    RequiredIfValidator,
    RequiredUnlessValidator,
    RequiredWithValidator,
    RequiredWithAllValidator,
    RequiredWithoutValidator,
    RequiredWithoutAllValidator,
    RequiredIfAcceptedValidator,
    RequiredIfDeclinedValidator,
    FilledValidator,
    PresentValidator,
    PresentIfValidator,
    PresentUnlessValidator,
    PresentWithValidator,
    PresentWithAllValidator,
    MissingValidator,
    MissingIfValidator,
    MissingUnlessValidator,
    MissingWithValidator,
    MissingWithAllValidator,
    ProhibitedValidator,
    ProhibitedIfValidator,
    ProhibitedUnlessValidator,
    ProhibitsValidator,
    AcceptedValidator,
    AcceptedIfValidator,
    DeclinedValidator,
    DeclinedIfValidator,
)
