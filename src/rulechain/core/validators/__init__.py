"""
Validation rule implementations.

Provides the built-in constraint catalogue: presence, types, sizes, strings,
patterns, network addresses, relationships, dates and custom callables.
"""

from .base_validator import BaseValidator
from .custom_validator import CustomValidator, function_constructor
from .date_validator import DATE_VALIDATORS
from .marker_validator import MARKER_RULES, BailValidator, NullableValidator, SometimesValidator
from .network_validator import NETWORK_VALIDATORS
from .presence_validator import PRESENCE_VALIDATORS, RequiredValidator
from .regex_validator import NotRegexValidator, RegexValidator
from .relationship_validator import RELATIONSHIP_VALIDATORS
from .size_validator import SIZE_VALIDATORS
from .string_validator import STRING_VALIDATORS
from .type_validator import TYPE_VALIDATORS

BUILTIN_VALIDATORS: dict[str, type[BaseValidator]] = {
    validator.rule_name: validator
    for group in (
        PRESENCE_VALIDATORS,
        (BailValidator, SometimesValidator, NullableValidator),
        TYPE_VALIDATORS,
        SIZE_VALIDATORS,
        RELATIONSHIP_VALIDATORS,
        STRING_VALIDATORS,
        (RegexValidator, NotRegexValidator),
        NETWORK_VALIDATORS,
        DATE_VALIDATORS,
    )
    for validator in group
}

__all__ = [
    "BaseValidator",
    "CustomValidator",
    "RequiredValidator",
    "RegexValidator",
    "NotRegexValidator",
    "BUILTIN_VALIDATORS",
    "MARKER_RULES",
    "function_constructor",
]
