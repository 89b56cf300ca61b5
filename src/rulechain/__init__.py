"""
rulechain: declarative validation of records against pipe-delimited rule chains.

Example:
    from rulechain import make

    session = make({"age": "17"}, {"age": "required|integer|min:18"})
    session.fails()                  # True
    session.errors().first("age")    # "The age must be at least 18."
"""

from rulechain.core.errors import (
    RuleBuildError,
    RuleParameterError,
    UnknownRuleError,
    ValidationException,
)
from rulechain.core.rules import (
    ConstraintRegistry,
    ErrorBag,
    RuleConfigBuilder,
    RuleConfigLoader,
    RuleEngine,
    ValidationSession,
    default_registry,
    make,
    validate,
)
from rulechain.core.schema import extract_specification, make_for
from rulechain.core.validators import BaseValidator

__version__ = "0.1.0"

__all__ = [
    "BaseValidator",
    "ConstraintRegistry",
    "ErrorBag",
    "RuleBuildError",
    "RuleConfigBuilder",
    "RuleConfigLoader",
    "RuleEngine",
    "RuleParameterError",
    "UnknownRuleError",
    "ValidationException",
    "ValidationSession",
    "default_registry",
    "extract_specification",
    "make",
    "make_for",
    "validate",
]
