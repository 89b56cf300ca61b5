"""
Rule parsing, the constraint registry, the execution engine and configuration management.
"""

from .error_bag import ErrorBag, MessageFormatter
from .parser import parse_rule, parse_rules, split_parameters
from .registry import DEFAULT_NUMERIC_RULES, ConstraintRegistry, default_registry
from .resolver import OperandResolver
from .rule_config import RuleConfig, RuleConfigBuilder, RuleConfigLoader
from .rule_engine import RuleEngine, make, validate
from .session import ValidationSession

__all__ = [
    "ConstraintRegistry",
    "DEFAULT_NUMERIC_RULES",
    "ErrorBag",
    "MessageFormatter",
    "OperandResolver",
    "RuleConfig",
    "RuleConfigBuilder",
    "RuleConfigLoader",
    "RuleEngine",
    "ValidationSession",
    "default_registry",
    "make",
    "parse_rule",
    "parse_rules",
    "split_parameters",
    "validate",
]
