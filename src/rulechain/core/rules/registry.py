"""
Constraint registry: rule name to constructor mapping.

A registry starts from the built-in catalogue and accepts caller
registrations that shadow built-ins of the same name. It is configured up
front and only read while records are validated, so one registry can serve
any number of sessions.
"""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from rulechain.core.errors import RuleBuildError, RuleParameterError, UnknownRuleError
from rulechain.core.validators import BUILTIN_VALIDATORS, BaseValidator, function_constructor

logger = logging.getLogger(__name__)

Constructor = Callable[[Mapping[str, Any], Sequence[str]], BaseValidator]

# Rules whose presence in a chain makes size rules read text as numbers
DEFAULT_NUMERIC_RULES = (
    "numeric",
    "integer",
    "int",
    "decimal",
    "digits",
    "digits_between",
    "min_digits",
    "max_digits",
)


def _as_constructor(entry: Any) -> Constructor:
    if isinstance(entry, type) and issubclass(entry, BaseValidator):
        return entry.build
    if callable(entry):
        return entry
    raise TypeError(f"constructor must be a BaseValidator subclass or a callable, got {type(entry).__name__}")


class ConstraintRegistry:
    """
    Maps lower-cased rule names to constructors.

    A constructor is called as ``constructor(config, parameters)`` and
    returns a BaseValidator instance. BaseValidator subclasses may be
    registered directly.

    Example:
        registry = ConstraintRegistry()
        registry.register_function("even", lambda value: int(value) % 2 == 0,
                                   message="The :attribute must be even.")
        registry.register_numeric_rule("even")
    """

    def __init__(self, constructors: Mapping[str, Any] | None = None, config: Mapping[str, Any] | None = None):
        """
        Initialize the registry from the built-in catalogue.

        Args:
            constructors: Extra name -> constructor entries (shadow built-ins)
            config: Initial global configuration passed to every constructor
        """
        self._constructors: dict[str, Constructor] = {
            name: validator.build for name, validator in BUILTIN_VALIDATORS.items()
        }
        self._numeric_rules: set[str] = set(DEFAULT_NUMERIC_RULES)
        self._config: dict[str, Any] = dict(config or {})
        self._frozen = False

        for name, entry in (constructors or {}).items():
            self.register(name, entry)

    # -- registration ----------------------------------------------------

    def register(self, name: str, constructor: Any) -> "ConstraintRegistry":
        """Register (or replace) a constructor under a rule name."""
        self._ensure_mutable()
        key = name.strip().lower()
        if not key:
            raise ValueError("rule name must not be empty")
        if key in self._constructors:
            logger.debug("Rule '%s' re-registered, replacing previous constructor", key)
        self._constructors[key] = _as_constructor(constructor)
        return self

    def register_function(
        self,
        name: str,
        func: Callable[..., Any],
        message: str | None = None,
        implicit: bool = False,
    ) -> "ConstraintRegistry":
        """
        Register a plain function as a rule.

        Args:
            name: Rule name used in specifications
            func: Called as func(value, [attribute=..., record=..., parameters=...])
            message: Default message template
            implicit: Run even when the value is absent or None
        """
        key = name.strip().lower()
        return self.register(key, function_constructor(key, func, message, implicit))

    def register_numeric_rule(self, name: str) -> "ConstraintRegistry":
        """Mark a rule as numeric-establishing for size comparisons."""
        self._ensure_mutable()
        self._numeric_rules.add(name.strip().lower())
        return self

    def set_config(self, key: str, value: Any) -> "ConstraintRegistry":
        self._ensure_mutable()
        self._config[key] = value
        return self

    def unset_config(self, key: str) -> "ConstraintRegistry":
        self._ensure_mutable()
        self._config.pop(key, None)
        return self

    def freeze(self) -> "ConstraintRegistry":
        """Reject any further registration or configuration change."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError(
                "registry is frozen; create a ConstraintRegistry to register rules or change configuration"
            )

    # -- queries ---------------------------------------------------------

    @property
    def config(self) -> Mapping[str, Any]:
        """Read-only view of the global configuration."""
        return MappingProxyType(self._config)

    @property
    def numeric_rules(self) -> frozenset[str]:
        return frozenset(self._numeric_rules)

    def has(self, name: str) -> bool:
        return name.lower() in self._constructors

    def names(self) -> list[str]:
        return sorted(self._constructors)

    def is_numeric_rule(self, name: str) -> bool:
        return name.lower() in self._numeric_rules

    def declares_numeric(self, names: Iterable[str]) -> bool:
        """Whether any of the rule names is numeric-establishing."""
        return any(self.is_numeric_rule(name) for name in names)

    # -- construction ----------------------------------------------------

    def build(self, name: str, parameters: Sequence[str] = (), field: str | None = None) -> BaseValidator:
        """
        Build a runnable instance of a rule.

        Args:
            name: Rule name
            parameters: Raw parameter tokens
            field: Field the rule belongs to (for error messages)

        Raises:
            UnknownRuleError: If the name is not registered
            RuleParameterError: If the constructor rejects the parameters
        """
        constructor = self._constructors.get(name.lower())
        if constructor is None:
            raise UnknownRuleError(name, field=field)

        try:
            instance = constructor(self.config, list(parameters))
        except RuleBuildError as e:
            raise RuleParameterError(e.reason, rule=e.rule or name, field=e.field or field) from e
        except Exception as e:
            raise RuleParameterError(f"Failed to create validator: {e}", rule=name, field=field) from e

        if not isinstance(instance, BaseValidator):
            raise RuleParameterError(
                f"constructor returned {type(instance).__name__}, expected a BaseValidator",
                rule=name,
                field=field,
            )
        return instance

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._constructors)


_default_registry: ConstraintRegistry | None = None


def default_registry() -> ConstraintRegistry:
    """
    Shared, frozen registry holding only the built-in catalogue.

    Sessions and engines created without a registry use it. Custom rules go
    into a ConstraintRegistry of their own.
    """
    global _default_registry
    if _default_registry is None:
        _default_registry = ConstraintRegistry().freeze()
    return _default_registry
