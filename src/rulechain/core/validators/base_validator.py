"""
Base validator interface for all constraints.

Every constraint inherits from BaseValidator and implements passes(). The
engine never probes instances for optional methods; it reads the capability
flags each class declares:

- implicit: runs even when the value is absent or None
- needs_record: receives the full record via set_record()
- needs_session: receives the active ValidationSession via set_session()
- needs_context: receives the per-field FieldContext via set_context()
- establishes: FieldContext facts recorded when the constraint passes
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from rulechain.core.errors import RuleParameterError
from rulechain.utils.coercion import is_number, is_numeric, to_number
from rulechain.utils.paths import MISSING, resolve_path

if TYPE_CHECKING:
    from rulechain.core.models.field_context import FieldContext
    from rulechain.core.rules.session import ValidationSession


def measure_size(value: Any, numeric: bool = False) -> float | None:
    """
    Compute the size of a value for size-style comparisons.

    Numbers compare by magnitude, collections by element count. Strings
    compare by magnitude when the chain is numeric and the text sniffs as
    numeric, otherwise by character length. A non-numeric string in a
    numeric chain has no size.

    Args:
        value: The value to measure
        numeric: Whether the field's chain established or declares a numeric rule

    Returns:
        The size, or None when the value cannot be sized
    """
    if isinstance(value, bool):
        return None
    if is_number(value):
        return float(value)
    if isinstance(value, list | tuple | dict | set | frozenset):
        return float(len(value))
    if isinstance(value, str):
        if numeric:
            return to_number(value) if is_numeric(value) else None
        return float(len(value))
    return None


class BaseValidator(ABC):
    """
    Abstract base class for all constraints.

    Subclasses set rule_name, default_message and the capability flags, and
    read their parameters in __init__ (raising RuleParameterError when they
    are malformed).
    """

    rule_name: ClassVar[str] = ""
    default_message: ClassVar[str] = "The :attribute field is invalid."

    implicit: ClassVar[bool] = False
    needs_record: ClassVar[bool] = False
    needs_session: ClassVar[bool] = False
    needs_context: ClassVar[bool] = False
    establishes: ClassVar[tuple[str, ...]] = ()

    min_parameters: ClassVar[int] = 0

    def __init__(self, parameters: Sequence[str] | None = None, config: Mapping[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            parameters: Raw parameter tokens from the rule specification
            config: Registry-wide configuration (read-only)
        """
        self.parameters = list(parameters or [])
        self.config = config or {}
        self.record: Mapping[str, Any] = {}
        self.session: "ValidationSession | None" = None
        self.context: "FieldContext | None" = None
        self.indices: tuple[str, ...] = ()
        self.field_pattern = ""

        if len(self.parameters) < self.min_parameters:
            noun = "parameter" if self.min_parameters == 1 else "parameters"
            raise RuleParameterError(
                f"{self.rule_name} rule requires at least {self.min_parameters} {noun}",
                rule=self.rule_name,
            )

    @classmethod
    def build(cls, config: Mapping[str, Any], parameters: Sequence[str]) -> "BaseValidator":
        """Registry constructor: (config, parameters) -> instance."""
        return cls(parameters, config)

    @abstractmethod
    def passes(self, attribute: str, value: Any) -> bool:
        """
        Check a value against this constraint.

        Args:
            attribute: Concrete field name being validated ("users.1.email")
            value: The resolved field value

        Returns:
            True when the value satisfies the constraint
        """

    def message(self) -> str:
        """Return the default message template (with :attribute placeholder)."""
        return self.default_message

    def replacements(self) -> dict[str, str]:
        """Placeholder values (without the leading colon) for the message template."""
        return {}

    def set_record(self, record: Mapping[str, Any]) -> None:
        self.record = record

    def set_session(self, session: "ValidationSession") -> None:
        self.session = session

    def set_context(self, context: "FieldContext") -> None:
        self.context = context

    def set_position(self, field_pattern: str, indices: Sequence[str]) -> None:
        """
        Record the declared field name and wildcard indices of the element being validated.

        users.*.email evaluated for users.1.email gets ("users.*.email", ("1",)).
        """
        self.field_pattern = field_pattern
        self.indices = tuple(indices)

    # -- shared helpers --------------------------------------------------

    def other_field(self, name: str) -> str:
        """Localize a referenced field name to the current wildcard element."""
        if "*" not in name or not self.indices:
            return name
        segments = name.split(".")
        remaining = list(self.indices)
        for position, segment in enumerate(segments):
            if segment == "*" and remaining:
                segments[position] = remaining.pop(0)
        return ".".join(segments)

    def lookup(self, name: str) -> tuple[bool, Any]:
        """
        Look up another field in the record.

        Returns:
            (found, value) where found is False when the path is absent
        """
        value = resolve_path(self.record, self.other_field(name))
        if value is MISSING:
            return False, None
        return True, value

    def size_of(self, value: Any) -> float | None:
        """Size of a value as seen by this field's chain (see measure_size)."""
        return measure_size(value, self.context is not None and self.context.is_numeric)

    @staticmethod
    def parse_number(token: str, rule: str, label: str = "argument") -> float:
        """Parse a numeric parameter, raising RuleParameterError when malformed."""
        try:
            return float(token)
        except (TypeError, ValueError):
            raise RuleParameterError(f"invalid {label} for {rule}: {token!r}", rule=rule)

    @staticmethod
    def parse_count(token: str, rule: str, label: str = "argument") -> int:
        """Parse a non-negative integer parameter."""
        try:
            count = int(token)
        except (TypeError, ValueError):
            raise RuleParameterError(f"invalid {label} for {rule}: {token!r}", rule=rule)
        if count < 0:
            raise RuleParameterError(f"{label} for {rule} must be non-negative", rule=rule)
        return count

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(rule={self.rule_name}, params={self.parameters})"
