"""
Errors raised while building rule chains, and the exception form of a failed run.

Build-time errors are configuration mistakes (a rule name nobody registered, a
non-numeric bound). They are raised before any field value is inspected.
Validation failures are data, collected in an ErrorBag; ValidationException
only exists for callers who prefer to propagate a failed run as an exception.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rulechain.core.rules.error_bag import ErrorBag


class RuleBuildError(ValueError):
    """Raised when a rule specification cannot be compiled."""

    def __init__(self, message: str, rule: str | None = None, field: str | None = None):
        self.rule = rule
        self.field = field
        self.reason = message
        location = []
        if field:
            location.append(f"field '{field}'")
        if rule:
            location.append(f"rule '{rule}'")
        prefix = f"[{', '.join(location)}] " if location else ""
        super().__init__(f"{prefix}{message}")


class UnknownRuleError(RuleBuildError):
    """Raised when a rule name has no registry entry."""

    def __init__(self, rule: str, field: str | None = None):
        super().__init__(f"unknown validation rule: {rule}", rule=rule, field=field)


class RuleParameterError(RuleBuildError):
    """Raised when a rule's parameters are missing or malformed."""


class ValidationException(Exception):
    """
    A failed validation run surfaced as an exception.

    Attributes:
        errors: The ErrorBag of the failed run
    """

    def __init__(self, errors: "ErrorBag", message: str | None = None):
        self.errors = errors
        if message is None:
            message = self._summarize(errors)
        self.message = message
        super().__init__(message)

    @staticmethod
    def _summarize(errors: "ErrorBag") -> str:
        count = errors.count()
        first_field = next(iter(errors.keys()), None)
        if first_field is None:
            return "The given data was invalid."
        first = errors.first(first_field)
        if count == 1:
            return first
        return f"{first} (and {count - 1} more error{'s' if count > 2 else ''})"

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "errors": self.errors.to_dict()}
