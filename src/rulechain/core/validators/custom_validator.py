"""
CustomValidator - validates using a custom Python function.
"""

import inspect
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .base_validator import BaseValidator


class CustomValidator(BaseValidator):
    """
    Validates using a plain callable registered under a rule name.

    The function receives the value and may also declare any of the keyword
    parameters ``attribute``, ``record`` and ``parameters``:

        def even(value, parameters):
            return int(value) % 2 == 0

    It returns a truthy value on success. Exceptions raised by the function
    propagate to the caller; they signal a bug, not a validation failure.
    """

    needs_record = True

    def __init__(
        self,
        func: Callable[..., Any],
        rule_name: str,
        message: str | None = None,
        implicit: bool = False,
        parameters: Sequence[str] | None = None,
        config: Mapping[str, Any] | None = None,
    ):
        if not callable(func):
            raise ValueError("validator function must be callable")

        self.func = func
        self.rule_name = rule_name
        self.implicit = implicit
        self.error_message = message or "The :attribute field is invalid."
        self._accepts = self._accepted_keywords(func)
        super().__init__(parameters, config)

    @staticmethod
    def _accepted_keywords(func: Callable[..., Any]) -> frozenset[str]:
        try:
            signature = inspect.signature(func)
        except (TypeError, ValueError):
            return frozenset()
        names = {"attribute", "record", "parameters"}
        if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in signature.parameters.values()):
            return frozenset(names)
        return frozenset(names & set(signature.parameters))

    def passes(self, attribute: str, value: Any) -> bool:
        available = {"attribute": attribute, "record": self.record, "parameters": list(self.parameters)}
        kwargs = {name: available[name] for name in self._accepts}
        return bool(self.func(value, **kwargs))

    def message(self) -> str:
        return self.error_message

    def replacements(self) -> dict[str, str]:
        return {"values": ", ".join(self.parameters)}


def function_constructor(
    rule_name: str,
    func: Callable[..., Any],
    message: str | None = None,
    implicit: bool = False,
) -> Callable[[Mapping[str, Any], Sequence[str]], CustomValidator]:
    """Build a registry constructor that wraps a plain function."""

    def build(config: Mapping[str, Any], parameters: Sequence[str]) -> CustomValidator:
        return CustomValidator(func, rule_name, message, implicit, parameters, config)

    return build
