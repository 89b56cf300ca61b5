"""
Chain markers - bail, sometimes, nullable.

Markers never fail. The engine reads them from the compiled chain to decide
how the chain runs: bail stops at the first failure, sometimes skips an
absent field entirely. nullable is accepted for compatibility with rule sets
written for other validators; None already skips non-implicit rules.
"""

from typing import Any

from .base_validator import BaseValidator

MARKER_RULES = frozenset({"bail", "sometimes", "nullable"})


class MarkerValidator(BaseValidator):
    def passes(self, attribute: str, value: Any) -> bool:
        return True


class BailValidator(MarkerValidator):
    rule_name = "bail"


class SometimesValidator(MarkerValidator):
    rule_name = "sometimes"


class NullableValidator(MarkerValidator):
    rule_name = "nullable"
