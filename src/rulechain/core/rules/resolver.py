"""
Cross-field operand resolution.

Constraints such as gt:other or after:start_date take a parameter that is
either the name of another field or a literal. OperandResolver makes that
call for them against the session's record.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

from rulechain.utils.coercion import is_numeric, to_number
from rulechain.utils.dates import parse_date

if TYPE_CHECKING:
    from rulechain.core.validators.base_validator import BaseValidator

    from .session import ValidationSession


class OperandResolver:
    """
    Decides whether a constraint parameter names another field or is a literal.

    Bound to one validation session, so field references are resolved
    against that session's record and sized using the referenced field's
    own chain (a field whose chain declares a numeric rule is sized as a
    number).
    """

    def __init__(self, session: "ValidationSession"):
        self.session = session

    def field_value(self, validator: "BaseValidator", token: str) -> tuple[bool, Any]:
        """Resolve a token as a field reference localized to the current element."""
        return validator.lookup(token)

    def size_operand(self, validator: "BaseValidator", token: str) -> float | None:
        """
        Resolve the comparison operand for gt/gte/lt/lte.

        Returns:
            The size of the referenced field, the numeric literal, or None
            when the token is neither (the comparison then fails)
        """
        found, value = self.field_value(validator, token)
        if found:
            return self.session.size_of_field(validator.other_field(token), value)
        if is_numeric(token):
            return to_number(token)
        return None

    def date_operand(self, validator: "BaseValidator", token: str, formats: Sequence[str] = ()) -> datetime | None:
        """
        Resolve the comparison operand for the after/before family.

        A present field value wins; otherwise the token is parsed as a date
        literal. None means neither worked and the rule passes vacuously.
        """
        found, value = self.field_value(validator, token)
        if found and value is not None:
            return parse_date(value, formats)
        return parse_date(token, formats)
