"""
Error bag and message formatting.

The bag keeps, per field, the rendered messages of every failed constraint
in the order they failed. The formatter picks the message template
(custom per-field override, custom per-rule override, constraint default)
and substitutes the placeholders.
"""

import re
from collections.abc import Iterator, Mapping
from typing import Any

# Whole placeholder names only, so ":min" never matches inside ":min_digits"
PLACEHOLDER = re.compile(r":([A-Za-z_]+)")


class ErrorBag:
    """
    Ordered field -> messages collection.

    Fields appear in the order of their first failure; each field's messages
    appear in the order its constraints failed.
    """

    def __init__(self, messages: Mapping[str, list[str]] | None = None):
        self._messages: dict[str, list[str]] = {}
        for field, field_messages in (messages or {}).items():
            for message in field_messages:
                self.add(field, message)

    def add(self, field: str, message: str) -> None:
        self._messages.setdefault(field, []).append(message)

    def has(self, field: str) -> bool:
        return bool(self._messages.get(field))

    def get(self, field: str) -> list[str]:
        return list(self._messages.get(field, []))

    def first(self, field: str | None = None) -> str:
        """First message of a field, or of the first failed field; "" when none."""
        if field is None:
            field = next(iter(self._messages), None)
            if field is None:
                return ""
        messages = self._messages.get(field)
        return messages[0] if messages else ""

    def all(self) -> list[str]:
        return [message for messages in self._messages.values() for message in messages]

    def keys(self) -> list[str]:
        return list(self._messages)

    def count(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def is_empty(self) -> bool:
        return not self._messages

    def is_not_empty(self) -> bool:
        return bool(self._messages)

    def to_dict(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self._messages.items()}

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, field: object) -> bool:
        return isinstance(field, str) and self.has(field)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))

    def __bool__(self) -> bool:
        return self.is_not_empty()

    def __repr__(self) -> str:
        return f"ErrorBag({self._messages!r})"


class MessageFormatter:
    """
    Renders failure messages.

    Args:
        messages: Custom templates keyed "<field>.<rule>" or "<rule>"
        attributes: Display names keyed by field name
    """

    def __init__(self, messages: Mapping[str, str] | None = None, attributes: Mapping[str, str] | None = None):
        self.messages = dict(messages or {})
        self.attributes = dict(attributes or {})

    def template(self, field: str, pattern: str, rule: str, default: str) -> str:
        """
        Pick the message template for a failure.

        Lookup order: "<concrete field>.<rule>", "<field pattern>.<rule>",
        "<rule>", then the constraint's default.
        """
        for key in (f"{field}.{rule}", f"{pattern}.{rule}", rule):
            if key in self.messages:
                return self.messages[key]
        return default

    def display_name(self, field: str, pattern: str) -> str:
        if field in self.attributes:
            return self.attributes[field]
        if pattern in self.attributes:
            return self.attributes[pattern]
        return field

    def format(
        self,
        field: str,
        rule: str,
        default: str,
        replacements: Mapping[str, Any] | None = None,
        pattern: str | None = None,
    ) -> str:
        """
        Render a message.

        Args:
            field: Concrete field name ("users.1.email")
            rule: Rule name
            default: The constraint's own template
            replacements: Placeholder values without the leading colon
            pattern: Declared field name when it differs ("users.*.email")

        Returns:
            The message with known :placeholders substituted
        """
        pattern = pattern or field
        text = self.template(field, pattern, rule, default)
        values = {key: str(value) for key, value in (replacements or {}).items()}
        values["attribute"] = self.display_name(field, pattern)

        def substitute(match: re.Match) -> str:
            return values.get(match.group(1), match.group(0))

        return PLACEHOLDER.sub(substitute, text)
