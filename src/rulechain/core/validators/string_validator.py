"""
String format validators - character classes, affixes, email, url and identifiers.

Most of these only accept text; a number or a list fails them.
"""

import re
from typing import Any, ClassVar
from urllib.parse import urlsplit

from rulechain.utils.coercion import to_string

from .base_validator import BaseValidator

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
HEX_COLOR_PATTERN = r"^#([a-fA-F0-9]{3}|[a-fA-F0-9]{4}|[a-fA-F0-9]{6}|[a-fA-F0-9]{8})$"
ULID_PATTERN = r"^[0-7][0-9A-HJKMNP-TV-Z]{25}$"
UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-([0-9a-fA-F])[0-9a-fA-F]{3}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"

DEFAULT_URL_SCHEMES = ("http", "https")


class CharacterClassValidator(BaseValidator):
    """
    Base for alpha, alpha_num and alpha_dash.

    By default any Unicode letter or digit qualifies; the ":ascii" option
    limits the check to a-z, A-Z and 0-9.
    """

    unicode_pattern: ClassVar[str] = ""
    ascii_pattern: ClassVar[str] = ""
    ascii_message: ClassVar[str] = ""

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.ascii_only = bool(self.parameters) and self.parameters[0].lower() == "ascii"
        self.pattern = re.compile(self.ascii_pattern if self.ascii_only else self.unicode_pattern)

    def passes(self, attribute: str, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return self.pattern.fullmatch(value) is not None

    def message(self) -> str:
        return self.ascii_message if self.ascii_only else self.default_message


class AlphaValidator(CharacterClassValidator):
    rule_name = "alpha"
    default_message = "The :attribute may only contain letters."
    ascii_message = "The :attribute may only contain ASCII letters."
    unicode_pattern = r"[^\W\d_]+"
    ascii_pattern = r"[a-zA-Z]+"


class AlphaNumValidator(CharacterClassValidator):
    rule_name = "alpha_num"
    default_message = "The :attribute may only contain letters and numbers."
    ascii_message = "The :attribute may only contain ASCII letters and numbers."
    unicode_pattern = r"[^\W_]+"
    ascii_pattern = r"[a-zA-Z0-9]+"


class AlphaDashValidator(CharacterClassValidator):
    rule_name = "alpha_dash"
    default_message = "The :attribute may only contain letters, numbers, dashes, and underscores."
    ascii_message = "The :attribute may only contain ASCII letters, numbers, dashes, and underscores."
    unicode_pattern = r"[\w-]+"
    ascii_pattern = r"[a-zA-Z0-9_-]+"


class AsciiValidator(BaseValidator):
    rule_name = "ascii"
    default_message = "The :attribute must only contain ASCII characters."

    def passes(self, attribute: str, value: Any) -> bool:
        return isinstance(value, str) and value.isascii()


class UppercaseValidator(BaseValidator):
    rule_name = "uppercase"
    default_message = "The :attribute must be uppercase."

    def passes(self, attribute: str, value: Any) -> bool:
        return isinstance(value, str) and value == value.upper()


class LowercaseValidator(BaseValidator):
    rule_name = "lowercase"
    default_message = "The :attribute must be lowercase."

    def passes(self, attribute: str, value: Any) -> bool:
        return isinstance(value, str) and value == value.lower()


class AffixValidator(BaseValidator):
    """Base for starts_with / ends_with and their negations."""

    min_parameters: ClassVar[int] = 1
    negate: ClassVar[bool] = False

    def found(self, text: str) -> bool:
        raise NotImplementedError

    def passes(self, attribute: str, value: Any) -> bool:
        if isinstance(value, list | tuple | dict | set):
            return False
        matched = self.found(to_string(value))
        return not matched if self.negate else matched

    def replacements(self) -> dict[str, str]:
        return {"values": ", ".join(self.parameters)}


class StartsWithValidator(AffixValidator):
    rule_name = "starts_with"
    default_message = "The :attribute must start with one of the following: :values."

    def found(self, text: str) -> bool:
        return text.startswith(tuple(self.parameters))


class EndsWithValidator(AffixValidator):
    rule_name = "ends_with"
    default_message = "The :attribute must end with one of the following: :values."

    def found(self, text: str) -> bool:
        return text.endswith(tuple(self.parameters))


class DoesntStartWithValidator(StartsWithValidator):
    rule_name = "doesnt_start_with"
    default_message = "The :attribute may not start with one of the following: :values."
    negate = True


class DoesntEndWithValidator(EndsWithValidator):
    rule_name = "doesnt_end_with"
    default_message = "The :attribute may not end with one of the following: :values."
    negate = True


class EmailValidator(BaseValidator):
    rule_name = "email"
    default_message = "The :attribute must be a valid email address."

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.pattern = re.compile(EMAIL_PATTERN)

    def passes(self, attribute: str, value: Any) -> bool:
        return isinstance(value, str) and self.pattern.fullmatch(value) is not None


class UrlValidator(BaseValidator):
    """
    Validates an absolute URL with a host.

    url:https,ftp restricts the allowed schemes; without parameters the
    registry's "url_schemes" config (default http and https) applies.
    """

    rule_name = "url"
    default_message = "The :attribute must be a valid URL."

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        if self.parameters:
            self.schemes = tuple(scheme.lower() for scheme in self.parameters)
        else:
            self.schemes = tuple(self.config.get("url_schemes", DEFAULT_URL_SCHEMES))

    def passes(self, attribute: str, value: Any) -> bool:
        if not isinstance(value, str) or any(char.isspace() for char in value):
            return False
        try:
            parts = urlsplit(value)
        except ValueError:
            return False
        return parts.scheme.lower() in self.schemes and bool(parts.netloc)

    def message(self) -> str:
        if self.parameters:
            return "The :attribute must be a valid URL with protocol: :values."
        return self.default_message

    def replacements(self) -> dict[str, str]:
        return {"values": ", ".join(self.schemes)}


class UuidValidator(BaseValidator):
    """Validates a hyphenated UUID; uuid:4 also checks the version digit."""

    rule_name = "uuid"
    default_message = "The :attribute must be a valid UUID."

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.pattern = re.compile(UUID_PATTERN)
        self.version = self.parse_count(self.parameters[0], self.rule_name, "version") if self.parameters else None

    def passes(self, attribute: str, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        match = self.pattern.fullmatch(value)
        if match is None:
            return False
        return self.version is None or int(match.group(1), 16) == self.version

    def message(self) -> str:
        if self.version is not None:
            return "The :attribute must be a valid UUID version :value."
        return self.default_message

    def replacements(self) -> dict[str, str]:
        return {"value": "" if self.version is None else str(self.version)}


class UlidValidator(BaseValidator):
    rule_name = "ulid"
    default_message = "The :attribute must be a valid ULID."

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.pattern = re.compile(ULID_PATTERN)

    def passes(self, attribute: str, value: Any) -> bool:
        return isinstance(value, str) and self.pattern.fullmatch(value.upper()) is not None


class HexColorValidator(BaseValidator):
    rule_name = "hex_color"
    default_message = "The :attribute must be a valid hexadecimal color."

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.pattern = re.compile(HEX_COLOR_PATTERN)

    def passes(self, attribute: str, value: Any) -> bool:
        return isinstance(value, str) and self.pattern.fullmatch(value) is not None


STRING_VALIDATORS: tuple[type[BaseValidator], ...] = (
    AlphaValidator,
    AlphaNumValidator,
    AlphaDashValidator,
    AsciiValidator,
    UppercaseValidator,
    LowercaseValidator,
    StartsWithValidator,
    EndsWithValidator,
    DoesntStartWithValidator,
    DoesntEndWithValidator,
    EmailValidator,
    UrlValidator,
    UuidValidator,
    UlidValidator,
    HexColorValidator,
)
