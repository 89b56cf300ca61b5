"""
Rule specification parser.

Turns one field's rule text, e.g. ``"required|regex:/^[A-Z]{1,3}$/|max:10"``,
into an ordered list of ConstraintInvocation objects.

Grammar:
    spec          := rule ('|' rule)*
    rule          := name (':' paramtext)?
    plain-params  := token (',' token)*     quote-aware, quotes stripped
    pattern-param := verbatim remainder     regex / not_regex only
"""

from collections.abc import Iterable
from typing import Any

from rulechain.core.errors import RuleBuildError
from rulechain.core.models import ConstraintInvocation

# Rules whose single parameter is a regular expression and is never comma-split
PATTERN_RULES = frozenset({"regex", "not_regex"})

PATTERN_DELIMITERS = "/#~!@%"
PATTERN_FLAGS = {"i": "i", "m": "m", "s": "s", "x": "x"}
IGNORED_PATTERN_FLAGS = {"u"}

QUOTES = ("'", '"')


def split_parameters(text: str | None) -> list[str]:
    """
    Split a parameter list on commas, honouring quotes.

    A quote character opens a section closed by the same character; commas
    inside it are literal and the quotes are dropped. An unterminated quote
    runs to the end of the text. Whitespace outside quotes around a token is
    trimmed.

    Args:
        text: Everything after the first colon of a rule token

    Returns:
        Parameter tokens in order (empty list for empty text)

    Examples:
        >>> split_parameters('"a,b",c')
        ['a,b', 'c']
        >>> split_parameters("1, 100")
        ['1', '100']
    """
    if text is None or text == "":
        return []

    tokens: list[str] = []
    buffer: list[str] = []
    quote: str | None = None
    # Length of the buffer prefix that came from (or precedes) quoted text;
    # trailing whitespace is only trimmed after it.
    protected = 0

    for char in text:
        if quote is not None:
            if char == quote:
                quote = None
            else:
                buffer.append(char)
            protected = len(buffer)
            continue

        if char in QUOTES:
            quote = char
            protected = len(buffer)
            continue

        if char == ",":
            tokens.append(_finish_token(buffer, protected))
            buffer = []
            protected = 0
            continue

        if char.isspace() and not buffer and protected == 0:
            continue

        buffer.append(char)

    tokens.append(_finish_token(buffer, protected))
    return tokens


def _finish_token(buffer: list[str], protected: int) -> str:
    token = "".join(buffer)
    return token[:protected] + token[protected:].rstrip()


def normalize_pattern(text: str) -> str:
    """
    Strip pattern delimiters and turn trailing flags into an inline group.

    ``/^abc$/i`` becomes ``(?i)^abc$``. Text that does not start with a
    delimiter, or has no closing delimiter, is returned unchanged.
    """
    if len(text) < 2 or text[0] not in PATTERN_DELIMITERS:
        return text

    delimiter = text[0]
    closing = text.rfind(delimiter)
    if closing <= 0:
        return text

    pattern = text[1:closing]
    trailing = text[closing + 1:]
    if any(flag not in PATTERN_FLAGS and flag not in IGNORED_PATTERN_FLAGS for flag in trailing):
        # Not a flag suffix, so the delimiter was part of the pattern
        return text

    flags = "".join(sorted({PATTERN_FLAGS[flag] for flag in trailing if flag in PATTERN_FLAGS}))
    if flags:
        pattern = f"(?{flags}){pattern}"
    return pattern


def parse_rule(token: str) -> ConstraintInvocation | None:
    """
    Parse a single rule token ("between:1,100").

    Returns:
        The invocation, or None for a blank token
    """
    token = token.strip()
    if not token:
        return None

    name, separator, param_text = token.partition(":")
    name = name.strip().lower()
    if not name:
        raise RuleBuildError(f"rule token '{token}' has no rule name")

    if not separator:
        return ConstraintInvocation(name=name)

    if name in PATTERN_RULES:
        parameters = [normalize_pattern(param_text)] if param_text else []
    else:
        parameters = split_parameters(param_text)

    return ConstraintInvocation(name=name, parameters=tuple(parameters))


def parse_rules(spec: Any) -> list[ConstraintInvocation]:
    """
    Parse one field's specification into invocations.

    Args:
        spec: Pipe-separated rule text, or an iterable whose items are single
            rule strings, ConstraintInvocation objects, or (name, parameters)
            tuples. List items are never pipe-split, so patterns containing
            "|" must be written in list form.

    Returns:
        Ordered list of ConstraintInvocation

    Raises:
        RuleBuildError: If the specification has an unsupported shape
    """
    if spec is None:
        return []

    if isinstance(spec, str):
        tokens: Iterable[Any] = spec.split("|")
    elif isinstance(spec, ConstraintInvocation):
        return [spec]
    else:
        try:
            tokens = list(spec)
        except TypeError:
            raise RuleBuildError(f"unsupported rule specification type: {type(spec).__name__}")

    invocations: list[ConstraintInvocation] = []
    for item in tokens:
        if isinstance(item, ConstraintInvocation):
            invocations.append(item)
        elif isinstance(item, str):
            invocation = parse_rule(item)
            if invocation is not None:
                invocations.append(invocation)
        elif isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str):
            name, parameters = item
            invocations.append(
                ConstraintInvocation(
                    name=name.strip().lower(),
                    parameters=tuple(str(p) for p in (parameters or ())),
                )
            )
        else:
            raise RuleBuildError(f"unsupported rule item: {item!r}")

    return invocations
