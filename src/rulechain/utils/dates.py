"""
Date parsing helpers for the temporal constraints.

Dates arrive as text ("2024-01-31", "31-01-2024 10:00:00", RFC 3339 stamps)
or as datetime/date objects. Comparisons are done on naive UTC datetimes so
that offset-aware and naive inputs can be mixed.
"""

from collections.abc import Sequence
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

DEFAULT_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%d-%m-%Y",
    "%d-%m-%Y %H:%M:%S",
    "%d %b %y %H:%M %Z",
    "%I:%M%p",
)

RELATIVE_DATES = ("today", "tomorrow", "yesterday", "now")

# Date format letters accepted by date_format, mapped to strptime directives
PHP_FORMAT_LETTERS = {
    "Y": "%Y",
    "y": "%y",
    "m": "%m",
    "n": "%m",
    "d": "%d",
    "j": "%d",
    "H": "%H",
    "G": "%H",
    "h": "%I",
    "g": "%I",
    "i": "%M",
    "s": "%S",
    "A": "%p",
    "a": "%p",
    "D": "%a",
    "l": "%A",
    "M": "%b",
    "F": "%B",
    "P": "%z",
    "O": "%z",
    "T": "%Z",
}


def php_to_strptime(fmt: str) -> str:
    """
    Translate a letter-style date format ("Y-m-d H:i:s") to strptime form.

    A format that already contains "%" directives is returned unchanged.
    A backslash escapes the following letter.
    """
    if "%" in fmt:
        return fmt

    out: list[str] = []
    escaped = False
    for char in fmt:
        if escaped:
            out.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        else:
            out.append(PHP_FORMAT_LETTERS.get(char, char))
    return "".join(out)


def _naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def _relative(text: str) -> datetime | None:
    now = datetime.now()
    midnight = datetime.combine(now.date(), time())
    if text == "now":
        return now
    if text == "today":
        return midnight
    if text == "tomorrow":
        return midnight + timedelta(days=1)
    if text == "yesterday":
        return midnight - timedelta(days=1)
    return None


def parse_with_format(text: str, fmt: str) -> datetime | None:
    """Parse text with a single format, returning None when it does not match."""
    try:
        return _naive_utc(datetime.strptime(text, php_to_strptime(fmt)))
    except ValueError:
        return None


def parse_date(value: Any, formats: Sequence[str] = ()) -> datetime | None:
    """
    Parse a value into a naive datetime.

    Args:
        value: datetime, date, or text
        formats: Extra formats tried after the defaults

    Returns:
        The parsed datetime, or None when the value is not a recognizable date
    """
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time())
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    relative = _relative(text.lower())
    if relative is not None:
        return relative

    for fmt in (*DEFAULT_DATE_FORMATS, *formats):
        parsed = parse_with_format(text, fmt)
        if parsed is not None:
            return parsed

    try:
        # RFC 3339 / ISO 8601 ("2024-01-31T10:00:00Z")
        return _naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return None
