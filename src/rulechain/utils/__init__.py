"""
Shared helpers for value coercion, date parsing and record paths.
"""

from .coercion import (
    format_number,
    is_empty,
    is_integer,
    is_number,
    is_numeric,
    to_bool,
    to_decimal,
    to_number,
    to_string,
)
from .dates import DEFAULT_DATE_FORMATS, parse_date, parse_with_format, php_to_strptime
from .paths import MISSING, expand_wildcards, resolve_path

__all__ = [
    "DEFAULT_DATE_FORMATS",
    "MISSING",
    "expand_wildcards",
    "format_number",
    "is_empty",
    "is_integer",
    "is_number",
    "is_numeric",
    "parse_date",
    "parse_with_format",
    "php_to_strptime",
    "resolve_path",
    "to_bool",
    "to_decimal",
    "to_number",
    "to_string",
]
