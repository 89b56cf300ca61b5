"""
Rule extraction from typed records (pydantic models, dataclasses).
"""

from .extraction import extract_specification, make_for, rules_for_type

__all__ = [
    "extract_specification",
    "make_for",
    "rules_for_type",
]
