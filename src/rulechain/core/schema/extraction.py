"""
Rule extraction from typed records.

Pydantic models declare rules in ``Field(json_schema_extra={"rules": ...})``
and dataclasses in ``field(metadata={"rules": ...})``. Nested models and
lists of models contribute their own rules under dotted and wildcard names
("address.city", "items.*.sku").
"""

import dataclasses
import logging
import typing
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from rulechain.core.rules.registry import ConstraintRegistry
from rulechain.core.rules.session import ValidationSession

logger = logging.getLogger(__name__)

RULES_KEY = "rules"


def _nested_type(annotation: Any) -> tuple[type | None, bool]:
    """
    Find a model or dataclass type inside an annotation.

    Returns:
        (type, is_list) for Model, Optional[Model] and list[Model];
        (None, False) otherwise
    """
    origin = typing.get_origin(annotation)
    if origin is None:
        if isinstance(annotation, type) and (issubclass(annotation, BaseModel) or dataclasses.is_dataclass(annotation)):
            return annotation, False
        return None, False

    args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
    if origin in (list, tuple, set, frozenset) or (isinstance(origin, type) and issubclass(origin, Sequence)):
        if args:
            inner, _ = _nested_type(args[0])
            return inner, inner is not None
        return None, False
    if len(args) == 1:
        return _nested_type(args[0])
    return None, False


def _model_rules(model: type[BaseModel]) -> list[tuple[str, Any, Any]]:
    entries = []
    for name, info in model.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        entries.append((info.alias or name, extra.get(RULES_KEY), info.annotation))
    return entries


def _dataclass_rules(cls: type) -> list[tuple[str, Any, Any]]:
    hints = typing.get_type_hints(cls)
    return [(f.name, f.metadata.get(RULES_KEY), hints.get(f.name, f.type)) for f in dataclasses.fields(cls)]


def rules_for_type(cls: type, prefix: str = "") -> dict[str, Any]:
    """
    Collect the rule specifications declared on a model or dataclass type.

    Args:
        cls: A pydantic model class or a dataclass
        prefix: Dotted path of the enclosing field (used for nesting)

    Returns:
        Field path -> specification, in declaration order
    """
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        entries = _model_rules(cls)
    elif dataclasses.is_dataclass(cls):
        entries = _dataclass_rules(cls)
    else:
        raise TypeError(f"expected a pydantic model or dataclass type, got {cls!r}")

    rules: dict[str, Any] = {}
    for name, spec, annotation in entries:
        path = f"{prefix}{name}"
        if spec is not None:
            rules[path] = spec
        nested, is_list = _nested_type(annotation)
        if nested is not None:
            child_prefix = f"{path}.*." if is_list else f"{path}."
            rules.update(rules_for_type(nested, child_prefix))
    return rules


def _record_of(obj: Any) -> dict[str, Any]:
    if isinstance(obj, BaseModel):
        return obj.model_dump(by_alias=True)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"expected a pydantic model or dataclass instance, got {type(obj).__name__}")


def extract_specification(obj: Any) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Extract the record and its rule specification from a typed object.

    Args:
        obj: A pydantic model instance or a dataclass instance

    Returns:
        (record, rules) ready for ValidationSession / RuleEngine

    Raises:
        TypeError: If obj is neither a model nor a dataclass instance

    Example:
        @dataclass
        class Signup:
            email: str = field(metadata={"rules": "required|email"})

        record, rules = extract_specification(Signup(email="x"))
        # record == {"email": "x"}, rules == {"email": "required|email"}
    """
    record = _record_of(obj)
    rules = rules_for_type(type(obj))
    logger.debug("Extracted %d field specifications from %s", len(rules), type(obj).__name__)
    return record, rules


def make_for(
    obj: Any,
    messages: Mapping[str, str] | None = None,
    attributes: Mapping[str, str] | None = None,
    registry: ConstraintRegistry | None = None,
) -> ValidationSession:
    """Build a ValidationSession for a typed object using its declared rules."""
    record, rules = extract_specification(obj)
    return ValidationSession(record, rules, messages=messages, attributes=attributes, registry=registry)
