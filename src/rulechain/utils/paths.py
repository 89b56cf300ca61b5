"""
Field path resolution.

Paths address nested data with dots ("address.city", "users.0.email"). A
"*" segment stands for every element of the container at that point
("users.*.email").
"""

from collections.abc import Iterator, Mapping, Sequence
from typing import Any


class _Missing:
    """Sentinel for an absent field (distinct from a present None)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray)


def _step(container: Any, segment: str) -> Any:
    if isinstance(container, Mapping):
        if segment in container:
            return container[segment]
        # JSON/YAML keys are strings, but in-code records may use int keys
        if segment.lstrip("-").isdigit() and int(segment) in container:
            return container[int(segment)]
        return MISSING
    if _is_sequence(container) and segment.isdigit():
        index = int(segment)
        if index < len(container):
            return container[index]
    return MISSING


def resolve_path(record: Mapping[str, Any], path: str) -> Any:
    """
    Resolve a dotted path against a record.

    An exact top-level key wins over dotted traversal, so a flat key
    containing dots ("meta.version") is still addressable.

    Returns:
        The value, or MISSING when any segment is absent or an intermediate
        value is not a container
    """
    if path in record:
        return record[path]
    if "." not in path:
        return MISSING

    current: Any = record
    for segment in path.split("."):
        current = _step(current, segment)
        if current is MISSING:
            return MISSING
    return current


def _children(container: Any) -> Iterator[tuple[str, Any]]:
    if isinstance(container, Mapping):
        for key, value in container.items():
            yield str(key), value
    elif _is_sequence(container):
        for index, value in enumerate(container):
            yield str(index), value


def expand_wildcards(record: Mapping[str, Any], pattern: str) -> list[tuple[str, tuple[str, ...]]]:
    """
    Expand a wildcard pattern into concrete paths.

    Args:
        record: The record being validated
        pattern: A path with one or more "*" segments

    Returns:
        (concrete_path, indices) pairs in element order. indices holds the
        key substituted for each "*". An absent or non-container value at a
        "*" position contributes no paths.

    Examples:
        >>> expand_wildcards({"users": [{"e": 1}, {"e": 2}]}, "users.*.e")
        [('users.0.e', ('0',)), ('users.1.e', ('1',))]
    """
    segments = pattern.split(".")
    results: list[tuple[str, tuple[str, ...]]] = []

    def walk(value: Any, position: int, prefix: list[str], indices: tuple[str, ...]) -> None:
        if position == len(segments):
            results.append((".".join(prefix), indices))
            return
        segment = segments[position]
        if segment == "*":
            for key, child in _children(value):
                walk(child, position + 1, prefix + [key], indices + (key,))
            return
        child = _step(value, segment) if value is not MISSING else MISSING
        if "*" in segments[position + 1:] and child is MISSING:
            return
        walk(child, position + 1, prefix + [segment], indices)

    walk(record, 0, [], ())
    return results
