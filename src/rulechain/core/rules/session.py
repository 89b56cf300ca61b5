"""
Rule-chain execution.

A ValidationSession binds one record to a set of compiled field chains and
runs them lazily, the first time a result is asked for. Chains run field by
field in declaration order; within a field, constraints run in the order
they were written.
"""

import copy
import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from rulechain.core.errors import RuleBuildError, ValidationException
from rulechain.core.models import ConstraintInvocation, FieldContext, FieldSpecification
from rulechain.core.validators import BaseValidator
from rulechain.core.validators.base_validator import measure_size
from rulechain.core.validators.marker_validator import MARKER_RULES
from rulechain.observability.metrics import record_build_error, record_rule_failure, record_validation
from rulechain.utils.paths import MISSING, expand_wildcards, resolve_path

from .error_bag import ErrorBag, MessageFormatter
from .parser import parse_rules
from .registry import ConstraintRegistry, default_registry
from .resolver import OperandResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainEntry:
    """
    One step of a compiled chain.

    Either an invocation (built fresh through the registry on every run) or
    a caller-supplied validator instance kept as a prototype. Every run gets
    its own shallow copy of the prototype, so sessions never share the
    record, position or context a validator is bound to.
    """

    name: str
    invocation: ConstraintInvocation | None = None
    instance: BaseValidator | None = None

    def instantiate(self, registry: ConstraintRegistry, field_name: str) -> BaseValidator:
        if self.instance is not None:
            return copy.copy(self.instance)
        return registry.build(self.invocation.name, self.invocation.parameters, field=field_name)


@dataclass
class CompiledField:
    """A field's parsed specification plus the flags the engine needs while running it."""

    specification: FieldSpecification
    entries: list[ChainEntry] = field(default_factory=list)
    declares_numeric: bool = False

    @property
    def pattern(self) -> str:
        return self.specification.field

    @property
    def bail(self) -> bool:
        return "bail" in self.specification.rule_names

    @property
    def sometimes(self) -> bool:
        return "sometimes" in self.specification.rule_names


def _specification_items(spec: Any) -> list[ConstraintInvocation | BaseValidator]:
    if spec is None:
        return []
    if isinstance(spec, str):
        return list(parse_rules(spec))
    if isinstance(spec, ConstraintInvocation | BaseValidator):
        return [spec]
    if not isinstance(spec, Iterable):
        raise RuleBuildError(f"unsupported rule specification type: {type(spec).__name__}")

    items: list[ConstraintInvocation | BaseValidator] = []
    for item in spec:
        if isinstance(item, BaseValidator):
            items.append(item)
        else:
            # List items are single rules and never pipe-split
            items.extend(parse_rules([item]))
    return items


def compile_field(field_name: str, spec: Any, registry: ConstraintRegistry) -> CompiledField:
    """
    Parse and check one field's specification.

    Every named rule is built once here, so unknown names and malformed
    parameters surface before any record is inspected.

    Args:
        field_name: Declared field name (may contain "*" segments)
        spec: Pipe string, or a list of rule strings, ConstraintInvocation
            objects, (name, parameters) tuples and BaseValidator instances

    Raises:
        RuleBuildError: If the specification cannot be compiled
    """
    entries: list[ChainEntry] = []
    declares_numeric = False
    try:
        for item in _specification_items(spec):
            if isinstance(item, BaseValidator):
                entries.append(ChainEntry(name=item.rule_name or "custom", instance=item))
                declares_numeric = declares_numeric or bool(item.establishes)
                continue
            registry.build(item.name, item.parameters, field=field_name)
            entries.append(ChainEntry(name=item.name, invocation=item))
            declares_numeric = declares_numeric or registry.is_numeric_rule(item.name)
    except RuleBuildError as e:
        record_build_error(type(e).__name__)
        if e.field is None:
            raise RuleBuildError(e.reason, rule=e.rule, field=field_name) from e
        raise

    invocations = tuple(entry.invocation or ConstraintInvocation(name=entry.name) for entry in entries)
    specification = FieldSpecification(field=field_name, invocations=invocations)
    return CompiledField(specification=specification, entries=entries, declares_numeric=declares_numeric)


def compile_rules(rules: Mapping[str, Any], registry: ConstraintRegistry) -> dict[str, CompiledField]:
    """Compile a field -> specification mapping, keeping declaration order."""
    compiled = {name: compile_field(name, spec, registry) for name, spec in rules.items()}
    logger.debug("Compiled %d field chains", len(compiled))
    return compiled


@dataclass
class ConditionalRules:
    """Rules added to a field only when a callback approves the record."""

    field_name: str
    compiled: CompiledField
    callback: Callable[[Mapping[str, Any]], bool]


class ValidationSession:
    """
    Validates one record against a set of field specifications.

    Usage:
        session = ValidationSession(
            {"email": "ann@example.com", "age": "17"},
            {"email": "required|email", "age": "required|integer|min:18"},
        )
        if session.fails():
            session.errors().first("age")   # "The age must be at least 18."
    """

    def __init__(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, Any] | None = None,
        messages: Mapping[str, str] | None = None,
        attributes: Mapping[str, str] | None = None,
        registry: ConstraintRegistry | None = None,
        stop_on_first_failure: bool = False,
        compiled: Mapping[str, CompiledField] | None = None,
    ):
        """
        Initialize the session.

        Args:
            data: The record (field name -> value)
            rules: Field name -> specification (pipe string, list, invocations)
            messages: Custom message templates ("email.required", "required")
            attributes: Display names substituted for :attribute
            registry: Constraint registry (the built-in catalogue by default)
            stop_on_first_failure: Halt the whole run at the first failure
            compiled: Pre-compiled chains (used by RuleEngine instead of rules)

        Raises:
            RuleBuildError: If a specification cannot be compiled
        """
        self.data: Mapping[str, Any] = data if data is not None else {}
        self.registry = registry or default_registry()
        self.formatter = MessageFormatter(messages, attributes)
        self.resolver = OperandResolver(self)
        self._stop_on_first_failure = stop_on_first_failure

        if compiled is not None:
            self._fields: dict[str, CompiledField] = dict(compiled)
        else:
            self._fields = compile_rules(rules or {}, self.registry)
        self._conditional: list[ConditionalRules] = []

        self._errors: ErrorBag | None = None
        self._failed_rules: list[str] = []

    # -- configuration ---------------------------------------------------

    def stop_on_first_failure(self, enabled: bool = True) -> "ValidationSession":
        """Halt the whole run at the first recorded failure."""
        self._stop_on_first_failure = enabled
        self._reset()
        return self

    def add_rule(self, field_name: str, *rules: Any) -> "ValidationSession":
        """
        Append rules to a field's chain (creating the field if needed).

        Each argument is a rule string ("min:3"), a ConstraintInvocation or a
        BaseValidator instance.
        """
        addition = compile_field(field_name, list(rules), self.registry)
        current = self._fields.get(field_name)
        if current is None:
            self._fields[field_name] = addition
        else:
            self._fields[field_name] = _merge(current, addition)
        self._reset()
        return self

    def sometimes(
        self,
        field_name: str,
        rules: Any,
        callback: Callable[[Mapping[str, Any]], bool],
    ) -> "ValidationSession":
        """
        Add rules to a field only when callback(record) returns true.

        The rules are compiled immediately; the callback runs at validation time.
        """
        compiled = compile_field(field_name, rules, self.registry)
        self._conditional.append(ConditionalRules(field_name, compiled, callback))
        self._reset()
        return self

    # -- results ---------------------------------------------------------

    def passes(self) -> bool:
        return self.errors().is_empty()

    def fails(self) -> bool:
        return not self.passes()

    def errors(self) -> ErrorBag:
        if self._errors is None:
            self._run()
        return self._errors

    def failed_rules(self) -> list[str]:
        """"<field>.<rule>" for every recorded failure, in failure order."""
        self.errors()
        return list(self._failed_rules)

    def validate(self) -> dict[str, Any]:
        """
        Run validation and return the validated data.

        Raises:
            ValidationException: If any field failed
        """
        if self.fails():
            raise ValidationException(self.errors())
        return self.validated()

    def validated(self) -> dict[str, Any]:
        """
        Data restricted to the fields that have rules.

        Raises:
            ValidationException: If any field failed
        """
        if self.fails():
            raise ValidationException(self.errors())
        chains = self._chains()
        roots = {pattern.split(".")[0] for pattern in chains}
        return {key: value for key, value in self.data.items() if key in roots or key in chains}

    def valid(self) -> dict[str, Any]:
        """Top-level entries of the record without any error under them."""
        failed = self._failed_roots()
        return {key: value for key, value in self.data.items() if key not in failed}

    def invalid(self) -> dict[str, Any]:
        """Top-level entries of the record with at least one error under them."""
        failed = self._failed_roots()
        return {key: value for key, value in self.data.items() if key in failed}

    def has_field(self, path: str) -> bool:
        return resolve_path(self.data, path) is not MISSING

    def get_value(self, path: str, default: Any = None) -> Any:
        value = resolve_path(self.data, path)
        return default if value is MISSING else value

    def size_of_field(self, path: str, value: Any) -> float | None:
        """Size of another field's value, read the way that field's own chain reads it."""
        compiled = self._field_for(path)
        numeric = compiled is not None and compiled.declares_numeric
        return measure_size(value, numeric)

    # -- execution -------------------------------------------------------

    def _reset(self) -> None:
        self._errors = None
        self._failed_rules = []

    def _chains(self) -> dict[str, CompiledField]:
        chains = dict(self._fields)
        for conditional in self._conditional:
            if not conditional.callback(self.data):
                continue
            current = chains.get(conditional.field_name)
            chains[conditional.field_name] = (
                conditional.compiled if current is None else _merge(current, conditional.compiled)
            )
        return chains

    def _field_for(self, path: str) -> CompiledField | None:
        if path in self._fields:
            return self._fields[path]
        segments = path.split(".")
        for pattern, compiled in self._fields.items():
            parts = pattern.split(".")
            if "*" in parts and len(parts) == len(segments) and all(
                part == "*" or part == segment for part, segment in zip(parts, segments)
            ):
                return compiled
        return None

    def _failed_roots(self) -> set[str]:
        roots = set()
        for key in self.errors().keys():
            roots.add(key if key in self.data else key.split(".")[0])
        return roots

    def _targets(self, pattern: str) -> list[tuple[str, tuple[str, ...]]]:
        if "*" not in pattern.split("."):
            return [(pattern, ())]
        return expand_wildcards(self.data, pattern)

    def _run(self) -> None:
        self._errors = ErrorBag()
        self._failed_rules = []
        started = time.perf_counter()

        halted = False
        for pattern, compiled in self._chains().items():
            for field_name, indices in self._targets(pattern):
                if self._run_chain(compiled, field_name, indices):
                    halted = True
                    break
            if halted:
                break

        duration = time.perf_counter() - started
        record_validation(self._errors.is_empty(), duration)
        logger.debug(
            "Validated %d fields in %.6fs: %d failures%s",
            len(self._fields),
            duration,
            self._errors.count(),
            " (stopped on first failure)" if halted else "",
        )

    def _run_chain(self, compiled: CompiledField, field_name: str, indices: tuple[str, ...]) -> bool:
        """
        Run one field's chain.

        Returns:
            True when the whole run must stop
        """
        value = resolve_path(self.data, field_name)
        absent = value is MISSING
        if absent and compiled.sometimes:
            return False
        current = None if absent else value

        context = FieldContext(declares_numeric=compiled.declares_numeric)
        for entry in compiled.entries:
            if entry.name in MARKER_RULES and entry.instance is None:
                continue

            validator = entry.instantiate(self.registry, compiled.pattern)
            if current is None and not validator.implicit:
                continue

            self._prepare(validator, context, compiled.pattern, indices)
            if validator.passes(field_name, current):
                for fact in validator.establishes:
                    context.establish(fact)
                continue

            rule = entry.name or validator.rule_name
            message = self.formatter.format(
                field_name,
                rule,
                validator.message(),
                validator.replacements(),
                pattern=compiled.pattern,
            )
            self._errors.add(field_name, message)
            self._failed_rules.append(f"{field_name}.{rule}")
            record_rule_failure(rule)

            if self._stop_on_first_failure:
                return True
            if validator.implicit or compiled.bail:
                break
        return False

    def _prepare(self, validator: BaseValidator, context: FieldContext, pattern: str, indices: tuple[str, ...]) -> None:
        validator.set_position(pattern, indices)
        if validator.needs_record:
            validator.set_record(self.data)
        if validator.needs_session:
            validator.set_session(self)
        if validator.needs_context:
            validator.set_context(context)


def _merge(first: CompiledField, second: CompiledField) -> CompiledField:
    specification = FieldSpecification(
        field=first.pattern,
        invocations=first.specification.invocations + second.specification.invocations,
    )
    return CompiledField(
        specification=specification,
        entries=first.entries + second.entries,
        declares_numeric=first.declares_numeric or second.declares_numeric,
    )
