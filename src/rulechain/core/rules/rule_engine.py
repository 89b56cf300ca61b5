"""
Rule engine for applying compiled rule chains to data records.

The rule engine compiles a field -> specification mapping once, then
validates any number of records against it and produces validation results.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from rulechain.core.models import DataRecord, FieldSpecification, ValidationResult

from .registry import ConstraintRegistry, default_registry
from .session import CompiledField, ValidationSession, compile_rules

logger = logging.getLogger(__name__)


class RuleEngine:
    """
    Compiles rule specifications once and applies them to records.

    Example:
        engine = RuleEngine({
            "email": "required|email",
            "users.*.email": "required|email",
            "age": "nullable|integer|between:18,120",
        })
        session = engine.make({"email": "ann@example.com", "users": []})
        session.passes()
    """

    def __init__(
        self,
        rules: Mapping[str, Any],
        registry: ConstraintRegistry | None = None,
        messages: Mapping[str, str] | None = None,
        attributes: Mapping[str, str] | None = None,
        stop_on_first_failure: bool = False,
    ):
        """
        Initialize the rule engine with field specifications.

        Args:
            rules: Field name -> rule specification. A specification is a pipe
                   string ("required|integer|min:1") or a list of single rules
            registry: Constraint registry (built-in catalogue by default)
            messages: Custom message templates ("email.required", "required")
            attributes: Display names for :attribute
            stop_on_first_failure: Halt each run at its first failure

        Raises:
            RuleBuildError: If any specification names an unknown rule or has
                malformed parameters
        """
        self.rules = dict(rules)
        self.registry = registry or default_registry()
        self.messages = dict(messages or {})
        self.attributes = dict(attributes or {})
        self.stop_on_first_failure = stop_on_first_failure
        self.fields: dict[str, CompiledField] = compile_rules(self.rules, self.registry)

    @property
    def specifications(self) -> list[FieldSpecification]:
        return [compiled.specification for compiled in self.fields.values()]

    def make(self, data: Mapping[str, Any]) -> ValidationSession:
        """
        Create a validation session for one record.

        Args:
            data: The record (field name -> value)

        Returns:
            A lazily evaluated ValidationSession
        """
        return ValidationSession(
            data,
            messages=self.messages,
            attributes=self.attributes,
            registry=self.registry,
            stop_on_first_failure=self.stop_on_first_failure,
            compiled=self.fields,
        )

    def validate_record(self, record: DataRecord) -> ValidationResult:
        """
        Validate a data record against all field chains.

        Args:
            record: The DataRecord to validate

        Returns:
            ValidationResult containing pass/fail status and messages per field
        """
        session = self.make(record.payload)
        errors = session.errors()
        passed = errors.is_empty()

        if not passed:
            logger.debug(
                "Record %s failed validation on %d field(s)",
                record.record_id,
                len(errors.keys()),
            )

        return ValidationResult(
            record_id=record.record_id,
            passed=passed,
            errors=errors.to_dict(),
            failed_rules=session.failed_rules(),
        )

    def validate_batch(self, records: Iterable[DataRecord]) -> list[ValidationResult]:
        """
        Validate a batch of records.

        Args:
            records: DataRecord objects

        Returns:
            List of ValidationResult objects, one per record
        """
        return [self.validate_record(record) for record in records]

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of compiled rules.

        Returns:
            Dictionary with field and rule counts
        """
        return {
            "total_fields": len(self.fields),
            "total_rules": sum(len(compiled.entries) for compiled in self.fields.values()),
            "rules_by_type": self._count_by_rule(),
            "wildcard_fields": [name for name, compiled in self.fields.items() if compiled.specification.is_wildcard],
            "numeric_fields": [name for name, compiled in self.fields.items() if compiled.declares_numeric],
        }

    def _count_by_rule(self) -> dict[str, int]:
        """Count rule uses by rule name."""
        counts: dict[str, int] = {}
        for compiled in self.fields.values():
            for entry in compiled.entries:
                counts[entry.name] = counts.get(entry.name, 0) + 1
        return counts


def make(
    data: Mapping[str, Any],
    rules: Mapping[str, Any],
    messages: Mapping[str, str] | None = None,
    attributes: Mapping[str, str] | None = None,
    registry: ConstraintRegistry | None = None,
    stop_on_first_failure: bool = False,
) -> ValidationSession:
    """Compile rules and bind them to one record."""
    return ValidationSession(
        data,
        rules,
        messages=messages,
        attributes=attributes,
        registry=registry,
        stop_on_first_failure=stop_on_first_failure,
    )


def validate(
    data: Mapping[str, Any],
    rules: Mapping[str, Any],
    messages: Mapping[str, str] | None = None,
    attributes: Mapping[str, str] | None = None,
    registry: ConstraintRegistry | None = None,
) -> dict[str, Any]:
    """
    Validate a record and return the validated data.

    Raises:
        ValidationException: If any field failed
        RuleBuildError: If the rules cannot be compiled
    """
    return make(data, rules, messages, attributes, registry).validate()
