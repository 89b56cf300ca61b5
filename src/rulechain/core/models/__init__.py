"""
Core data models for the rule-chain validation engine.

Record-facing models use Pydantic for runtime validation and type safety.
FieldContext is a plain dataclass mutated while a chain runs.
"""

from .constraint_invocation import ConstraintInvocation, FieldSpecification
from .data_record import DataRecord
from .field_context import FieldContext
from .validation_result import ValidationResult

__all__ = [
    "ConstraintInvocation",
    "FieldSpecification",
    "DataRecord",
    "FieldContext",
    "ValidationResult",
]
