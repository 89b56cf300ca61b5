"""
Unit tests for data models.

Tests pydantic models for validation, serialization, and business logic.
"""

import pytest
from pydantic import ValidationError

from rulechain.core.models import (
    ConstraintInvocation,
    DataRecord,
    FieldSpecification,
    ValidationResult,
)


class TestConstraintInvocation:
    """Tests for ConstraintInvocation model"""

    def test_parameters_become_tuple(self):
        invocation = ConstraintInvocation(name="between", parameters=["1", "100"])
        assert invocation.parameters == ("1", "100")

    def test_str(self):
        assert str(ConstraintInvocation(name="required")) == "required"
        assert str(ConstraintInvocation(name="in", parameters=("a", "b"))) == "in:a,b"

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            ConstraintInvocation(name="")

    def test_frozen(self):
        invocation = ConstraintInvocation(name="min", parameters=("1",))
        with pytest.raises(ValidationError):
            invocation.name = "max"

    def test_hashable(self):
        assert len({ConstraintInvocation(name="min"), ConstraintInvocation(name="min")}) == 1


class TestFieldSpecification:
    """Tests for FieldSpecification model"""

    def test_rule_names(self):
        spec = FieldSpecification(
            field="age",
            invocations=(ConstraintInvocation(name="required"), ConstraintInvocation(name="integer")),
        )

        assert spec.rule_names == ["required", "integer"]
        assert spec.has_rule("INTEGER")
        assert not spec.has_rule("email")

    def test_is_wildcard(self):
        assert FieldSpecification(field="users.*.email").is_wildcard
        assert not FieldSpecification(field="user.email").is_wildcard
        assert not FieldSpecification(field="note*").is_wildcard


class TestDataRecord:
    """Tests for DataRecord model"""

    def test_create_record(self):
        record = DataRecord(record_id="r1", source_id="form", payload={"email": "a@b.co"})

        assert record.record_id == "r1"
        assert record.payload["email"] == "a@b.co"

    def test_defaults(self):
        record = DataRecord(record_id="r1")
        assert record.source_id is None
        assert record.payload == {}

    def test_empty_record_id_rejected(self):
        with pytest.raises(ValidationError):
            DataRecord(record_id="")


class TestValidationResult:
    """Tests for ValidationResult model"""

    def test_passed_result(self):
        result = ValidationResult(record_id="r1", passed=True)
        assert result.errors == {}
        assert result.failed_rules == []

    def test_failed_result(self):
        result = ValidationResult(
            record_id="r1",
            passed=False,
            errors={"email": ["The email field is required."]},
            failed_rules=["email.required"],
        )
        assert result.model_dump()["failed_rules"] == ["email.required"]

    def test_passed_with_failed_rules_rejected(self):
        """Test passed=True with failed rules is inconsistent"""
        with pytest.raises(ValidationError):
            ValidationResult(record_id="r1", passed=True, failed_rules=["email.required"])
