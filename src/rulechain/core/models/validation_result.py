"""
ValidationResult model representing the outcome of validating a record (ephemeral).
"""

from pydantic import BaseModel, Field, field_validator


class ValidationResult(BaseModel):
    """
    Outcome of validating a record (ephemeral, not persisted).

    Attributes:
        record_id: Which record was validated
        passed: Overall validation status (error bag empty)
        errors: Rendered messages per field, in failure order
        failed_rules: "<field>.<rule>" entries for every recorded failure
    """

    record_id: str
    passed: bool
    errors: dict[str, list[str]] = Field(default_factory=dict)
    failed_rules: list[str] = Field(default_factory=list)

    @field_validator('failed_rules')
    @classmethod
    def check_passed_consistency(cls, v, info):
        """Validate that passed=True implies failed_rules is empty."""
        if info.data.get('passed') and len(v) > 0:
            raise ValueError("passed=True but failed_rules is not empty")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "record_id": "signup-0002",
                "passed": False,
                "errors": {
                    "email": ["The email must be a valid email address."],
                    "users.1.email": ["The users.1.email field is required."],
                },
                "failed_rules": [
                    "email.email",
                    "users.1.email.required",
                ],
            }
        }
