"""
DataRecord model representing a single record submitted for validation.
"""

from typing import Any

from pydantic import BaseModel, Field


class DataRecord(BaseModel):
    """
    A single record to validate (ephemeral, used by batch validation).

    Attributes:
        record_id: Identifier used to correlate the ValidationResult
        source_id: Optional name of where the record came from
        payload: Field name to value mapping; values may be nested mappings
            or lists addressed with dotted and wildcard paths
    """

    record_id: str = Field(..., min_length=1)
    source_id: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "record_id": "signup-0001",
                "source_id": "signup_form",
                "payload": {
                    "email": "user@example.com",
                    "age": "34",
                    "users": [{"email": "a@example.com"}],
                },
            }
        }
