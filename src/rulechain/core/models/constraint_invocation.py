"""
ConstraintInvocation and FieldSpecification models (parsed rule chains).
"""

from pydantic import BaseModel, Field


class ConstraintInvocation(BaseModel):
    """
    One named, parameterized constraint as written in a rule chain.

    Attributes:
        name: Lower-cased constraint name ("between")
        parameters: Raw parameter tokens (("1", "100")). For regex and
            not_regex this holds exactly one unsplit pattern token.
    """

    name: str = Field(..., min_length=1)
    parameters: tuple[str, ...] = ()

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "between",
                "parameters": ["1", "100"],
            }
        }

    def __str__(self) -> str:
        if not self.parameters:
            return self.name
        return f"{self.name}:{','.join(self.parameters)}"


class FieldSpecification(BaseModel):
    """
    The ordered constraint chain declared for one field.

    Built once when a rule set is compiled and never mutated afterwards.

    Attributes:
        field: Field name or path ("email", "user.age", "users.*.email")
        invocations: Constraints in declared order
    """

    field: str = Field(..., min_length=1)
    invocations: tuple[ConstraintInvocation, ...] = ()

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "field": "age",
                "invocations": [
                    {"name": "required", "parameters": []},
                    {"name": "integer", "parameters": []},
                    {"name": "between", "parameters": ["1", "100"]},
                ],
            }
        }

    @property
    def rule_names(self) -> list[str]:
        return [invocation.name for invocation in self.invocations]

    def has_rule(self, name: str) -> bool:
        return name.lower() in self.rule_names

    @property
    def is_wildcard(self) -> bool:
        return "*" in self.field.split(".")
