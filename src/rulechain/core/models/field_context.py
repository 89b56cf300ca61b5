"""
Per-field transient state shared by the constraints of one chain.
"""

from dataclasses import dataclass

NUMERIC = "numeric"
INTEGER = "integer"


@dataclass
class FieldContext:
    """
    Facts accumulated while one field's chain runs.

    Created fresh for every field evaluation (every expanded wildcard
    element gets its own) and discarded afterwards. Facts are sticky: once
    established they stay set for the rest of the chain.

    Attributes:
        declares_numeric: The chain contains a numeric-establishing rule
        established_numeric: A numeric-establishing rule has passed
        established_integer: An integer rule has passed
    """

    declares_numeric: bool = False
    established_numeric: bool = False
    established_integer: bool = False

    def establish(self, fact: str) -> None:
        if fact == NUMERIC:
            self.established_numeric = True
        elif fact == INTEGER:
            self.established_numeric = True
            self.established_integer = True
        else:
            raise ValueError(f"Unknown field context fact: {fact}")

    @property
    def is_numeric(self) -> bool:
        """Whether size rules should read this field as a number."""
        return self.established_numeric or self.declares_numeric
