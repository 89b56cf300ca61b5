"""
Rule configuration management.

Loads field specifications from YAML files and provides a fluent builder
for assembling them in code.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from rulechain.core.models import ConstraintInvocation

from .registry import ConstraintRegistry
from .rule_engine import RuleEngine

RuleItem = str | tuple[str, list[str]]

# Builder type names -> rule names
TYPE_RULES = {
    "integer": "integer",
    "int": "integer",
    "numeric": "numeric",
    "number": "numeric",
    "float": "numeric",
    "decimal": "numeric",
    "string": "string",
    "str": "string",
    "boolean": "boolean",
    "bool": "boolean",
    "array": "array",
    "list": "list",
    "json": "json",
    "date": "date",
}


class RuleConfig(BaseModel):
    """
    A complete rule configuration.

    Attributes:
        rules: Field name -> pipe string, or list of single rules
        messages: Custom message templates ("email.required", "required")
        attributes: Display names for :attribute
        stop_on_first_failure: Halt each run at its first failure
        config: Registry configuration (url_schemes, date_formats)
    """

    rules: dict[str, str | list[RuleItem]]
    messages: dict[str, str] = Field(default_factory=dict)
    attributes: dict[str, str] = Field(default_factory=dict)
    stop_on_first_failure: bool = False
    config: dict[str, Any] = Field(default_factory=dict)

    @field_validator("rules")
    @classmethod
    def rules_not_empty(cls, v):
        if not v:
            raise ValueError("rules section must declare at least one field")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "rules": {
                    "email": "required|email",
                    "age": "required|integer|between:18,120",
                    "code": ["required", "regex:/^[A-Z]{3}|[0-9]{3}$/"],
                },
                "messages": {"email.required": "We need your email address."},
                "attributes": {"email": "email address"},
                "stop_on_first_failure": False,
            }
        }

    def build_engine(self, registry: ConstraintRegistry | None = None) -> RuleEngine:
        """Compile this configuration into a RuleEngine."""
        if registry is None:
            registry = ConstraintRegistry(config=self.config)
        else:
            for key, value in self.config.items():
                registry.set_config(key, value)
        return RuleEngine(
            self.rules,
            registry=registry,
            messages=self.messages,
            attributes=self.attributes,
            stop_on_first_failure=self.stop_on_first_failure,
        )


class RuleConfigLoader:
    """
    Loads field specifications from YAML configuration files.

    Expected YAML format:
    ```yaml
    rules:
      transaction_id: "required|regex:/^TXN[0-9]{10}$/"

      amount:
        - required
        - numeric
        - between:0.01,1000000

      code:
        - type: regex
          params: ["^[A-Z]{3}|[0-9]{3}$"]

    messages:
      amount.between: "Amounts must stay between :min and :max."

    attributes:
      transaction_id: transaction ID
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load(self) -> RuleConfig:
        """
        Load and parse the configuration file.

        Returns:
            RuleConfig ready to build an engine from

        Raises:
            ValueError: If YAML is invalid or missing required sections
        """
        with open(self.config_path) as f:
            try:
                config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(config, dict) or "rules" not in config:
            raise ValueError("Configuration file must contain 'rules' section")

        field_rules = config["rules"]
        if not isinstance(field_rules, dict):
            raise ValueError("'rules' section must map field names to rule specifications")

        rules = {
            str(field_name): self._parse_field(str(field_name), spec)
            for field_name, spec in field_rules.items()
        }

        try:
            return RuleConfig(
                rules=rules,
                messages=config.get("messages") or {},
                attributes=config.get("attributes") or {},
                stop_on_first_failure=bool(config.get("stop_on_first_failure", False)),
                config=config.get("config") or {},
            )
        except ValidationError as e:
            raise ValueError(f"Invalid rule configuration in {self.config_path}: {e}") from e

    def load_rules(self) -> dict[str, str | list[RuleItem]]:
        """Load only the field -> specification mapping."""
        return self.load().rules

    def build_engine(self, registry: ConstraintRegistry | None = None) -> RuleEngine:
        return self.load().build_engine(registry)

    def _parse_field(self, field_name: str, spec: Any) -> str | list[RuleItem]:
        """
        Normalize one field's specification.

        Raises:
            ValueError: If the specification has an unsupported shape
        """
        if isinstance(spec, str):
            return spec
        if not isinstance(spec, list):
            raise ValueError(f"Rules for field '{field_name}' must be a string or a list")
        return [self._parse_rule(field_name, item, idx) for idx, item in enumerate(spec)]

    def _parse_rule(self, field_name: str, rule_def: Any, idx: int) -> RuleItem:
        if isinstance(rule_def, str):
            return rule_def

        if isinstance(rule_def, dict):
            if "type" not in rule_def:
                raise ValueError(f"Rule {idx} for field '{field_name}' is missing 'type'")
            params = rule_def.get("params", rule_def.get("parameters", []))
            if not isinstance(params, list):
                params = [params]
            return (str(rule_def["type"]), [str(p) for p in params])

        raise ValueError(f"Rule {idx} for field '{field_name}' must be a string or a mapping")


class RuleConfigBuilder:
    """
    Programmatically build rule configurations (for testing or dynamic rules).

    Example:
        engine = (
            RuleConfigBuilder()
            .add_required("email")
            .add("email", "email")
            .add_range("age", min_value=18)
            .message("age.min", "Adults only.")
            .build_engine()
        )
    """

    def __init__(self):
        """Initialize empty rule configuration."""
        self.rules: dict[str, list[RuleItem]] = {}
        self.messages: dict[str, str] = {}
        self.attributes: dict[str, str] = {}
        self.stop_on_first_failure = False

    def add(self, field_name: str, *rules: RuleItem | ConstraintInvocation) -> "RuleConfigBuilder":
        """Append single rules ("min:3", ("in", ["a", "b"])) to a field."""
        chain = self.rules.setdefault(field_name, [])
        for rule in rules:
            if isinstance(rule, ConstraintInvocation):
                chain.append((rule.name, list(rule.parameters)))
            else:
                chain.append(rule)
        return self

    def add_required(self, field_name: str) -> "RuleConfigBuilder":
        """Add a required rule."""
        return self.add(field_name, "required")

    def add_type_check(self, field_name: str, expected_type: str) -> "RuleConfigBuilder":
        """Add a type rule ("integer", "float", "string", "boolean", ...)."""
        rule = TYPE_RULES.get(expected_type.lower())
        if rule is None:
            raise ValueError(f"Unsupported type: {expected_type}")
        return self.add(field_name, rule)

    def add_range(
        self,
        field_name: str,
        min_value: float | None = None,
        max_value: float | None = None
    ) -> "RuleConfigBuilder":
        """Add a numeric range rule (inclusive bounds)."""
        if min_value is None and max_value is None:
            raise ValueError("add_range requires at least one of: min_value, max_value")

        if not any(self._rule_name(rule) in ("numeric", "integer", "int") for rule in self.rules.get(field_name, [])):
            self.add(field_name, "numeric")

        if min_value is not None and max_value is not None:
            return self.add(field_name, ("between", [str(min_value), str(max_value)]))
        if min_value is not None:
            return self.add(field_name, ("min", [str(min_value)]))
        return self.add(field_name, ("max", [str(max_value)]))

    def add_regex(self, field_name: str, pattern: str) -> "RuleConfigBuilder":
        """Add a regex rule; the pattern is kept whole, "|" and "," included."""
        return self.add(field_name, ("regex", [pattern]))

    def message(self, key: str, text: str) -> "RuleConfigBuilder":
        """Set a custom message for "<field>.<rule>" or "<rule>"."""
        self.messages[key] = text
        return self

    def attribute(self, field_name: str, display_name: str) -> "RuleConfigBuilder":
        """Set the display name substituted for :attribute."""
        self.attributes[field_name] = display_name
        return self

    def stop_on_first(self, enabled: bool = True) -> "RuleConfigBuilder":
        self.stop_on_first_failure = enabled
        return self

    def build(self) -> RuleConfig:
        """Build and return the rule configuration."""
        return RuleConfig(
            rules={name: list(chain) for name, chain in self.rules.items()},
            messages=dict(self.messages),
            attributes=dict(self.attributes),
            stop_on_first_failure=self.stop_on_first_failure,
        )

    def build_engine(self, registry: ConstraintRegistry | None = None) -> RuleEngine:
        return self.build().build_engine(registry)

    @staticmethod
    def _rule_name(rule: RuleItem) -> str:
        if isinstance(rule, tuple):
            return rule[0]
        return rule.partition(":")[0].strip().lower()
