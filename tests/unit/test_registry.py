"""
Unit tests for the constraint registry.
"""

import pytest

from rulechain.core.errors import RuleBuildError, RuleParameterError, UnknownRuleError
from rulechain.core.rules import ConstraintRegistry, RuleEngine, default_registry
from rulechain.core.validators import BaseValidator, CustomValidator
from rulechain.core.validators.presence_validator import RequiredValidator


class ShoutValidator(BaseValidator):
    rule_name = "shout"
    default_message = "The :attribute must be shouted."

    def passes(self, attribute, value):
        return isinstance(value, str) and value.isupper()


class TestConstraintRegistry:
    """Tests for ConstraintRegistry"""

    def test_builtin_catalogue(self, registry):
        for name in ("required", "email", "between", "regex", "after", "distinct", "bail"):
            assert name in registry

    def test_lookup_is_case_insensitive(self, registry):
        assert registry.has("REQUIRED")
        assert isinstance(registry.build("Required"), RequiredValidator)

    def test_names_sorted(self, registry):
        names = registry.names()
        assert names == sorted(names)
        assert len(names) == len(registry)

    def test_unknown_rule(self, registry):
        with pytest.raises(UnknownRuleError) as exc_info:
            registry.build("frobnicate", field="email")

        assert exc_info.value.rule == "frobnicate"
        assert exc_info.value.field == "email"
        assert "frobnicate" in str(exc_info.value)

    def test_malformed_numeric_parameter(self, registry):
        with pytest.raises(RuleParameterError) as exc_info:
            registry.build("min", ["abc"], field="age")

        assert exc_info.value.rule == "min"
        assert exc_info.value.field == "age"

    def test_missing_parameters(self, registry):
        with pytest.raises(RuleParameterError):
            registry.build("between", ["1"])

    def test_invalid_regex_is_build_error(self, registry):
        with pytest.raises(RuleParameterError):
            registry.build("regex", ["[unclosed"])

    def test_each_build_returns_fresh_instance(self, registry):
        assert registry.build("min", ["1"]) is not registry.build("min", ["1"])

    def test_register_class(self, registry):
        registry.register("shout", ShoutValidator)
        assert isinstance(registry.build("shout"), ShoutValidator)

    def test_custom_entry_shadows_builtin(self, registry):
        registry.register("email", ShoutValidator)
        assert isinstance(registry.build("email"), ShoutValidator)

    def test_shadowing_does_not_touch_other_registries(self, registry):
        registry.register("email", ShoutValidator)
        assert not isinstance(ConstraintRegistry().build("email"), ShoutValidator)
        assert not isinstance(default_registry().build("email"), ShoutValidator)

    def test_register_function(self, registry):
        registry.register_function("even", lambda value: int(value) % 2 == 0, message="The :attribute must be even.")
        validator = registry.build("even")

        assert isinstance(validator, CustomValidator)
        assert validator.passes("n", "4")
        assert not validator.passes("n", "3")
        assert validator.message() == "The :attribute must be even."

    def test_register_plain_constructor(self, registry):
        registry.register("shout", lambda config, parameters: ShoutValidator(parameters, config))
        assert isinstance(registry.build("shout"), ShoutValidator)

    def test_constructor_returning_wrong_type(self, registry):
        registry.register("broken", lambda config, parameters: object())
        with pytest.raises(RuleParameterError):
            registry.build("broken")

    def test_constructor_exception_is_wrapped(self, registry):
        def explode(config, parameters):
            raise KeyError("boom")

        registry.register("explode", explode)
        with pytest.raises(RuleParameterError) as exc_info:
            registry.build("explode")
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_register_rejects_non_callable(self, registry):
        with pytest.raises(TypeError):
            registry.register("bad", 42)

    def test_register_rejects_empty_name(self, registry):
        with pytest.raises(ValueError):
            registry.register("  ", ShoutValidator)

    def test_config_reaches_constructors(self, registry):
        registry.set_config("url_schemes", ["ftp"])
        validator = registry.build("url")

        assert validator.passes("link", "ftp://files.example.com")
        assert not validator.passes("link", "https://example.com")

    def test_config_is_read_only_view(self, registry):
        registry.set_config("key", "value")
        with pytest.raises(TypeError):
            registry.config["key"] = "other"
        registry.unset_config("key")
        assert "key" not in registry.config

    def test_numeric_rules(self, registry):
        assert registry.is_numeric_rule("integer")
        assert not registry.is_numeric_rule("even")
        registry.register_numeric_rule("even")
        assert registry.declares_numeric(["required", "even"])


class TestDefaultRegistry:
    """The shared default registry is read-only"""

    def test_default_registry_is_shared_and_frozen(self):
        assert default_registry() is default_registry()
        assert default_registry().frozen

    @pytest.mark.parametrize("change", [
        lambda registry: registry.register("shout", ShoutValidator),
        lambda registry: registry.register_function("even", lambda value: True),
        lambda registry: registry.register_numeric_rule("even"),
        lambda registry: registry.set_config("url_schemes", ["ftp"]),
        lambda registry: registry.unset_config("url_schemes"),
    ])
    def test_changes_to_default_registry_rejected(self, change):
        with pytest.raises(RuntimeError):
            change(default_registry())

        assert not default_registry().has("shout")
        assert not default_registry().is_numeric_rule("even")
        assert "url_schemes" not in default_registry().config

    def test_frozen_registry_still_builds(self):
        registry = ConstraintRegistry().freeze()
        assert isinstance(registry.build("required"), RequiredValidator)

    def test_fresh_registry_is_mutable(self, registry):
        assert not registry.frozen
        registry.register("shout", ShoutValidator)
        assert registry.has("shout")


class TestBuildTimeErrors:
    """Unknown and malformed rules fail when rules are compiled, never at run time"""

    def test_unknown_rule_fails_before_any_record(self):
        with pytest.raises(UnknownRuleError) as exc_info:
            RuleEngine({"email": "required|emial"})
        assert exc_info.value.field == "email"

    def test_malformed_parameter_names_field_and_rule(self):
        with pytest.raises(RuleBuildError) as exc_info:
            RuleEngine({"age": "integer|min:abc"})

        assert exc_info.value.field == "age"
        assert exc_info.value.rule == "min"
        assert "age" in str(exc_info.value)

    def test_unknown_rule_is_never_skipped_for_absent_values(self):
        """Test an unknown rule fails even though the field would be skipped"""
        with pytest.raises(UnknownRuleError):
            RuleEngine({"nickname": "nullable|sparkly"})
