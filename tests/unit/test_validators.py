"""
Unit tests for the built-in constraint catalogue.

Includes property-based testing with hypothesis for validators.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rulechain import make
from rulechain.core.errors import RuleParameterError
from rulechain.core.models import FieldContext
from rulechain.core.models.field_context import INTEGER, NUMERIC
from rulechain.core.rules import ConstraintRegistry
from rulechain.core.validators import CustomValidator, NotRegexValidator, RegexValidator, RequiredValidator
from rulechain.core.validators.date_validator import DateComparisonValidator
from rulechain.core.validators.size_validator import ComparisonValidator


def check(rule: str, value, record: dict | None = None) -> bool:
    """Run one rule against one value inside a session."""
    data = dict(record or {})
    data["field"] = value
    return make(data, {"field": rule}).passes()


class TestRequiredValidator:
    """Tests for RequiredValidator"""

    def test_present_value(self):
        assert RequiredValidator().passes("name", "John Doe")

    @pytest.mark.parametrize("value", [None, "", "   ", [], {}])
    def test_empty_values_fail(self, value):
        assert not RequiredValidator().passes("name", value)

    @given(st.text(min_size=1).filter(lambda s: s.strip() != ""))
    def test_property_any_nonempty_string_passes(self, value):
        assert RequiredValidator().passes("name", value)

    def test_is_implicit(self):
        assert RequiredValidator.implicit is True


class TestPresenceValidators:
    """Tests for the present/missing/prohibited families"""

    def test_present(self):
        assert make({"f": ""}, {"f": "present"}).passes()
        assert make({}, {"f": "present"}).fails()

    def test_filled(self):
        assert make({}, {"f": "filled"}).passes()
        assert make({"f": ""}, {"f": "filled"}).fails()

    def test_missing(self):
        assert make({}, {"f": "missing"}).passes()
        assert make({"f": None}, {"f": "missing"}).fails()

    def test_missing_if(self):
        rules = {"coupon": "missing_if:plan,free"}
        assert make({"plan": "free", "coupon": "X"}, rules).fails()
        assert make({"plan": "pro", "coupon": "X"}, rules).passes()

    def test_prohibited(self):
        assert make({"f": ""}, {"f": "prohibited"}).passes()
        assert make({"f": "x"}, {"f": "prohibited"}).fails()

    def test_prohibited_unless(self):
        rules = {"discount": "prohibited_unless:role,admin"}
        assert make({"role": "admin", "discount": 10}, rules).passes()
        assert make({"role": "user", "discount": 10}, rules).fails()

    def test_prohibits(self):
        rules = {"email": "prohibits:phone"}
        assert make({"email": "a@b.co", "phone": "123"}, rules).fails()
        assert make({"email": "a@b.co"}, rules).passes()

    def test_present_with(self):
        rules = {"zip": "present_with:street"}
        assert make({"street": "Main"}, rules).fails()
        assert make({"street": "Main", "zip": None}, rules).passes()

    def test_required_without(self):
        rules = {"phone": "required_without:email"}
        assert make({}, rules).fails()
        assert make({"email": "a@b.co"}, rules).passes()

    def test_required_without_all(self):
        rules = {"phone": "required_without_all:email,fax"}
        assert make({}, rules).fails()
        assert make({"fax": "1"}, rules).passes()

    def test_required_with_all(self):
        rules = {"zip": "required_with_all:street,city"}
        assert make({"street": "Main"}, rules).passes()
        assert make({"street": "Main", "city": "Oslo"}, rules).fails()

    def test_required_if_accepted(self):
        rules = {"company": "required_if_accepted:business"}
        assert make({"business": "yes"}, rules).fails()
        assert make({"business": "no"}, rules).passes()

    def test_required_if_boolean_trigger(self):
        rules = {"reason": "required_if:flagged,true"}
        assert make({"flagged": True}, rules).fails()
        assert make({"flagged": False}, rules).passes()

    def test_required_if_message(self):
        session = make({"status": "rejected"}, {"reason": "required_if:status,rejected"})
        assert session.errors().first() == "The reason field is required when status is rejected."

    @pytest.mark.parametrize("value", ["yes", "on", "1", "true", 1, True])
    def test_accepted(self, value):
        assert check("accepted", value)

    @pytest.mark.parametrize("value", ["no", "maybe", 0, False])
    def test_not_accepted(self, value):
        assert not check("accepted", value)

    def test_accepted_absent_fails(self):
        assert make({}, {"terms": "accepted"}).fails()

    @pytest.mark.parametrize("value", ["no", "off", "0", "false", 0, False])
    def test_declined(self, value):
        assert check("declined", value)

    def test_declined_if(self):
        rules = {"marketing": "declined_if:age,15"}
        assert make({"age": 15, "marketing": "yes"}, rules).fails()
        assert make({"age": 30, "marketing": "yes"}, rules).passes()


class TestTypeValidators:
    """Tests for type rules"""

    def test_string(self):
        assert check("string", "x")
        assert not check("string", 5)

    @pytest.mark.parametrize("value", [5, "-12", 3.0])
    def test_integer(self, value):
        assert check("integer", value)

    @pytest.mark.parametrize("value", ["1.5", "abc", True])
    def test_not_integer(self, value):
        assert not check("integer", value)

    def test_numeric(self):
        assert check("numeric", "-3.5")
        assert not check("numeric", "3,5")

    def test_boolean(self):
        assert check("boolean", "false")
        assert check("boolean", 0)
        assert not check("boolean", "yes")

    def test_boolean_strict(self):
        assert check("boolean:strict", True)
        assert not check("boolean:strict", 1)

    def test_array(self):
        assert check("array", [1])
        assert check("array", {"a": 1})
        assert not check("array", "a")

    def test_array_allowed_keys(self):
        assert check("array:name,email", {"name": "x"})
        assert not check("array:name,email", {"name": "x", "role": "admin"})
        assert not check("array:name,email", ["name"])

    def test_list(self):
        assert check("list", [1, 2])
        assert not check("list", {"a": 1})

    def test_json(self):
        assert check("json", '{"a": [1, 2]}')
        assert not check("json", "{a: 1}")
        assert not check("json", {"a": 1})

    def test_decimal(self):
        assert check("decimal:2", "10.50")
        assert not check("decimal:2", "10.5")
        assert check("decimal:1,3", "10.505")

    def test_decimal_bad_range(self):
        with pytest.raises(RuleParameterError):
            make({}, {"f": "decimal:3,1"})

    def test_digits(self):
        assert check("digits:4", "0123")
        assert check("digits:4", 1234)
        assert not check("digits:4", "123")
        assert not check("digits:4", "12a4")

    def test_digits_between(self):
        assert check("digits_between:2,4", "123")
        assert not check("digits_between:2,4", "12345")

    def test_min_max_digits(self):
        assert check("min_digits:3", 100)
        assert not check("max_digits:2", 100)

    def test_multiple_of(self):
        assert check("multiple_of:5", 25)
        assert check("multiple_of:0.1", "0.3")
        assert not check("multiple_of:5", 7)

    def test_multiple_of_bad_parameter(self):
        with pytest.raises(RuleParameterError):
            make({}, {"f": "multiple_of:abc"})


class TestSizeValidators:
    """Tests for size/min/max/between"""

    def test_size_string(self):
        assert check("size:3", "abc")
        assert not check("size:3", "ab")

    def test_size_messages_by_kind(self):
        assert make({"f": "ab"}, {"f": "size:3"}).errors().first() == "The f must be 3 characters."
        assert make({"f": [1]}, {"f": "size:3"}).errors().first() == "The f must contain 3 items."
        assert make({"f": 2}, {"f": "size:3"}).errors().first() == "The f must be 3."

    def test_max(self):
        assert check("max:3", "abc")
        assert not check("max:3", "abcd")
        assert make({"f": "abcd"}, {"f": "max:3"}).errors().first() == (
            "The f may not be greater than 3 characters."
        )

    def test_between_bad_order(self):
        with pytest.raises(RuleParameterError):
            make({}, {"f": "between:10,1"})

    def test_boolean_has_no_size(self):
        assert not check("min:0", True)

    def test_context_establishes_numeric(self):
        context = FieldContext()
        context.establish(INTEGER)

        assert context.is_numeric
        assert context.established_integer

    def test_context_unknown_fact(self):
        with pytest.raises(ValueError):
            FieldContext().establish("prime")

    def test_context_numeric_is_not_integer(self):
        context = FieldContext()
        context.establish(NUMERIC)
        assert context.is_numeric and not context.established_integer

    def test_comparison_base_is_abstract(self):
        with pytest.raises(TypeError):
            ComparisonValidator(["5"])


class TestStringValidators:
    """Tests for string format rules"""

    def test_alpha(self):
        assert check("alpha", "Zoë")
        assert not check("alpha:ascii", "Zoë")
        assert not check("alpha", "abc1")

    def test_alpha_num(self):
        assert check("alpha_num", "abc123")
        assert not check("alpha_num", "abc-123")

    def test_alpha_dash(self):
        assert check("alpha_dash", "abc-12_3")
        assert not check("alpha_dash", "abc 123")

    def test_ascii_upper_lower(self):
        assert check("ascii", "plain")
        assert not check("ascii", "naïve")
        assert check("uppercase", "ABC")
        assert check("lowercase", "abc")
        assert not check("lowercase", "aBc")

    def test_starts_with_quoted_parameter(self):
        assert check('starts_with:"a,b",c', "a,b and more")
        assert check('starts_with:"a,b",c', "cat")
        assert not check('starts_with:"a,b",c', "a and b")

    def test_ends_with(self):
        assert check("ends_with:.com,.org", "example.org")
        assert not check("doesnt_end_with:.com", "example.com")
        assert check("doesnt_start_with:tmp", "file")

    def test_starts_with_message(self):
        session = make({"f": "x"}, {"f": "starts_with:a,b"})
        assert session.errors().first() == "The f must start with one of the following: a, b."

    @pytest.mark.parametrize("value", ["ann@example.com", "first.last+tag@mail.co.uk"])
    def test_email(self, value):
        assert check("email", value)

    @pytest.mark.parametrize("value", ["ann", "ann@", "@example.com", "ann@example", "ann@example.com\n"])
    def test_not_email(self, value):
        assert not check("email", value)

    def test_url(self):
        assert check("url", "https://example.com/path?q=1")
        assert not check("url", "example.com")
        assert not check("url", "ftp://example.com")
        assert check("url:ftp", "ftp://example.com")
        assert not check("url", "https://exa mple.com")

    def test_uuid(self):
        value = "123e4567-e89b-42d3-a456-426614174000"
        assert check("uuid", value)
        assert check("uuid:4", value)
        assert not check("uuid:1", value)
        assert not check("uuid", "123e4567")

    def test_ulid(self):
        assert check("ulid", "01ARZ3NDEKTSV4RRFFQ69G5FAV")
        assert not check("ulid", "81ARZ3NDEKTSV4RRFFQ69G5FAV")

    def test_hex_color(self):
        assert check("hex_color", "#fff")
        assert check("hex_color", "#A1B2C3")
        assert not check("hex_color", "fff")
        assert not check("hex_color", "#ggg")


class TestRegexValidator:
    """Tests for RegexValidator"""

    def test_valid_pattern_match(self):
        validator = RegexValidator(["^[A-Z]{3}[0-9]{3}$"])
        assert validator.passes("code", "ABC123")
        assert not validator.passes("code", "abc123")

    def test_search_semantics(self):
        """Test an unanchored pattern matches anywhere in the text"""
        assert RegexValidator(["[0-9]"]).passes("code", "abc1")

    def test_numbers_are_matched_as_text(self):
        assert RegexValidator(["^[0-9]+$"]).passes("code", 123)

    def test_non_text_fails(self):
        assert not RegexValidator([".*"]).passes("code", ["a"])
        assert not NotRegexValidator(["x"]).passes("code", ["a"])

    def test_invalid_regex_raises(self):
        with pytest.raises(RuleParameterError):
            RegexValidator(["[unclosed"])

    def test_flags_from_delimited_pattern(self):
        assert check("regex:/^abc$/i", "ABC")

    def test_pattern_with_comma_and_bar_in_list_form(self):
        session = make({"f": "dog"}, {"f": ["regex:/^(cat|dog){1,2}$/"]})
        assert session.passes()

    def test_not_regex(self):
        assert check("not_regex:/^[0-9]+$/", "abc")
        assert not check("not_regex:/^[0-9]+$/", "123")

    @given(st.text(alphabet="ABCDEFGHIJKLMNOPQRSTUVWXYZ", min_size=3, max_size=3),
           st.integers(min_value=100, max_value=999))
    def test_property_matching_codes_pass(self, letters, digits):
        validator = RegexValidator(["^[A-Z]{3}[0-9]{3}$"])
        assert validator.passes("code", f"{letters}{digits}")


class TestNetworkValidators:
    """Tests for ip/ipv4/ipv6/mac_address"""

    def test_ip(self):
        assert check("ip", "192.168.0.1")
        assert check("ip", "::1")
        assert not check("ip", "999.1.1.1")

    def test_ipv4_ipv6(self):
        assert check("ipv4", "10.0.0.1")
        assert not check("ipv4", "::1")
        assert check("ipv6", "2001:db8::1")
        assert not check("ipv6", "10.0.0.1")

    def test_mac_address(self):
        assert check("mac_address", "00:1A:2b:3C:4d:5E")
        assert check("mac_address", "00-1a-2b-3c-4d-5e")
        assert check("mac_address", "001a.2b3c.4d5e")
        assert not check("mac_address", "00:1A:2b:3C:4d")


class TestRelationshipValidators:
    """Tests for in/not_in/distinct and friends"""

    def test_in(self):
        assert check("in:red,green", "red")
        assert not check("in:red,green", "blue")

    def test_in_numbers_by_text(self):
        assert check("in:1,2,3", 2)

    def test_in_list_value(self):
        assert check("in:a,b,c", ["a", "c"])
        assert not check("in:a,b", ["a", "z"])

    def test_in_quoted_values(self):
        assert check('in:"New York, NY",Boston', "New York, NY")

    def test_not_in(self):
        assert check("not_in:admin,root", "ann")
        assert not check("not_in:admin,root", "root")
        assert not check("not_in:admin,root", ["ann", "root"])

    def test_distinct_list_value(self):
        assert check("distinct", ["a", "b"])
        assert not check("distinct", ["a", "b", "a"])

    def test_distinct_loose_vs_strict(self):
        assert not check("distinct", [1, "1"])
        assert check("distinct:strict", [1, "1"])

    def test_distinct_ignore_case(self):
        assert check("distinct", ["a", "A"])
        assert not check("distinct:ignore_case", ["a", "A"])

    def test_distinct_bad_mode(self):
        with pytest.raises(RuleParameterError):
            make({}, {"f": "distinct:fuzzy"})

    def test_same_absent_other_fails(self):
        assert not check("same:other", "x")

    def test_different_absent_other_passes(self):
        assert check("different:other", "x")

    def test_confirmed_named_field(self):
        assert check("confirmed:repeat", "pw", {"repeat": "pw"})


class TestDateValidators:
    """Tests for date rules"""

    def test_date(self):
        assert check("date", "2024-02-29")
        assert not check("date", "2023-02-29")
        assert not check("date", 12)

    def test_date_with_configured_format(self):
        registry = ConstraintRegistry(config={"date_formats": ["%d.%m.%Y"]})
        assert make({"d": "31.01.2024"}, {"d": "date"}, registry=registry).passes()
        assert make({"d": "31.01.2024"}, {"d": "date"}).fails()

    def test_date_format(self):
        assert check("date_format:Y-m-d", "2024-01-31")
        assert not check("date_format:Y-m-d", "31/01/2024")
        assert check("date_format:%d/%m/%Y", "31/01/2024")

    def test_date_format_with_colon(self):
        assert check("date_format:H:i", "13:45")

    def test_after_literal(self):
        assert check("after:2024-01-01", "2024-01-02")
        assert not check("after:2024-01-01", "2024-01-01")
        assert check("after_or_equal:2024-01-01", "2024-01-01")

    def test_before(self):
        assert check("before:2024-01-01", "2023-12-31")
        assert check("before_or_equal:2024-01-01", "2024-01-01")
        assert not check("before:2024-01-01", "2024-06-01")

    def test_date_equals(self):
        assert check("date_equals:2024-01-01", "2024-01-01")

    def test_relative_literals(self):
        assert check("before:tomorrow", "2000-01-01")
        assert check("after:yesterday", "2999-01-01")

    def test_before_message(self):
        session = make({"d": "2025-01-01"}, {"d": "before:2024-01-01"})
        assert session.errors().first() == "The d must be a date before 2024-01-01."

    def test_unparseable_value_fails(self):
        assert not check("after:2024-01-01", "soon")

    def test_comparison_base_is_abstract(self):
        with pytest.raises(TypeError):
            DateComparisonValidator(["today"])


class TestCustomValidator:
    """Tests for CustomValidator"""

    def test_simple_function(self):
        validator = CustomValidator(lambda value: value > 0, "positive")
        assert validator.passes("n", 5)
        assert not validator.passes("n", -1)

    def test_keywords_are_passed_when_declared(self):
        seen = {}

        def rule(value, attribute, record, parameters):
            seen.update(attribute=attribute, record=record, parameters=parameters)
            return True

        registry = ConstraintRegistry().register_function("spy", rule)
        assert make({"n": 1, "m": 2}, {"n": "spy:a,b"}, registry=registry).passes()
        assert seen == {"attribute": "n", "record": {"n": 1, "m": 2}, "parameters": ["a", "b"]}

    def test_implicit_function_runs_on_absent_field(self):
        registry = ConstraintRegistry().register_function(
            "always_fail", lambda value: False, message="The :attribute is unlucky.", implicit=True
        )
        session = make({}, {"n": "always_fail"}, registry=registry)
        assert session.errors().first() == "The n is unlucky."

    def test_non_implicit_function_skips_absent_field(self):
        registry = ConstraintRegistry().register_function("always_fail", lambda value: False)
        assert make({}, {"n": "always_fail"}, registry=registry).passes()

    def test_function_exception_propagates(self):
        registry = ConstraintRegistry().register_function("boom", lambda value: 1 / 0)
        with pytest.raises(ZeroDivisionError):
            make({"n": 1}, {"n": "boom"}, registry=registry).passes()

    def test_non_callable_rejected(self):
        with pytest.raises(ValueError):
            CustomValidator("not callable", "broken")
