"""Tests for form state and rule validation."""

import pytest

from screenkit.state import DEFAULT_FORM, FormStore, RuleValidator, field_dep, rules_from_properties


@pytest.mark.unit
class TestFormStore:

    def test_register_and_values(self, forms):
        forms.register_field("email", "login", initial="a@b.co")
        forms.register_field("password", "login")
        forms.register_field("q")

        assert forms.fields("login") == ["email", "password"]
        assert forms.values("login") == {"email": "a@b.co", "password": None}
        assert forms.fields(DEFAULT_FORM) == ["q"]
        assert len(forms) == 3

    def test_register_keeps_typed_value(self, forms):
        forms.register_field("name", initial="first")
        forms.set_field_value("name", "typed")
        forms.register_field("name", initial="first")

        assert forms.get_field_value("name") == "typed"

    def test_set_unknown_field_registers_it(self, forms):
        forms.set_field_value("loose", 3)
        assert "loose" in forms
        assert forms.get_field("loose").form_id == DEFAULT_FORM

    def test_set_value_clears_field_error(self, forms):
        forms.register_field("a", "f")
        forms.register_field("b", "f")
        forms.set_errors({"a": "bad", "b": "bad"})

        forms.set_field_value("a", "fixed")

        assert forms.errors() == {"b": "bad"}

    def test_errors_by_form(self, forms):
        forms.register_field("a", "one")
        forms.register_field("b", "two")
        forms.set_errors({"a": "x", "b": "y"})

        assert forms.errors("one") == {"a": "x"}

    def test_reset_keeps_registrations(self, forms):
        forms.register_field("a", "f", initial="v")
        forms.set_errors({"a": "x"})
        forms.reset()

        assert forms.get_field_value("a") is None
        assert forms.errors() == {}
        assert forms.fields("f") == ["a"]

    def test_clear(self, forms):
        forms.register_field("a")
        forms.clear()
        assert len(forms) == 0
        assert forms.get_field_value("a") is None

    def test_take_changed_tracks_writes(self, forms):
        forms.register_field("a", "f", initial="seed")
        forms.register_field("b", "f")
        assert forms.take_changed() == set()

        forms.set_field_value("a", "typed")
        forms.set_errors({"b": "bad"})

        assert forms.take_changed() == {"a", "b"}
        assert forms.take_changed() == set()

    def test_reset_marks_every_field_changed(self, forms):
        forms.register_field("a", "f")
        forms.register_field("b", "g")
        forms.reset()

        assert forms.take_changed() == {"a", "b"}

    def test_field_dep(self):
        assert field_dep("email") == "@field:email"


@pytest.mark.unit
class TestRulesFromProperties:

    def test_required_flag(self):
        assert rules_from_properties({"required": True}) == [{"type": "required"}]
        assert rules_from_properties({"required": "yes"}) == []

    def test_validators_map(self):
        rules = rules_from_properties({"validators": {"required": True, "maxLength": 5, "email": False}})
        assert rules == [{"type": "required", "value": True}, {"type": "maxLength", "value": 5}]

    def test_validators_list(self):
        rules = rules_from_properties({"validators": ["email", {"type": "minLength", "value": 8}, {"bogus": 1}, 3]})
        assert rules == [{"type": "email"}, {"type": "minLength", "value": 8}]


@pytest.mark.unit
class TestRuleValidator:

    @pytest.fixture
    def validate(self, forms):
        validator = RuleValidator(forms)

        def _validate(value, *rules):
            forms.register_field("f", rules=list(rules))
            forms.set_field_value("f", value)
            return validator.validate("f")

        return _validate

    @pytest.mark.parametrize("value,valid", [(None, False), ("", False), (False, False), ([], False), ("x", True), (0, True)])
    def test_required(self, validate, value, valid):
        assert validate(value, {"type": "required"}).valid is valid

    @pytest.mark.parametrize("value,valid", [("a@b.co", True), ("nope", False), ("a@b", False), ("", True)])
    def test_email(self, validate, value, valid):
        assert validate(value, {"type": "email"}).valid is valid

    def test_length_limits(self, validate):
        assert not validate("abc", {"type": "minLength", "value": 4}).valid
        assert validate("abcd", {"type": "minLength", "value": "4"}).valid
        assert not validate("abcdef", {"type": "maxLength", "value": 5}).valid

    def test_bad_limit_is_ignored(self, validate):
        assert validate("abc", {"type": "minLength", "value": "many"}).valid

    def test_pattern_must_match_whole_value(self, validate):
        assert validate("12345", {"type": "pattern", "value": r"\d+"}).valid
        assert not validate("123ab", {"type": "pattern", "value": r"\d+"}).valid
        assert validate("x", {"type": "pattern", "value": "("}).valid

    def test_first_failing_rule_wins(self, validate):
        result = validate("", {"type": "required", "message": "Email is required"}, {"type": "email"})
        assert result.errors == {"f": "Email is required"}

    def test_unknown_rule_and_field(self, validate, forms):
        assert validate("x", {"type": "palindrome"}).valid
        assert RuleValidator(forms).validate("ghost").valid
