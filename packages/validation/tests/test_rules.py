"""Tests for rule tree construction and validation."""

import logging

import pytest

from formknobs_common import ConfigurationError
from formknobs_validation import (
    FieldRule,
    RuleConfigurationError,
    StopScope,
    TestDescriptor,
    build_rule_tree,
)


def always_true(value, context):
    return True


class TestStopScope:
    """Test stop option parsing."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, StopScope.NONE),
            ("tests", StopScope.TESTS),
            ("fields", StopScope.FIELDS),
            (StopScope.FIELDS, StopScope.FIELDS),
        ],
    )
    def test_accepted_values(self, raw, expected):
        assert StopScope.parse(raw) is expected

    @pytest.mark.parametrize("raw", ["all", "none", "Tests", True, False, 1])
    def test_rejected_values(self, raw):
        with pytest.raises(RuleConfigurationError):
            StopScope.parse(raw, "fields[0]", "stopOnFailure")

    def test_truthiness(self):
        assert not StopScope.NONE
        assert StopScope.TESTS
        assert StopScope.FIELDS


class TestBuildRuleTree:
    """Test the construction-time gate."""

    def test_authoring_keys_are_normalized(self):
        skip = lambda context: False  # noqa: E731
        empty = lambda value: False  # noqa: E731
        rules = build_rule_tree([
            {
                "name": "email",
                "isOptional": True,
                "emptyFieldMessage": "Email please",
                "emptyTest": empty,
                "skipIf": skip,
                "tests": [{"fn": always_true, "message": "bad"}],
                "stopOnFailure": "tests",
                "stopOnSuccess": "fields",
            }
        ])

        rule = rules[0]
        assert rule == FieldRule(
            name="email",
            is_optional=True,
            empty_field_message="Email please",
            empty_test=empty,
            skip_if=skip,
            tests=(TestDescriptor(fn=always_true, message="bad"),),
            stop_on_failure=StopScope.TESTS,
            stop_on_success=StopScope.FIELDS,
        )

    def test_snake_case_keys_accepted(self):
        rules = build_rule_tree([{"name": "age", "is_optional": True}])
        assert rules[0].is_optional is True

    def test_defaults(self):
        rule = build_rule_tree([{"name": "age"}])[0]
        assert rule.is_optional is False
        assert rule.tests is None
        assert rule.fields is None
        assert rule.stop_on_failure is StopScope.NONE
        assert rule.stop_on_success is StopScope.NONE

    def test_nested_fields(self):
        rules = build_rule_tree([
            {"name": "subs", "fields": [{"name": "bread"}, {"name": "filling"}]}
        ])
        assert [child.name for child in rules[0].fields] == ["bread", "filling"]

    def test_field_rule_instances_pass_through(self):
        rule = FieldRule(name="age", tests=[TestDescriptor(always_true)], stop_on_failure="fields")
        built = build_rule_tree([rule])[0]

        assert built.tests == (TestDescriptor(always_true),)
        assert built.stop_on_failure is StopScope.FIELDS

    def test_tree_is_immutable(self):
        rule = build_rule_tree([{"name": "age"}])[0]
        with pytest.raises(AttributeError):
            rule.name = "other"

    def test_null_tests_treated_as_absent(self):
        assert build_rule_tree([{"name": "name", "tests": None}])[0].tests is None

    @pytest.mark.parametrize("rule", [{}, {"name": ""}, {"name": "   "}, {"name": 3}])
    def test_missing_or_blank_name(self, rule):
        with pytest.raises(RuleConfigurationError) as exc_info:
            build_rule_tree([rule])
        assert exc_info.value.context["location"] == "fields[0]"
        assert exc_info.value.key == "name"

    def test_nested_missing_name_reports_location(self):
        with pytest.raises(RuleConfigurationError) as exc_info:
            build_rule_tree([{"name": "subs", "fields": [{"name": "bread"}, {"isOptional": True}]}])
        assert exc_info.value.location == "fields[0](subs).fields[1]"

    def test_invalid_stop_option(self):
        with pytest.raises(RuleConfigurationError) as exc_info:
            build_rule_tree([{"name": "age", "stopOnSuccess": "everything"}])
        assert exc_info.value.context["key"] == "stopOnSuccess"
        assert exc_info.value.context["value"] == "everything"

    def test_invalid_nested_stop_option(self):
        with pytest.raises(RuleConfigurationError):
            build_rule_tree([{"name": "subs", "fields": [{"name": "bread", "stopOnFailure": True}]}])

    def test_configuration_error_base(self):
        with pytest.raises(ConfigurationError):
            build_rule_tree([{"stopOnFailure": "tests"}])

    def test_test_without_callable(self):
        with pytest.raises(RuleConfigurationError) as exc_info:
            build_rule_tree([{"name": "age", "tests": [{"message": "no fn"}]}])
        assert exc_info.value.location == "fields[0](age).tests[0]"

    def test_non_callable_skip_if(self):
        with pytest.raises(RuleConfigurationError):
            build_rule_tree([{"name": "age", "skipIf": True}])

    @pytest.mark.parametrize("rules", ["name", {"name": "age"}, None])
    def test_rule_list_must_be_sequence(self, rules):
        with pytest.raises(RuleConfigurationError):
            build_rule_tree(rules)

    def test_rule_must_be_mapping(self):
        with pytest.raises(RuleConfigurationError):
            build_rule_tree(["age"])

    def test_legacy_field_key(self, caplog):
        """Test that the old 'field' key still names a rule."""
        with caplog.at_level(logging.WARNING):
            rules = build_rule_tree([{"field": "age"}])
        assert rules[0].name == "age"
        assert "deprecated" in caplog.text

    def test_name_wins_over_legacy_key(self):
        assert build_rule_tree([{"name": "age", "field": "other"}])[0].name == "age"

    def test_duplicate_names_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            build_rule_tree([{"name": "age"}, {"name": "age"}])
        assert "Duplicate field name 'age'" in caplog.text

    def test_duplicate_warning_can_be_disabled(self, caplog):
        with caplog.at_level(logging.WARNING):
            build_rule_tree([{"name": "age"}, {"name": "age"}], warn_on_duplicate_names=False)
        assert "Duplicate" not in caplog.text

    def test_unknown_keys_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            build_rule_tree([{"name": "age", "required": True}])
        assert "unknown rule key 'required'" in caplog.text
