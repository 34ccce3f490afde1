"""Rule tree definition and construction-time validation.

A rule tree is an ordered sequence of field rules. Each rule names a dotted
path relative to its parent's data scope and may carry tests, nested rules
(applied to every element of an array value) and short-circuit options.

Rules can be authored as plain dicts using the camelCase keys below, which are
the public authoring surface, or built directly from the dataclasses:

    ```python
    rules = build_rule_tree([
        {
            "name": "email",
            "tests": [{"fn": lambda v, ctx: "@" in v, "message": "Invalid email"}],
            "stopOnFailure": "fields",
        },
        {"name": "nickname", "isOptional": True},
    ])
    ```

``build_rule_tree`` is the gate every tree passes through before evaluation.
It fails fast with ``RuleConfigurationError`` on the first malformed node.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import RuleConfigurationError

logger = logging.getLogger(__name__)

TestFunction = Callable[[Any, Mapping[str, Any]], Any]
SkipPredicate = Callable[[Mapping[str, Any]], Any]
EmptyPredicate = Callable[[Any], Any]


class StopScope(str, Enum):
    """How far a short-circuit reaches once it triggers.

    ``TESTS`` stops the remaining tests of the current field; ``FIELDS`` does
    that and also stops the remaining sibling fields.
    """

    NONE = "none"
    TESTS = "tests"
    FIELDS = "fields"

    @classmethod
    def parse(cls, value: Any, location: str = "", key: str = "") -> StopScope:
        """Convert an authored stop option into a scope.

        Only an absent value, a ``StopScope`` member or the literals ``"tests"``
        and ``"fields"`` are accepted.

        Raises:
            RuleConfigurationError: For any other value
        """
        if value is None:
            return cls.NONE
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in (cls.TESTS.value, cls.FIELDS.value):
            return cls(value)
        raise RuleConfigurationError(
            f"{key} must be one of 'tests' or 'fields', got {value!r}",
            location=location,
            key=key,
            value=value,
        )

    def __bool__(self) -> bool:
        return self is not StopScope.NONE


@dataclass(frozen=True)
class TestDescriptor:
    """A single predicate run against a field value."""

    __test__ = False  # keep pytest from collecting this class

    fn: TestFunction
    message: Any = None


@dataclass(frozen=True)
class FieldRule:
    """One validation unit of a rule tree."""

    name: str
    is_optional: bool = False
    empty_field_message: Any = None
    empty_test: EmptyPredicate | None = None
    skip_if: SkipPredicate | None = None
    tests: tuple[TestDescriptor, ...] | None = None
    fields: tuple[FieldRule, ...] | None = None
    stop_on_failure: StopScope = StopScope.NONE
    stop_on_success: StopScope = StopScope.NONE


# authoring key -> FieldRule attribute
RULE_KEYS: dict[str, str] = {
    "name": "name",
    "isOptional": "is_optional",
    "emptyFieldMessage": "empty_field_message",
    "emptyTest": "empty_test",
    "skipIf": "skip_if",
    "tests": "tests",
    "fields": "fields",
    "stopOnFailure": "stop_on_failure",
    "stopOnSuccess": "stop_on_success",
}
RULE_KEYS.update({attr: attr for attr in list(RULE_KEYS.values())})

LEGACY_NAME_KEY = "field"


def build_rule_tree(
    rules: Sequence[Mapping[str, Any] | FieldRule],
    warn_on_duplicate_names: bool = True,
) -> tuple[FieldRule, ...]:
    """Validate and normalize a rule tree.

    Args:
        rules: Ordered rules as dicts (authoring keys) or ``FieldRule`` objects
        warn_on_duplicate_names: Log a warning when siblings share a name

    Returns:
        The immutable tree used by the evaluator

    Raises:
        RuleConfigurationError: On the first malformed node
    """
    return _build_level(rules, "fields", warn_on_duplicate_names)


def _build_level(
    rules: Any, location: str, warn_on_duplicate_names: bool
) -> tuple[FieldRule, ...]:
    if isinstance(rules, (str, bytes, Mapping)) or not isinstance(rules, Sequence):
        raise RuleConfigurationError(
            f"rule list must be a sequence, got {type(rules).__name__}", location=location
        )

    built = tuple(
        _build_rule(rule, f"{location}[{idx}]", warn_on_duplicate_names)
        for idx, rule in enumerate(rules)
    )

    if warn_on_duplicate_names:
        seen: set[str] = set()
        for rule in built:
            if rule.name in seen:
                logger.warning(
                    f"Duplicate field name '{rule.name}' in {location}; later results overwrite earlier ones"
                )
            seen.add(rule.name)

    return built


def _build_rule(rule: Any, location: str, warn_on_duplicate_names: bool) -> FieldRule:
    if isinstance(rule, FieldRule):
        values = {attr: getattr(rule, attr) for attr in set(RULE_KEYS.values())}
    elif isinstance(rule, Mapping):
        values = _collect_values(rule, location)
    else:
        raise RuleConfigurationError(
            f"rule must be a mapping or FieldRule, got {type(rule).__name__}",
            location=location,
        )

    name = values.get("name")
    if not isinstance(name, str) or not name.strip():
        raise RuleConfigurationError(
            "'name' is required and must be a non-empty string",
            location=location,
            key="name",
            value=name,
        )
    location = f"{location}({name})"

    for key in ("empty_test", "skip_if"):
        predicate = values.get(key)
        if predicate is not None and not callable(predicate):
            raise RuleConfigurationError(
                f"{key} must be callable", location=location, key=key, value=predicate
            )

    tests = values.get("tests")
    nested = values.get("fields")

    return FieldRule(
        name=name,
        is_optional=bool(values.get("is_optional", False)),
        empty_field_message=values.get("empty_field_message"),
        empty_test=values.get("empty_test"),
        skip_if=values.get("skip_if"),
        tests=_build_tests(tests, location) if tests is not None else None,
        fields=(
            _build_level(nested, f"{location}.fields", warn_on_duplicate_names)
            if nested is not None
            else None
        ),
        stop_on_failure=StopScope.parse(
            values.get("stop_on_failure"), location, "stopOnFailure"
        ),
        stop_on_success=StopScope.parse(
            values.get("stop_on_success"), location, "stopOnSuccess"
        ),
    )


def _collect_values(rule: Mapping[str, Any], location: str) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, value in rule.items():
        attr = RULE_KEYS.get(key)
        if attr is not None:
            values[attr] = value
        elif key == LEGACY_NAME_KEY:
            continue
        else:
            logger.warning(f"Ignoring unknown rule key '{key}' at {location}")

    if "name" not in values and LEGACY_NAME_KEY in rule:
        logger.warning(f"Rule key 'field' at {location} is deprecated, use 'name'")
        values["name"] = rule[LEGACY_NAME_KEY]
    return values


def _build_tests(tests: Any, location: str) -> tuple[TestDescriptor, ...]:
    if isinstance(tests, (str, bytes, Mapping)) or not isinstance(tests, Sequence):
        raise RuleConfigurationError(
            f"tests must be a sequence, got {type(tests).__name__}",
            location=location,
            key="tests",
            value=tests,
        )

    built = []
    for idx, test in enumerate(tests):
        test_location = f"{location}.tests[{idx}]"
        if isinstance(test, TestDescriptor):
            descriptor = test
        elif isinstance(test, Mapping):
            descriptor = TestDescriptor(fn=test.get("fn"), message=test.get("message"))
        else:
            raise RuleConfigurationError(
                f"test must be a mapping or TestDescriptor, got {type(test).__name__}",
                location=test_location,
            )
        if not callable(descriptor.fn):
            raise RuleConfigurationError(
                "test 'fn' must be callable", location=test_location, key="fn", value=descriptor.fn
            )
        built.append(descriptor)
    return tuple(built)
