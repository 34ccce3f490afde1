"""Built-in predicate factories and the registry used by config-driven rules.

Every factory returns a predicate with the test signature
``(value, context) -> bool``. ``data_equals`` returns a skip predicate taking
only the context. Predicates never raise on wrong input types; they simply
fail.

    ```python
    {"name": "age", "tests": [
        {"fn": is_number(), "message": "Age must be a number"},
        {"fn": in_range(min=18), "message": "Too young"},
    ], "stopOnFailure": "tests"}
    ```
"""

from __future__ import annotations

import inspect
import math
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from formknobs_common import Registry, get_path

from .emptiness import is_number as _is_number
from .exceptions import PredicateNotFoundError

Predicate = Callable[[Any, Mapping[str, Any]], Any]
PredicateFactory = Callable[..., Callable[..., Any]]


def is_number() -> Predicate:
    """Numbers (not bools), excluding NaN."""

    def check(value: Any, context: Mapping[str, Any]) -> bool:
        if not _is_number(value):
            return False
        return not (isinstance(value, float) and math.isnan(value))

    return check


def is_integer() -> Predicate:
    def check(value: Any, context: Mapping[str, Any]) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    return check


def is_string() -> Predicate:
    def check(value: Any, context: Mapping[str, Any]) -> bool:
        return isinstance(value, str)

    return check


def equals(value: Any) -> Predicate:
    expected = value

    def check(value: Any, context: Mapping[str, Any]) -> bool:
        return bool(value == expected)

    return check


def one_of(values: Iterable[Any], case_sensitive: bool = True) -> Predicate:
    """Value must be one of ``values``.

    Args:
        values: Allowed values
        case_sensitive: If False, string comparisons ignore case

    Raises:
        ValueError: If no values are given
    """
    allowed = list(values)
    if not allowed:
        raise ValueError("one_of requires at least one allowed value")
    if not case_sensitive:
        allowed = [v.lower() if isinstance(v, str) else v for v in allowed]

    def check(value: Any, context: Mapping[str, Any]) -> bool:
        if not case_sensitive and isinstance(value, str):
            value = value.lower()
        return value in allowed

    return check


def matches(pattern: str | re.Pattern[str], full: bool = False) -> Predicate:
    """String value must match a regex (from its start, or entirely when ``full``)."""
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    def check(value: Any, context: Mapping[str, Any]) -> bool:
        if not isinstance(value, str):
            return False
        found = regex.fullmatch(value) if full else regex.match(value)
        return found is not None

    return check


def length(min: int | None = None, max: int | None = None) -> Predicate:
    """Length must be within ``min``..``max`` (inclusive).

    Raises:
        ValueError: On negative or inverted bounds
    """
    if min is not None and min < 0:
        raise ValueError(f"min length cannot be negative: {min}")
    if max is not None and max < 0:
        raise ValueError(f"max length cannot be negative: {max}")
    if min is not None and max is not None and min > max:
        raise ValueError(f"min length ({min}) cannot be greater than max ({max})")

    def check(value: Any, context: Mapping[str, Any]) -> bool:
        if not hasattr(value, "__len__"):
            return False
        size = len(value)
        if min is not None and size < min:
            return False
        return max is None or size <= max

    return check


def in_range(
    min: float | None = None,
    max: float | None = None,
    min_exclusive: bool = False,
    max_exclusive: bool = False,
) -> Predicate:
    """Numeric value must lie within the bounds (inclusive by default).

    Raises:
        ValueError: If ``min`` is greater than ``max``
    """
    if min is not None and max is not None and float(min) > float(max):
        raise ValueError(f"min ({min}) cannot be greater than max ({max})")
    numeric = is_number()

    def check(value: Any, context: Mapping[str, Any]) -> bool:
        if not numeric(value, context):
            return False
        if min is not None:
            if value < min or (min_exclusive and value == min):
                return False
        if max is not None:
            if value > max or (max_exclusive and value == max):
                return False
        return True

    return check


def data_equals(path: str, value: Any) -> Callable[[Mapping[str, Any]], bool]:
    """Skip predicate: true when ``context["data"]`` holds ``value`` at ``path``.

    Typical use is skipping a field that only matters for some choices:
    ``{"name": "company", "skipIf": data_equals("account_type", "personal")}``.
    """
    expected = value

    def check(context: Mapping[str, Any]) -> bool:
        return bool(get_path(context.get("data"), path) == expected)

    return check


def all_of(*predicates: Predicate) -> Predicate:
    """Passes when every predicate passes; stops at the first failure."""

    async def check(value: Any, context: Mapping[str, Any]) -> bool:
        for predicate in predicates:
            result = predicate(value, context)
            if inspect.isawaitable(result):
                result = await result
            if not result:
                return False
        return True

    return check


def any_of(*predicates: Predicate) -> Predicate:
    """Passes when at least one predicate passes; stops at the first success."""

    async def check(value: Any, context: Mapping[str, Any]) -> bool:
        for predicate in predicates:
            result = predicate(value, context)
            if inspect.isawaitable(result):
                result = await result
            if result:
                return True
        return False

    return check


BUILTIN_PREDICATES: dict[str, PredicateFactory] = {
    "is_number": is_number,
    "is_integer": is_integer,
    "is_string": is_string,
    "equals": equals,
    "one_of": one_of,
    "matches": matches,
    "length": length,
    "in_range": in_range,
    "data_equals": data_equals,
}


class PredicateRegistry(Registry[PredicateFactory]):
    """Named predicate factories available to configuration files.

    A reference is either a registered name (the factory is called without
    arguments) or a mapping ``{"predicate": name, "args": {...}}``.
    """

    def __init__(self, name: str = "predicates", include_builtins: bool = True):
        super().__init__(name)
        if include_builtins:
            for key, factory in BUILTIN_PREDICATES.items():
                self.register(key, factory)

    def register_predicate(
        self, name: str, predicate: Callable[..., Any], allow_overwrite: bool = False
    ) -> None:
        """Register a ready-made predicate under ``name``.

        The predicate is wrapped in a factory that ignores arguments, so it
        can be referenced by bare name from configuration.
        """

        def factory(**_: Any) -> Callable[..., Any]:
            return predicate

        self.register(name, factory, allow_overwrite=allow_overwrite)

    def resolve(self, reference: Any) -> Callable[..., Any]:
        """Turn a predicate reference into a callable.

        Callables are returned unchanged.

        Raises:
            PredicateNotFoundError: If the name is not registered
            TypeError: If the reference has an unsupported shape
        """
        if callable(reference):
            return reference

        if isinstance(reference, str):
            name, args = reference, {}
        elif isinstance(reference, Mapping) and "predicate" in reference:
            name = reference["predicate"]
            args = dict(reference.get("args") or {})
        else:
            raise TypeError(f"Unsupported predicate reference: {reference!r}")

        factory = self.get_optional(name)
        if factory is None:
            raise PredicateNotFoundError(name, sorted(self.list_keys()))
        return factory(**args)


def default_registry() -> PredicateRegistry:
    """Fresh registry preloaded with the built-in predicates."""
    return PredicateRegistry()
