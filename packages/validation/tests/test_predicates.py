"""Tests for built-in predicates and the predicate registry."""

import re

import pytest

from formknobs_common import OperationError
from formknobs_validation import PredicateNotFoundError, PredicateRegistry, default_registry
from formknobs_validation.predicates import (
    all_of,
    any_of,
    data_equals,
    equals,
    in_range,
    is_integer,
    is_number,
    is_string,
    length,
    matches,
    one_of,
)

CTX = {}


class TestBuiltinPredicates:
    """Test the predicate factories."""

    def test_is_number(self):
        check = is_number()
        assert check(4890, CTX)
        assert check(2.5, CTX)
        assert not check(True, CTX)
        assert not check("4890", CTX)
        assert not check(float("nan"), CTX)

    def test_is_integer(self):
        check = is_integer()
        assert check(3, CTX)
        assert not check(3.0, CTX)
        assert not check(False, CTX)

    def test_is_string(self):
        assert is_string()("x", CTX)
        assert not is_string()(1, CTX)

    def test_equals(self):
        assert equals("yes")("yes", CTX)
        assert not equals("yes")("no", CTX)

    def test_one_of(self):
        check = one_of(["herbs", "wholemeal"])
        assert check("herbs", CTX)
        assert not check("grains", CTX)

    def test_one_of_case_insensitive(self):
        check = one_of(["Herbs"], case_sensitive=False)
        assert check("HERBS", CTX)

    def test_one_of_requires_values(self):
        with pytest.raises(ValueError):
            one_of([])

    def test_matches(self):
        check = matches(r"^[^@]+@[^@]+$")
        assert check("a@b.c", CTX)
        assert not check("invalid", CTX)
        assert not check(None, CTX)

    def test_matches_full(self):
        assert matches(r"\d+")("12ab", CTX)
        assert not matches(r"\d+", full=True)("12ab", CTX)
        assert matches(re.compile(r"\d+"), full=True)("12", CTX)

    def test_length(self):
        check = length(min=2, max=3)
        assert check("ab", CTX)
        assert check([1, 2, 3], CTX)
        assert not check("a", CTX)
        assert not check("abcd", CTX)
        assert not check(12, CTX)

    @pytest.mark.parametrize("kwargs", [{"min": -1}, {"max": -1}, {"min": 3, "max": 2}])
    def test_length_bounds_checked(self, kwargs):
        with pytest.raises(ValueError):
            length(**kwargs)

    def test_in_range(self):
        check = in_range(min=18, max=65)
        assert check(18, CTX)
        assert check(65, CTX)
        assert not check(17, CTX)
        assert not check("20", CTX)

    def test_in_range_exclusive(self):
        check = in_range(min=0, max=1, min_exclusive=True, max_exclusive=True)
        assert check(0.5, CTX)
        assert not check(0, CTX)
        assert not check(1, CTX)

    def test_in_range_bounds_checked(self):
        with pytest.raises(ValueError):
            in_range(min=5, max=1)

    def test_data_equals(self):
        skip = data_equals("account.type", "personal")
        assert skip({"data": {"account": {"type": "personal"}}})
        assert not skip({"data": {"account": {}}})

    @pytest.mark.asyncio
    async def test_all_of(self):
        check = all_of(is_string(), length(min=2))
        assert await check("ab", CTX)
        assert not await check("a", CTX)

    @pytest.mark.asyncio
    async def test_any_of_with_async_member(self):
        async def is_magic(value, context):
            return value == 42

        check = any_of(is_string(), is_magic)
        assert await check("x", CTX)
        assert await check(42, CTX)
        assert not await check(41, CTX)


class TestPredicateRegistry:
    """Test resolution of predicate references."""

    def test_builtins_registered(self):
        registry = default_registry()
        assert {"is_number", "one_of", "matches", "data_equals"} <= set(registry.list_keys())

    def test_empty_registry(self):
        assert PredicateRegistry(include_builtins=False).count() == 0

    def test_resolve_name(self):
        check = default_registry().resolve("is_number")
        assert check(3, CTX)

    def test_resolve_with_args(self):
        check = default_registry().resolve({"predicate": "one_of", "args": {"values": ["a"]}})
        assert check("a", CTX)
        assert not check("b", CTX)

    def test_callable_passes_through(self):
        fn = lambda value, context: True  # noqa: E731
        assert default_registry().resolve(fn) is fn

    def test_unknown_name(self):
        with pytest.raises(PredicateNotFoundError) as exc_info:
            default_registry().resolve("is_postcode")
        assert exc_info.value.context["predicate"] == "is_postcode"
        assert "is_number" in exc_info.value.context["available"]

    def test_unsupported_reference(self):
        with pytest.raises(TypeError):
            default_registry().resolve(42)

    def test_register_predicate(self):
        registry = default_registry()

        def is_postcode(value, context):
            return isinstance(value, int) and 1000 <= value <= 9999

        registry.register_predicate("is_postcode", is_postcode)

        assert registry.resolve("is_postcode") is is_postcode
        with pytest.raises(OperationError):
            registry.register_predicate("is_postcode", is_postcode)
