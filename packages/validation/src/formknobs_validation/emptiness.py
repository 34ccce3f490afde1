"""Default emptiness test for field values."""

from collections.abc import Sized
from numbers import Number
from typing import Any


def is_number(value: Any) -> bool:
    """True for real numeric values; ``bool`` does not count as a number."""
    return isinstance(value, Number) and not isinstance(value, bool)


def is_empty(value: Any) -> bool:
    """Decide whether a field value counts as empty.

    Numbers are never empty, so ``0`` satisfies a mandatory field. ``False``
    is empty. Sized values (strings, lists, dicts, ...) are empty when their
    length is zero; any other value is empty when it is falsy, which covers
    ``None``.
    """
    if is_number(value):
        return False
    if value is False:
        return True
    if isinstance(value, Sized):
        return len(value) == 0
    return not value
