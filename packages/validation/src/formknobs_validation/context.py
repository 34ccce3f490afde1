"""Read-only context handed to skip and test predicates."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


def build_context(
    path: str, data: Any, extra: Mapping[str, Any] | None = None
) -> Mapping[str, Any]:
    """Build the immutable per-field context.

    The context holds the field's full path under both ``name`` and ``field``
    and the data scope the field was read from under ``data``. Caller-supplied
    entries are merged last, so they win over the built-in keys.

    Args:
        path: Full dotted path of the field being evaluated
        data: Data scope (the root data, or the array element for nested rules)
        extra: Caller-supplied context for this evaluation

    Returns:
        A read-only mapping
    """
    context: dict[str, Any] = {"name": path, "field": path, "data": data}
    if extra:
        context.update(extra)
    return MappingProxyType(context)
