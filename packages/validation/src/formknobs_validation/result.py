"""Validation outcome returned by an evaluation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


def _empty_fields() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class ValidationOutcome:
    """Immutable result of evaluating a rule tree against data.

    ``fields`` maps every evaluated dotted path to ``True`` or to the error
    value written for it. Skipped fields, empty optional fields and fields
    cut off by a short-circuit have no entry.
    """

    valid: bool
    fields: Mapping[str, Any] = field(default_factory=_empty_fields)

    def __post_init__(self) -> None:
        if not isinstance(self.fields, MappingProxyType):
            object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __bool__(self) -> bool:
        """Allow 'if outcome:' usage to check validity."""
        return self.valid

    @property
    def errors(self) -> dict[str, Any]:
        """Paths whose entry is an error value, with their messages."""
        return {path: value for path, value in self.fields.items() if value is not True}

    @property
    def valid_paths(self) -> list[str]:
        """Paths that passed, in evaluation order."""
        return [path for path, value in self.fields.items() if value is True]

    def get(self, path: str, default: Any = None) -> Any:
        return self.fields.get(path, default)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form matching the model contract (``fields``/``isValid``)."""
        return {"fields": dict(self.fields), "isValid": self.valid}
