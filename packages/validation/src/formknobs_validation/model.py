"""Model objects that receive validation results.

A model is whatever a form component owns: something with a mutable
``fields`` mapping and a validity flag. Two shapes are supported:

- objects exposing a ``fields`` attribute and a validity flag, either
  ``isValid`` when the object already has one, or ``is_valid`` as on
  ``FormModel``;
- mutable mappings with ``"fields"`` and ``"isValid"`` keys.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Any

from formknobs_common import ValidationError

from .result import ValidationOutcome


@dataclass
class FormModel:
    """Minimal model: per-path results plus the aggregate flag."""

    fields: dict[str, Any] = field(default_factory=dict)
    is_valid: bool = False

    def reset(self) -> None:
        """Forget previous results."""
        self.fields.clear()
        self.is_valid = False

    def error_for(self, path: str) -> Any:
        """Return the error value at ``path``, or None when it passed or was not evaluated."""
        value = self.fields.get(path)
        return None if value is True else value


def validity_attribute(model: Any) -> str:
    """Name of the flag attribute an object model exposes."""
    return "isValid" if hasattr(model, "isValid") else "is_valid"


def check_model(model: Any) -> None:
    """Reject objects that cannot hold validation results.

    Raises:
        ValidationError: If ``model`` has no usable ``fields`` mapping
    """
    if isinstance(model, MutableMapping):
        fields = model.get("fields")
        if fields is None:
            return
    else:
        fields = getattr(model, "fields", None)
    if not isinstance(fields, MutableMapping):
        raise ValidationError(
            "Model must expose a mutable 'fields' mapping",
            context={"model_type": type(model).__name__},
        )


def apply_outcome(model: Any, outcome: ValidationOutcome) -> bool:
    """Merge an outcome into a model.

    Existing entries the caller seeded are kept unless the outcome writes the
    same path.

    Returns:
        The aggregate validity written to the model
    """
    if isinstance(model, MutableMapping):
        fields = model.get("fields")
        if fields is None:
            fields = model["fields"] = {}
        fields.update(outcome.fields)
        model["isValid"] = outcome.valid
    else:
        model.fields.update(outcome.fields)
        setattr(model, validity_attribute(model), outcome.valid)
    return outcome.valid
