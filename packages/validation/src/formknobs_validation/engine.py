"""Validation engine bound to a model.

Example:
    ```python
    model = FormModel()
    validation = Validation(model, [
        {"name": "name"},
        {"name": "address.post_code", "tests": [
            {"fn": lambda v, ctx: isinstance(v, int), "message": "Post code must be a number"},
        ]},
    ]).with_mandatory_field_error("required")

    await validation.validate({"name": "", "address": {"post_code": 4890}})
    model.is_valid
    # False
    model.fields
    # {'name': 'required', 'address.post_code': True}
    ```
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .evaluator import RuleEvaluator
from .model import apply_outcome, check_model
from .result import ValidationOutcome
from .rules import FieldRule, build_rule_tree
from .settings import ValidationSettings

logger = logging.getLogger(__name__)


class Validation:
    """Evaluates a fixed rule tree and writes the results onto a model.

    The rule tree is checked when the engine is constructed, so a malformed
    tree fails before any data is seen. Between calls the engine only keeps
    its configured mandatory-field message.

    Args:
        model: Object with a mutable ``fields`` mapping and an ``is_valid``
            attribute, or a mutable mapping with ``fields``/``isValid`` keys
        rules: Rule tree (dicts using the authoring keys, or ``FieldRule``)
        settings: Optional settings; defaults to ``ValidationSettings()``

    Raises:
        RuleConfigurationError: If the rule tree is malformed
        ValidationError: If the model has no usable ``fields`` mapping
    """

    def __init__(
        self,
        model: Any,
        rules: Sequence[Mapping[str, Any] | FieldRule],
        settings: ValidationSettings | None = None,
    ):
        check_model(model)
        self._settings = settings or ValidationSettings()
        self._model = model
        self._rules = build_rule_tree(
            rules, warn_on_duplicate_names=self._settings.warn_on_duplicate_names
        )
        self._mandatory_field_error = self._settings.mandatory_field_error

    @property
    def model(self) -> Any:
        return self._model

    @property
    def rules(self) -> tuple[FieldRule, ...]:
        """The validated, immutable rule tree."""
        return self._rules

    @property
    def mandatory_field_error(self) -> Any:
        return self._mandatory_field_error

    def with_mandatory_field_error(self, message: Any) -> Validation:
        """Set the default message for empty mandatory fields (fluent API).

        Args:
            message: Value written when a mandatory field is empty and its
                rule has no ``emptyFieldMessage``

        Returns:
            Self for chaining
        """
        self._mandatory_field_error = message
        return self

    async def evaluate(
        self, data: Any, context: Mapping[str, Any] | None = None
    ) -> ValidationOutcome:
        """Evaluate the rule tree without touching the model.

        Args:
            data: Object to validate
            context: Extra entries made available to every predicate

        Returns:
            Immutable outcome of this evaluation
        """
        evaluator = RuleEvaluator(self._rules, self._mandatory_field_error)
        return await evaluator.evaluate(data, context)

    async def validate(self, data: Any, context: Mapping[str, Any] | None = None) -> bool:
        """Validate data and write the results onto the model.

        Every produced path is merged into the model's ``fields``; entries the
        caller seeded beforehand are kept. Exceptions raised by predicates
        propagate and leave the model untouched.

        Args:
            data: Object to validate
            context: Extra entries made available to every predicate

        Returns:
            The aggregate validity, also stored on the model
        """
        outcome = await self.evaluate(data, context)
        if not outcome.valid:
            logger.debug(f"Validation failed for paths: {sorted(outcome.errors)}")
        return apply_outcome(self._model, outcome)

    def validate_sync(self, data: Any, context: Mapping[str, Any] | None = None) -> bool:
        """Synchronous wrapper around ``validate``.

        Runs on a fresh event loop, so it cannot be called from inside a
        running loop; use ``await validate(...)`` there.
        """
        return asyncio.run(self.validate(data, context))

    def __repr__(self) -> str:
        return f"Validation(rules={[rule.name for rule in self._rules]!r})"
