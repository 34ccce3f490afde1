"""Rule tree evaluation.

The evaluator walks a rule tree depth-first against a data object. Every
predicate (emptiness tests, skip conditions, field tests) is awaited to
completion before the next one starts, in declaration order, descending into
array sub-fields before moving on to the next sibling. Predicates may be plain
functions or coroutines.

Results are collected into a dict owned by a single evaluation and handed back
as an immutable ``ValidationOutcome``. Exceptions raised by predicates are not
caught.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from formknobs_common import get_path, join_path

from .context import build_context
from .emptiness import is_empty
from .result import ValidationOutcome
from .rules import FieldRule, StopScope

logger = logging.getLogger(__name__)

EMPTY_MANDATORY_FIELD_ERROR = "empty_mandatory_field"


async def _resolve(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


def is_array(value: Any) -> bool:
    """Values that fan out to nested rules: lists and tuples, never strings."""
    return isinstance(value, (list, tuple))


class RuleEvaluator:
    """Evaluates a normalized rule tree.

    Args:
        rules: Tree produced by ``build_rule_tree``
        mandatory_field_error: Value written for empty mandatory fields that
            carry no ``empty_field_message`` of their own
    """

    def __init__(
        self,
        rules: Sequence[FieldRule],
        mandatory_field_error: Any = EMPTY_MANDATORY_FIELD_ERROR,
    ):
        self.rules = tuple(rules)
        self.mandatory_field_error = mandatory_field_error

    async def evaluate(
        self, data: Any, context: Mapping[str, Any] | None = None
    ) -> ValidationOutcome:
        """Evaluate the whole tree from the root path.

        Args:
            data: Object the rule names are resolved against
            context: Extra entries merged into every predicate context

        Returns:
            The outcome of this evaluation
        """
        results: dict[str, Any] = {}
        valid = await self.evaluate_fields(self.rules, data, results, "", context or {})
        logger.debug(
            f"Evaluated {len(results)} paths, valid={valid}, errors={sum(v is not True for v in results.values())}"
        )
        return ValidationOutcome(valid=valid, fields=results)

    async def evaluate_fields(
        self,
        rules: Sequence[FieldRule],
        data: Any,
        results: dict[str, Any],
        base: str,
        context: Mapping[str, Any],
    ) -> bool:
        """Evaluate one level of sibling rules.

        Args:
            rules: Sibling rules, in order
            data: Data scope for this level
            results: Output mapping written in place
            base: Path prefix of this level (``""`` at the root)
            context: Caller-supplied context entries

        Returns:
            True when every path produced under this level is valid
        """
        valid = True

        for rule in rules:
            path = join_path(base, rule.name)
            field_data = get_path(data, rule.name)
            empty = bool(await _resolve((rule.empty_test or is_empty)(field_data)))
            field_context = build_context(path, data, context)

            if rule.skip_if is not None and await _resolve(rule.skip_if(field_context)):
                logger.debug(f"Skipping '{path}'")
                continue

            if empty:
                if rule.is_optional:
                    continue
                message = (
                    rule.empty_field_message
                    if rule.empty_field_message is not None
                    else self.mandatory_field_error
                )
                logger.debug(f"Mandatory field '{path}' is empty")
                results[path] = message
                valid = False
                continue

            results[path] = True

            if rule.fields is not None and is_array(field_data):
                for index, element in enumerate(field_data):
                    element_valid = await self.evaluate_fields(
                        rule.fields,
                        element,
                        results,
                        join_path(base, rule.name, index),
                        context,
                    )
                    valid = element_valid and valid

            if not rule.tests:
                continue

            stop_siblings = False
            for test in rule.tests:
                passed = await _resolve(test.fn(field_data, field_context))
                if not passed:
                    logger.debug(f"Test failed for '{path}': {test.message!r}")
                    results[path] = test.message
                    valid = False
                    if rule.stop_on_failure is StopScope.FIELDS:
                        stop_siblings = True
                    if rule.stop_on_failure:
                        break
                elif rule.stop_on_success:
                    if rule.stop_on_success is StopScope.FIELDS:
                        stop_siblings = True
                    break

            if stop_siblings:
                logger.debug(f"Short-circuit after '{path}', remaining siblings not evaluated")
                break

        return valid


async def evaluate_rules(
    rules: Sequence[FieldRule],
    data: Any,
    context: Mapping[str, Any] | None = None,
    mandatory_field_error: Any = EMPTY_MANDATORY_FIELD_ERROR,
) -> ValidationOutcome:
    """Evaluate a normalized rule tree once.

    Shortcut for ``RuleEvaluator(rules, mandatory_field_error).evaluate(data, context)``.
    """
    return await RuleEvaluator(rules, mandatory_field_error).evaluate(data, context)
