"""Declarative, data-driven field validation.

A rule tree describes which fields of an input object are mandatory, which
tests they must pass and how evaluation short-circuits. Evaluating it yields a
result per dotted path (``True`` or an error value) plus an overall validity
flag, ready to be written onto a form model.

    ```python
    from formknobs_validation import FormModel, Validation

    model = FormModel()
    engine = Validation(model, [
        {"name": "subs", "fields": [
            {"name": "bread", "tests": [
                {"fn": lambda v, ctx: v in ("herbs", "wholemeal"),
                 "message": "Bread not available"},
            ]},
        ]},
    ])
    await engine.validate({"subs": [{"bread": "grains"}]})
    model.fields["subs.0.bread"]
    # 'Bread not available'
    ```
"""

from .context import build_context
from .emptiness import is_empty
from .engine import Validation
from .evaluator import EMPTY_MANDATORY_FIELD_ERROR, RuleEvaluator, evaluate_rules
from .exceptions import PredicateNotFoundError, RuleConfigurationError
from .factory import (
    RuleTreeFactory,
    ValidationFactory,
    rule_tree_factory,
    validation_factory,
)
from .model import FormModel, apply_outcome
from .predicates import PredicateRegistry, default_registry
from .result import ValidationOutcome
from .rules import FieldRule, StopScope, TestDescriptor, build_rule_tree
from .settings import ValidationSettings

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Rules
    "FieldRule",
    "TestDescriptor",
    "StopScope",
    "build_rule_tree",
    # Evaluation
    "EMPTY_MANDATORY_FIELD_ERROR",
    "RuleEvaluator",
    "evaluate_rules",
    "is_empty",
    "build_context",
    "ValidationOutcome",
    # Engine and model
    "Validation",
    "FormModel",
    "apply_outcome",
    # Configuration
    "ValidationSettings",
    "PredicateRegistry",
    "default_registry",
    "RuleTreeFactory",
    "ValidationFactory",
    "rule_tree_factory",
    "validation_factory",
    # Exceptions
    "RuleConfigurationError",
    "PredicateNotFoundError",
]
