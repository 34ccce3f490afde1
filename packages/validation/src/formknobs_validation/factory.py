"""Factories for building rule trees and engines from configuration."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Union

from formknobs_common import FactoryBase, load_config_file

from .engine import Validation
from .exceptions import RuleConfigurationError
from .predicates import PredicateRegistry, default_registry
from .rules import FieldRule, build_rule_tree
from .settings import ValidationSettings

logger = logging.getLogger(__name__)

PREDICATE_KEYS = ("skipIf", "skip_if", "emptyTest", "empty_test")


class RuleTreeFactory(FactoryBase):
    """Factory for creating rule trees from configuration.

    Configuration uses the regular authoring keys. Wherever a rule expects a
    callable (``tests[].fn``, ``skipIf``, ``emptyTest``) a predicate
    reference can be given instead: a registered name, or a mapping with
    ``predicate`` and ``args``.

    Configuration Options:
        fields (list): Rule definitions
        warn_on_duplicate_names (bool): Log sibling name collisions (default: True)

    Example Configuration:
        fields:
          - name: email
            stopOnFailure: tests
            tests:
              - fn: is_string
                message: Email must be text
              - fn:
                  predicate: matches
                  args:
                    pattern: "^[^@]+@[^@]+$"
                message: Invalid email
          - name: company
            skipIf:
              predicate: data_equals
              args: {path: account_type, value: personal}
          - name: subs
            fields:
              - name: bread
                tests:
                  - fn: {predicate: one_of, args: {values: [herbs, wholemeal]}}
                    message: Bread not available
    """

    def __init__(self, registry: PredicateRegistry | None = None):
        self.registry = registry or default_registry()

    def create(self, **config: Any) -> tuple[FieldRule, ...]:
        """Create a validated rule tree from configuration.

        Raises:
            RuleConfigurationError: If the rules are malformed or reference
                predicates in an unsupported shape
            PredicateNotFoundError: If a referenced predicate is not registered
        """
        fields = config.get("fields")
        if fields is None:
            raise RuleConfigurationError("configuration has no 'fields'", location="fields")
        if not isinstance(fields, list):
            raise RuleConfigurationError(
                f"rule list must be a sequence, got {type(fields).__name__}", location="fields"
            )

        resolved = [
            self._resolve_rule(rule, f"fields[{idx}]") for idx, rule in enumerate(fields)
        ]
        rules = build_rule_tree(
            resolved, warn_on_duplicate_names=config.get("warn_on_duplicate_names", True)
        )
        logger.info(f"Created rule tree with {len(rules)} top-level fields")
        return rules

    def _resolve_rule(self, rule: Any, location: str) -> Any:
        if not isinstance(rule, Mapping):
            # build_rule_tree reports the bad node
            return rule

        resolved = dict(rule)
        for key in PREDICATE_KEYS:
            if resolved.get(key) is not None:
                resolved[key] = self._resolve(resolved[key], location, key)

        tests = resolved.get("tests")
        if isinstance(tests, list):
            resolved["tests"] = [
                self._resolve_test(test, f"{location}.tests[{idx}]")
                for idx, test in enumerate(tests)
            ]

        nested = resolved.get("fields")
        if isinstance(nested, list):
            resolved["fields"] = [
                self._resolve_rule(child, f"{location}.fields[{idx}]")
                for idx, child in enumerate(nested)
            ]
        return resolved

    def _resolve_test(self, test: Any, location: str) -> Any:
        if not isinstance(test, Mapping) or test.get("fn") is None:
            return test
        resolved = dict(test)
        resolved["fn"] = self._resolve(test["fn"], location, "fn")
        return resolved

    def _resolve(self, reference: Any, location: str, key: str) -> Any:
        try:
            return self.registry.resolve(reference)
        except (TypeError, ValueError) as e:
            raise RuleConfigurationError(str(e), location=location, key=key, value=reference) from e


class ValidationFactory(FactoryBase):
    """Factory for creating ready-to-use ``Validation`` engines.

    Configuration Options:
        model: Target model (usually passed in code, not in a file)
        fields (list): Rule definitions, as for ``RuleTreeFactory``
        settings (dict): ``ValidationSettings`` values
        mandatory_field_error (str): Shortcut for the settings value
    """

    def __init__(self, registry: PredicateRegistry | None = None):
        self.rule_factory = RuleTreeFactory(registry)

    def create(self, **config: Any) -> Validation:
        if "model" not in config:
            raise RuleConfigurationError("a 'model' is required", location="model")
        model = config["model"]

        settings = ValidationSettings.from_dict(config.get("settings") or {})
        if config.get("mandatory_field_error") is not None:
            settings = settings.with_overrides(
                mandatory_field_error=config["mandatory_field_error"]
            )

        rules = self.rule_factory.create(
            fields=config.get("fields"),
            warn_on_duplicate_names=settings.warn_on_duplicate_names,
        )
        logger.info(f"Creating validation engine: {config.get('name', 'unnamed')}")
        return Validation(model, rules, settings=settings)

    def from_file(self, path: Union[str, Path], model: Any) -> Validation:
        """Create an engine for ``model`` from a YAML or JSON file."""
        config = load_config_file(path)
        config["model"] = model
        return self.create(**config)


rule_tree_factory = RuleTreeFactory()
validation_factory = ValidationFactory()
