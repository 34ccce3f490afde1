"""Custom exceptions for the formknobs_validation package.

Built on the common exception framework from formknobs_common. Failed field
rules are never reported through these; they only describe unusable rule trees
and configuration.
"""

from __future__ import annotations

from formknobs_common import ConfigurationError, NotFoundError


class RuleConfigurationError(ConfigurationError):
    """Raised when a rule tree is malformed.

    ``location`` points at the offending node, e.g. ``"fields[1].fields[0]"``.
    """

    def __init__(self, message: str, location: str, key: str | None = None, value: object = None):
        self.location = location
        self.key = key
        context: dict[str, object] = {"location": location}
        if key is not None:
            context["key"] = key
            context["value"] = value
        super().__init__(f"Invalid rule at {location}: {message}", context=context)


class PredicateNotFoundError(NotFoundError):
    """Raised when configuration references an unregistered predicate."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        super().__init__(
            f"Predicate '{name}' is not registered",
            context={"predicate": name, "available": available},
        )
