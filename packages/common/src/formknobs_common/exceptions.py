"""Common exception hierarchy for the formknobs packages.

Every error raised by a formknobs package derives from ``FormknobsError``.
Exceptions may carry a ``context`` dictionary with structured details about
what went wrong (rule paths, offending keys, registry names and so on).

Example:
    ```python
    from formknobs_common.exceptions import ConfigurationError, FormknobsError

    raise ConfigurationError(
        "Rule is missing a name",
        context={"location": "fields[2]"}
    )

    try:
        build()
    except FormknobsError as e:
        logger.error(f"Error: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```

Note that failing *data* is never reported through exceptions: validation
outcomes are returned as values. These exceptions describe broken rule trees,
broken configuration and failed lookups.
"""

from typing import Any, Dict


class FormknobsError(Exception):
    """Base exception for all formknobs packages.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context
        details: Alternative to context (takes precedence when both are given)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class ValidationError(FormknobsError):
    """Raised when a value handed to the library is structurally unusable.

    This is not raised for failed field rules; those are reported in a
    ``ValidationOutcome``.
    """

    pass


class ConfigurationError(FormknobsError):
    """Raised when configuration or a rule tree is invalid.

    Example:
        ```python
        raise ConfigurationError(
            "Invalid stop option",
            context={"location": "fields[0]", "key": "stopOnFailure", "value": "all"}
        )
        ```
    """

    pass


class NotFoundError(FormknobsError):
    """Raised when a requested item is not found (registry lookups, files)."""

    pass


class OperationError(FormknobsError):
    """Raised when an operation cannot be carried out, e.g. a duplicate registration."""

    pass


__all__ = [
    "FormknobsError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
]
