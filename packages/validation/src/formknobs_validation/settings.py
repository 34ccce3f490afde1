"""Engine settings loaded from dicts, YAML/JSON files or the environment."""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from formknobs_common import ConfigurationError, load_config_file

from .evaluator import EMPTY_MANDATORY_FIELD_ERROR

logger = logging.getLogger(__name__)

ENV_PREFIX = "FORMKNOBS_"


def parse_env_value(value: str) -> Any:
    """Parse an environment variable value to bool, int, float or string."""
    if value.lower() in ["true", "yes"]:
        return True
    elif value.lower() in ["false", "no"]:
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


@dataclass(frozen=True)
class ValidationSettings:
    """Configuration shared by validation engines.

    Attributes:
        mandatory_field_error: Value written for empty mandatory fields
        warn_on_duplicate_names: Log a warning when sibling rules share a name
    """

    mandatory_field_error: Any = EMPTY_MANDATORY_FIELD_ERROR
    warn_on_duplicate_names: bool = True

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in dataclasses.fields(cls)]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ValidationSettings:
        """Create settings from a mapping.

        Raises:
            ConfigurationError: If the mapping contains unknown keys
        """
        unknown = sorted(set(data) - set(cls.field_names()))
        if unknown:
            raise ConfigurationError(
                f"Unknown validation settings: {', '.join(unknown)}",
                context={"unknown": unknown, "allowed": cls.field_names()},
            )
        return cls(**dict(data))

    @classmethod
    def from_file(cls, path: Union[str, Path], section: str | None = "validation") -> ValidationSettings:
        """Load settings from a YAML or JSON file.

        Args:
            path: Settings file
            section: Top-level key holding the settings; the whole file is
                used when it is None or absent from the file
        """
        data = load_config_file(path)
        if section and section in data:
            data = data[section] or {}
        logger.debug(f"Loaded validation settings from {path}")
        return cls.from_dict(data)

    @classmethod
    def from_env(
        cls, prefix: str = ENV_PREFIX, environ: Mapping[str, str] | None = None
    ) -> ValidationSettings:
        """Create settings from environment variables.

        ``FORMKNOBS_MANDATORY_FIELD_ERROR`` maps to ``mandatory_field_error``
        and so on. Unrelated variables with the prefix are ignored.
        """
        return cls().with_env_overrides(prefix, environ)

    def with_env_overrides(
        self, prefix: str = ENV_PREFIX, environ: Mapping[str, str] | None = None
    ) -> ValidationSettings:
        """Return a copy with any matching environment variables applied."""
        environ = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        for name in self.field_names():
            env_var = f"{prefix}{name.upper()}"
            if env_var in environ:
                raw = environ[env_var]
                # messages stay strings even when they look numeric
                overrides[name] = raw if name == "mandatory_field_error" else parse_env_value(raw)
        return self.with_overrides(**overrides)

    def with_overrides(self, **overrides: Any) -> ValidationSettings:
        """Return a copy with the given values replaced."""
        if not overrides:
            return self
        unknown = sorted(set(overrides) - set(self.field_names()))
        if unknown:
            raise ConfigurationError(
                f"Unknown validation settings: {', '.join(unknown)}",
                context={"unknown": unknown},
            )
        return dataclasses.replace(self, **overrides)

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)
