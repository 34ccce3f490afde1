"""Base classes for configuration-driven construction."""

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml  # type: ignore[import-untyped]

from formknobs_common.exceptions import ConfigurationError, NotFoundError


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a configuration dictionary from a YAML or JSON file.

    Args:
        path: Path to a ``.yaml``, ``.yml`` or ``.json`` file

    Returns:
        The loaded mapping (empty for an empty file)

    Raises:
        NotFoundError: If the file does not exist
        ConfigurationError: If the format is unsupported or the top level is not a mapping
    """
    path = Path(path).resolve()
    if not path.exists():
        raise NotFoundError(f"Configuration file not found: {path}", context={"path": str(path)})

    suffix = path.suffix.lower()
    with open(path) as f:
        if suffix in [".yaml", ".yml"]:
            data = yaml.safe_load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ConfigurationError(
                f"Unsupported file format: {suffix}", context={"path": str(path)}
            )

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping, got {type(data).__name__}",
            context={"path": str(path)},
        )
    return data


class FactoryBase:
    """Base class for factory objects.

    Factories that inherit from this should implement the create method.
    ``create_from_file`` loads a YAML/JSON file and passes its contents as
    keyword arguments.
    """

    def create(self, **config: Any) -> Any:
        """Create an object from configuration."""
        raise NotImplementedError("Subclasses must implement create method")

    def create_from_file(self, path: Union[str, Path], **overrides: Any) -> Any:
        """Create an object from a configuration file.

        Args:
            path: YAML or JSON file
            **overrides: Values taking precedence over the file contents

        Returns:
            Created object
        """
        config = load_config_file(path)
        config.update(overrides)
        return self.create(**config)
