"""Common utilities and base classes for formknobs packages.

- **Exceptions**: Unified exception hierarchy with context support
- **Registry**: Generic registry for managing named items
- **Paths**: Dotted-path access into nested data
- **Builders**: Factory base class and config file loading

Example:
    ```python
    from formknobs_common import Registry, get_path

    get_path({"address": {"post_code": 4890}}, "address.post_code")
    # 4890
    ```
"""

from formknobs_common.builders import FactoryBase, load_config_file
from formknobs_common.exceptions import (
    ConfigurationError,
    FormknobsError,
    NotFoundError,
    OperationError,
    ValidationError,
)
from formknobs_common.paths import get_path, has_path, join_path, set_path, split_path
from formknobs_common.registry import Registry

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Exceptions
    "FormknobsError",
    "ValidationError",
    "ConfigurationError",
    "NotFoundError",
    "OperationError",
    # Registry
    "Registry",
    # Paths
    "get_path",
    "set_path",
    "has_path",
    "join_path",
    "split_path",
    # Builders
    "FactoryBase",
    "load_config_file",
]
