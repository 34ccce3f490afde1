"""Generic registry for managing named items.

Registries hold items (predicate factories, for instance) under unique string
keys. Access is guarded by a re-entrant lock so a registry can be shared
between threads that build rule trees concurrently.

Example:
    ```python
    from formknobs_common.registry import Registry

    class FormatterRegistry(Registry[Callable[[str], str]]):
        def __init__(self):
            super().__init__("formatters")

    registry = FormatterRegistry()
    registry.register("upper", str.upper)
    registry.get("upper")("abc")
    # 'ABC'
    ```
"""

import threading
from typing import Dict, Generic, Iterator, List, TypeVar

from formknobs_common.exceptions import NotFoundError, OperationError

T = TypeVar("T")


class Registry(Generic[T]):
    """Thread-safe mapping of unique keys to items.

    Args:
        name: Name for this registry instance, used in error context
    """

    def __init__(self, name: str):
        self._name = name
        self._items: Dict[str, T] = {}
        self._lock = threading.RLock()

    @property
    def name(self) -> str:
        """Get registry name."""
        return self._name

    def register(self, key: str, item: T, allow_overwrite: bool = False) -> None:
        """Register an item by key.

        Args:
            key: Unique identifier for the item
            item: Item to register
            allow_overwrite: Whether to replace an existing item

        Raises:
            OperationError: If the key exists and allow_overwrite is False
        """
        with self._lock:
            if not allow_overwrite and key in self._items:
                raise OperationError(
                    f"Item '{key}' already registered in {self._name}",
                    context={"key": key, "registry": self._name},
                )
            self._items[key] = item

    def unregister(self, key: str) -> T:
        """Remove and return the item registered under ``key``.

        Raises:
            NotFoundError: If item not found
        """
        with self._lock:
            if key not in self._items:
                raise NotFoundError(
                    f"Item not found: {key}",
                    context={"key": key, "registry": self._name},
                )
            return self._items.pop(key)

    def get(self, key: str) -> T:
        """Get an item by key.

        Raises:
            NotFoundError: If item not found; the context lists the available keys
        """
        with self._lock:
            if key not in self._items:
                raise NotFoundError(
                    f"Item not found: {key}",
                    context={
                        "key": key,
                        "registry": self._name,
                        "available_keys": sorted(self._items),
                    },
                )
            return self._items[key]

    def get_optional(self, key: str) -> T | None:
        """Get an item by key, returning None if not found."""
        with self._lock:
            return self._items.get(key)

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._items

    def list_keys(self) -> List[str]:
        with self._lock:
            return list(self._items.keys())

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[str]:
        return iter(self.list_keys())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, items={self.count()})"
