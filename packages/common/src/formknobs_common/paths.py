"""Dotted-path access into nested data.

Paths use plain dot notation (``"address.post_code"``, ``"subs.0.bread"``).
Each segment is resolved against the current object as

- a mapping key,
- a sequence index when the segment is an integer literal, or
- an attribute, for plain objects and dataclasses.

Reads are tolerant: a missing segment anywhere along the path yields the
default instead of raising.
"""

from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any, List

PATH_SEPARATOR = "."

_MISSING = object()


def split_path(path: str) -> List[str]:
    """Split a dotted path into its non-empty segments."""
    return [segment for segment in str(path).split(PATH_SEPARATOR) if segment]


def join_path(*segments: Any) -> str:
    """Join path segments with dots, dropping empty ones.

    Args:
        *segments: Path fragments; non-strings (e.g. list indices) are converted

    Returns:
        The joined path, ``""`` when every segment is empty

    Example:
        ```python
        join_path("", "subs", 0, "bread")
        # 'subs.0.bread'
        ```
    """
    return PATH_SEPARATOR.join(
        str(segment) for segment in segments if segment is not None and str(segment) != ""
    )


def _as_index(segment: str) -> int | None:
    if segment.isdigit() or (segment.startswith("-") and segment[1:].isdigit()):
        return int(segment)
    return None


def _step(obj: Any, segment: str) -> Any:
    if isinstance(obj, Mapping):
        if segment in obj:
            return obj[segment]
        index = _as_index(segment)
        if index is not None and index in obj:
            return obj[index]
        return _MISSING

    if isinstance(obj, Sequence) and not isinstance(obj, (str, bytes)):
        index = _as_index(segment)
        if index is None or not -len(obj) <= index < len(obj):
            return _MISSING
        return obj[index]

    if obj is None or isinstance(obj, (str, bytes, int, float, bool)):
        return _MISSING
    return getattr(obj, segment, _MISSING)


def get_path(obj: Any, path: str, default: Any = None) -> Any:
    """Get the value at a dotted path.

    Args:
        obj: Root object (mapping, sequence or plain object)
        path: Dotted path; an empty path returns ``obj`` itself
        default: Value returned when any segment is missing

    Returns:
        The resolved value or ``default``
    """
    current = obj
    for segment in split_path(path):
        current = _step(current, segment)
        if current is _MISSING:
            return default
    return current


def has_path(obj: Any, path: str) -> bool:
    """Check whether every segment of ``path`` resolves on ``obj``."""
    return get_path(obj, path, _MISSING) is not _MISSING


def set_path(obj: Any, path: str, value: Any) -> None:
    """Set the value at a dotted path, creating intermediate dicts as needed.

    Existing sequences are indexed in place; missing intermediate containers
    are always created as dicts.

    Raises:
        ValueError: If the path is empty
        TypeError: If an intermediate value cannot hold children
    """
    segments = split_path(path)
    if not segments:
        raise ValueError("Cannot set a value at an empty path")

    current = obj
    for segment in segments[:-1]:
        child = _step(current, segment)
        if child is _MISSING or child is None:
            child = {}
            _assign(current, segment, child)
        current = child
    _assign(current, segments[-1], value)


def _assign(obj: Any, segment: str, value: Any) -> None:
    if isinstance(obj, MutableMapping):
        obj[segment] = value
    elif isinstance(obj, MutableSequence):
        index = _as_index(segment)
        if index is None:
            raise TypeError(f"Cannot use non-numeric segment '{segment}' on a sequence")
        if index == len(obj):
            obj.append(value)
        else:
            obj[index] = value
    elif isinstance(obj, (str, bytes, int, float, bool)) or obj is None:
        raise TypeError(f"Cannot set '{segment}' on value of type {type(obj).__name__}")
    else:
        setattr(obj, segment, value)
