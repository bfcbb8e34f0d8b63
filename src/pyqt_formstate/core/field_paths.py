"""Dotted field path helpers for nested form values."""

import copy
from typing import Any, Dict, List, Mapping, Union

_MISSING = object()

PathPart = Union[str, int]


def split_path(path: str) -> List[PathPart]:
    """Split "address.lines.0" into ['address', 'lines', 0]."""
    if not path:
        raise ValueError("Field path must be a non-empty string")
    parts: List[PathPart] = []
    for part in path.split('.'):
        if part == '':
            raise ValueError(f"Invalid field path: {path!r}")
        parts.append(int(part) if part.isdigit() else part)
    return parts


def join_path(parts) -> str:
    """Inverse of split_path; accepts any iterable of str/int parts."""
    return ".".join(str(part) for part in parts)


def get_path(values: Any, path: str, default: Any = None) -> Any:
    """Read a nested value, returning default if any segment is missing."""
    current = values
    for part in split_path(path):
        if isinstance(part, int) and isinstance(current, (list, tuple)):
            if part >= len(current):
                return default
            current = current[part]
        elif isinstance(current, Mapping):
            current = current.get(part if part in current else str(part), _MISSING)
            if current is _MISSING:
                return default
        else:
            return default
    return current


def _list_slot(container: list, part: PathPart, path: str) -> int:
    """Index for part in container, padding with None up to it."""
    if not isinstance(part, int):
        raise ValueError(f"Field path {path!r}: segment {part!r} indexes a list and must be an integer")
    while len(container) <= part:
        container.append(None)
    return part


def set_path(values: Dict[str, Any], path: str, value: Any) -> None:
    """Write a nested value in place, creating intermediate containers on demand.

    List indexes past the end pad the list with None.
    """
    parts = split_path(path)
    current: Any = values
    for part, next_part in zip(parts, parts[1:]):
        if isinstance(current, list):
            index = _list_slot(current, part, path)
            child = current[index]
            if not isinstance(child, (dict, list)):
                child = [] if isinstance(next_part, int) else {}
                current[index] = child
        else:
            key = str(part)
            child = current.get(key)
            if not isinstance(child, (dict, list)):
                child = [] if isinstance(next_part, int) else {}
                current[key] = child
        current = child

    last = parts[-1]
    if isinstance(current, list):
        current[_list_slot(current, last, path)] = value
    else:
        current[str(last)] = value


def clone_values(values: Any) -> Dict[str, Any]:
    """Deep copy a values mapping; pydantic models are dumped to dicts first."""
    if values is None:
        return {}
    if hasattr(values, 'model_dump'):
        values = values.model_dump()
    if not isinstance(values, Mapping):
        raise TypeError(f"Form values must be a mapping, got {type(values).__name__}")
    return copy.deepcopy(dict(values))
