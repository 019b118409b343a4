"""Hierarchical state matching.

A model state value is either a flat name (``"Single todo"``), a dotted
compound name (``"TodoMVC.Single todo"``) or a nested mapping whose keys are
active regions (``{"TodoMVC": {"List": "Single todo"}}``). Several keys at the
same level are parallel regions.

Every value is reduced to its *active paths*: one tuple of segment names per
active leaf. Matching and ancestor extraction work on those paths only, so
callers never need to know which shape the model produced.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union

StateValue = Union[str, Mapping[str, Any]]
ActivePath = tuple[str, ...]

SEPARATOR = "."


def state_key(name: Union[str, Enum]) -> str:
    """Return the registry key for a state name or event type."""
    if isinstance(name, Enum):
        return str(name.value)
    return str(name)


def freeze_state_value(value: Any) -> StateValue:
    """Return a read-only deep copy of a state value."""
    if isinstance(value, Enum):
        return state_key(value)
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return MappingProxyType(
            {str(key): freeze_state_value(child) for key, child in value.items()}
        )
    raise TypeError(f"Unsupported state value type: {type(value).__name__}")


def thaw_state_value(value: Any) -> Any:
    """Return a plain ``dict``/``str`` copy of a (possibly frozen) state value."""
    if isinstance(value, Mapping):
        return {key: thaw_state_value(child) for key, child in value.items()}
    return value


def active_paths(value: Any) -> tuple[ActivePath, ...]:
    """Extract the active leaf paths of a state value.

    Examples:
        >>> active_paths("Single todo")
        (('Single todo',),)
        >>> active_paths({"TodoMVC": {"List": "Single todo"}})
        (('TodoMVC', 'List', 'Single todo'),)
        >>> active_paths({"Editor": "Dirty", "Sync": "Idle"})
        (('Editor', 'Dirty'), ('Sync', 'Idle'))
    """
    paths = getattr(value, "paths", None)
    if paths is not None:
        return paths
    if isinstance(value, Enum):
        value = state_key(value)
    if isinstance(value, str):
        if not value:
            raise ValueError("State value must not be empty")
        return (tuple(value.split(SEPARATOR)),)
    if isinstance(value, Mapping):
        if not value:
            raise ValueError("State value mapping must not be empty")
        result: list[ActivePath] = []
        for key, child in value.items():
            # A region with no active child is itself the leaf
            if child is None or (isinstance(child, Mapping) and not child):
                result.append((str(key),))
                continue
            for sub_path in active_paths(child):
                result.append((str(key),) + sub_path)
        return tuple(result)
    raise TypeError(f"Unsupported state value type: {type(value).__name__}")


def ancestors(value: Any) -> frozenset[str]:
    """Return every dotted prefix of every active path of ``value``."""
    names = set()
    for path in active_paths(value):
        for depth in range(1, len(path) + 1):
            names.add(SEPARATOR.join(path[:depth]))
    return frozenset(names)


def _contains_run(path: ActivePath, segments: ActivePath) -> bool:
    width = len(segments)
    return any(
        path[start:start + width] == segments
        for start in range(len(path) - width + 1)
    )


def matches_state(state_name: Union[str, Enum], value: Any) -> bool:
    """Decide whether ``value`` satisfies the named state.

    ``state_name`` may be dotted. It matches when its segments occur as a
    contiguous run in one of the active paths of ``value``: an exact flat
    match, an ancestor region of a compound value or the active leaf itself.
    """
    name = state_key(state_name)
    if not name:
        return False
    segments = tuple(name.split(SEPARATOR))
    return any(_contains_run(path, segments) for path in active_paths(value))
