"""Load paths exported by a model tool from YAML or JSON files.

Two shapes are accepted per named path::

    single_todo:
      elements:
        - state: Empty todo form
        - event: fill out todo
        - state: New todo

    single_todo:
      steps:
        - {state: Empty todo form, event: fill out todo}
      state: New todo

A state entry is a state value (string or mapping) or a
``{value: ..., context: ...}`` mapping. An event entry is a type string or a
``{type: ..., ...}`` mapping.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path as FilePath
from typing import Any, Mapping, Union

import yaml

from ui_mbt.errors import InvalidPathError
from ui_mbt.models import Path

_LOGGER = logging.getLogger(__name__)


def _entry(name: str, index: int, item: Any) -> Any:
    if not isinstance(item, Mapping) or len(item) != 1 or not ({"state", "event"} & set(item)):
        raise InvalidPathError(
            f"Path {name!r} element {index} must be a single 'state' or 'event' entry"
        )
    key = "state" if "state" in item else "event"
    if index % 2 == 0 and key != "state":
        raise InvalidPathError(f"Path {name!r} element {index} must be a state")
    if index % 2 == 1 and key != "event":
        raise InvalidPathError(f"Path {name!r} element {index} must be an event")
    return item[key]


def path_from_dict(name: str, data: Mapping[str, Any]) -> Path:
    """Build one :class:`Path` from its file representation."""
    try:
        if "elements" in data:
            elements = [_entry(name, i, item) for i, item in enumerate(data["elements"])]
            return Path.of(*elements, name=name)
        if "steps" in data:
            if "state" not in data:
                raise InvalidPathError(f"Path {name!r} has steps but no final state")
            pairs = []
            for index, step in enumerate(data["steps"]):
                if not isinstance(step, Mapping) or "state" not in step or "event" not in step:
                    raise InvalidPathError(
                        f"Path {name!r} step {index} needs both 'state' and 'event'"
                    )
                pairs.append((step["state"], step["event"]))
            return Path.from_steps(pairs, data["state"], name=name)
    except (TypeError, ValueError) as exc:
        if isinstance(exc, InvalidPathError):
            raise
        raise InvalidPathError(f"Path {name!r} is malformed: {exc}") from exc
    raise InvalidPathError(f"Path {name!r} needs either 'elements' or 'steps'")


def load_paths(path_file: Union[str, FilePath]) -> dict[str, Path]:
    """Load every named path from a ``.yaml``/``.yml`` or ``.json`` file."""
    path_file = FilePath(path_file)
    if not path_file.exists():
        raise InvalidPathError(f"Path file not found: {path_file}")
    with open(path_file, encoding="utf-8") as f:
        try:
            if path_file.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise InvalidPathError(f"Cannot parse {path_file}: {exc}") from exc

    if isinstance(data, Mapping) and "paths" in data:
        data = data["paths"]
    if not isinstance(data, Mapping):
        raise InvalidPathError(f"Expected a mapping of named paths in {path_file}")

    paths = {}
    for name, entry in data.items():
        if not isinstance(entry, Mapping):
            raise InvalidPathError(f"Path {name!r} must be a mapping")
        paths[str(name)] = path_from_dict(str(name), entry)
    _LOGGER.info("Loaded %d paths from %s", len(paths), path_file)
    return paths
