"""Data model shared by the dispatchers and the path sequencer."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ui_mbt.errors import InvalidPathError
from ui_mbt.matching import (
    ActivePath,
    StateValue,
    active_paths,
    freeze_state_value,
    state_key,
    thaw_state_value,
)


_WRAPPER_KEYS = frozenset({"value", "context"})


def _compact_json(value: Any) -> str:
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        # Circular or otherwise unserialisable payloads still get a label
        return repr(value)


@dataclass(frozen=True)
class ModelState:
    """Immutable snapshot of a model state.

    ``value`` is a flat name, a dotted compound name or a nested mapping of
    active regions. ``context`` carries extended model data through to the
    assertion routines and is never interpreted by the harness.
    """

    value: StateValue
    context: Mapping[str, Any] = field(default_factory=dict, compare=False)
    paths: tuple[ActivePath, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        frozen = freeze_state_value(self.value)
        object.__setattr__(self, "value", frozen)
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))
        object.__setattr__(self, "paths", active_paths(frozen))

    def __hash__(self):
        return hash(self.paths)

    @classmethod
    def from_value(cls, value: Any) -> "ModelState":
        """Coerce a raw value (or a ``{"value": ..., "context": ...}`` mapping).

        A mapping is only read as that wrapper when it has no other keys, so a
        parallel region that happens to be called ``value`` stays a region.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping) and "value" in value and set(value) <= _WRAPPER_KEYS:
            return cls(value["value"], value.get("context") or {})
        return cls(value)

    @property
    def name(self) -> str:
        """Dotted name of the active leaf (comma separated for parallel regions)."""
        return ", ".join(".".join(path) for path in self.paths)

    @property
    def label(self) -> str:
        return f"Assert state {_compact_json(thaw_state_value(self.value))}"


@dataclass(frozen=True)
class Event:
    """A model event. Dispatch compares ``type`` only.

    ``payload`` may be any JSON-like value. ``flat`` marks a payload built
    from the extra keys of an xstate-style ``{"type": ..., "text": ...}``
    mapping; those keys are labelled next to ``type`` again.
    """

    type: str
    payload: Optional[Any] = field(default=None, compare=False)
    flat: bool = field(default=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "type", state_key(self.type))
        if not self.type:
            raise ValueError("Event type must not be empty")

    @classmethod
    def from_value(cls, value: Any) -> "Event":
        """Coerce a bare type string or an ``{"type": ..., ...}`` mapping.

        Keys besides ``type`` become the payload, unless an explicit
        ``payload`` key is present.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, (str, Enum)):
            return cls(value)
        if isinstance(value, Mapping):
            if "type" not in value:
                raise InvalidPathError(f"Event is missing its type: {dict(value)!r}")
            if "payload" in value:
                return cls(value["type"], value["payload"])
            extra = {k: v for k, v in value.items() if k != "type"}
            return cls(value["type"], extra or None, flat=bool(extra))
        raise InvalidPathError(f"Cannot build an event from {value!r}")

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        if self.payload is None:
            return data
        payload = thaw_state_value(self.payload)
        if self.flat and isinstance(payload, dict):
            data.update((key, v) for key, v in payload.items() if key != "type")
        else:
            data["payload"] = payload
        return data

    @property
    def label(self) -> str:
        return f"Execute event {_compact_json(self.as_dict())}"


PathElement = Union[ModelState, Event]


@dataclass(frozen=True)
class Path:
    """One concrete walk through the model: ``[S0, E0, S1, ..., Sn]``."""

    elements: tuple[PathElement, ...]
    name: Optional[str] = None

    def __post_init__(self):
        elements = tuple(self.elements)
        object.__setattr__(self, "elements", elements)
        label = f" {self.name!r}" if self.name else ""
        if not elements:
            raise InvalidPathError(f"Path{label} is empty")
        if len(elements) % 2 == 0:
            raise InvalidPathError(
                f"Path{label} must start and end on a state "
                f"(got {len(elements)} elements)"
            )
        for index, element in enumerate(elements):
            expected = ModelState if index % 2 == 0 else Event
            if not isinstance(element, expected):
                raise InvalidPathError(
                    f"Path{label} element {index} must be a {expected.__name__}, "
                    f"got {type(element).__name__}"
                )

    @classmethod
    def of(cls, *elements: Any, name: Optional[str] = None) -> "Path":
        """Build a path, coercing raw values by position (even=state, odd=event)."""
        coerced = [
            ModelState.from_value(item) if index % 2 == 0 else Event.from_value(item)
            for index, item in enumerate(elements)
        ]
        return cls(tuple(coerced), name=name)

    @classmethod
    def from_steps(
        cls,
        steps: Iterable[tuple[Any, Any]],
        final_state: Any,
        name: Optional[str] = None,
    ) -> "Path":
        """Build a path from ``(state, event)`` pairs followed by the final state."""
        elements: list[Any] = []
        for state, event in steps:
            elements.extend((state, event))
        elements.append(final_state)
        return cls.of(*elements, name=name)

    def __len__(self):
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)

    @property
    def states(self) -> tuple[ModelState, ...]:
        return self.elements[::2]

    @property
    def events(self) -> tuple[Event, ...]:
        return self.elements[1::2]

    @property
    def final_state(self) -> ModelState:
        return self.elements[-1]

    @property
    def description(self) -> str:
        return f"Reaches state {self.final_state.name}"


class Outcome(str, Enum):
    PASSED = "passed"
    FAILED = "failed"


class StepKind(str, Enum):
    STATE = "state"
    EVENT = "event"
    SETUP = "setup"


@dataclass
class StepReport:
    """Result of one assertion or action step."""

    index: int
    kind: StepKind
    label: str
    outcome: Outcome
    error: Optional[BaseException] = None
    duration: float = 0.0
    matched: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.PASSED


@dataclass
class PathReport:
    """Structured outcome of one path run, handed to the test runner.

    On failure ``steps`` ends with the failing step; nothing after it was
    attempted.
    """

    outcome: Outcome
    steps: list[StepReport] = field(default_factory=list)
    path_name: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.PASSED

    @property
    def failed_step(self) -> Optional[StepReport]:
        for step in self.steps:
            if not step.passed:
                return step
        return None

    @property
    def error(self) -> Optional[BaseException]:
        step = self.failed_step
        return step.error if step else None

    @property
    def labels(self) -> list[str]:
        return [step.label for step in self.steps]

    def raise_for_outcome(self) -> None:
        """Re-raise the recorded error of a failed path."""
        step = self.failed_step
        if step is None:
            return
        if step.error is not None:
            raise step.error
        raise AssertionError(f"Step failed: {step.label}")

    def summary(self) -> str:
        lines = [f"{self.path_name or 'path'}: {self.outcome.value}"]
        for step in self.steps:
            mark = "✓" if step.passed else "✗"
            line = f"  {mark} {step.label}"
            if step.error is not None:
                line = f"{line}: {step.error}"
            lines.append(line)
        return "\n".join(lines)


def ensure_sequence(value: Union[Path, Sequence[Any]]) -> Path:
    """Accept a :class:`Path` or a raw alternating sequence."""
    if isinstance(value, Path):
        return value
    return Path.of(*value)
