"""Event dispatcher: event type -> action routine, exact match only."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Union

from ui_mbt.errors import UnhandledEventError
from ui_mbt.matching import state_key
from ui_mbt.models import Event, Path

_LOGGER = logging.getLogger(__name__)

ActionRoutine = Callable[[Any, Event], Awaitable[Any]]


class EventDispatcher:
    """Registry holding exactly one action routine per event type."""

    def __init__(self):
        self._routines: dict[str, ActionRoutine] = {}

    def __len__(self):
        return len(self._routines)

    def __contains__(self, event_type: Union[str, Enum]) -> bool:
        return state_key(event_type) in self._routines

    @property
    def event_types(self) -> list[str]:
        return list(self._routines)

    def register(self, event_type: Union[str, Enum], routine: ActionRoutine) -> ActionRoutine:
        key = state_key(event_type)
        if not key:
            raise ValueError("Event type must not be empty")
        if key in self._routines:
            raise ValueError(f"An action is already registered for event {key!r}")
        self._routines[key] = routine
        _LOGGER.debug("Registered action for event %r", key)
        return routine

    def on(self, event_type: Union[str, Enum]) -> Callable[[ActionRoutine], ActionRoutine]:
        """Decorator form of :meth:`register`."""

        def decorator(routine: ActionRoutine) -> ActionRoutine:
            return self.register(event_type, routine)

        return decorator

    def unhandled(self, event_types: Iterable[Union[str, Enum, Event]]) -> list[str]:
        """Event types without a registered routine, in first-seen order."""
        missing: list[str] = []
        for item in event_types:
            key = item.type if isinstance(item, Event) else state_key(item)
            if key not in self._routines and key not in missing:
                missing.append(key)
        return missing

    def ensure_handles(self, events: Union[Path, Iterable[Union[str, Enum, Event]]]) -> None:
        """Fail before a run when any event of a path (or list) is unhandled.

        Raises:
            UnhandledEventError: Lists every missing event type
        """
        if isinstance(events, Path):
            events = events.events
        missing = self.unhandled(events)
        if missing:
            raise UnhandledEventError(missing[0], missing)

    async def execute(self, event: Any, handle: Any) -> None:
        """Run the routine registered for ``event.type``.

        Raises:
            UnhandledEventError: Nothing is registered for the event type
        """
        event = Event.from_value(event)
        routine = self._routines.get(event.type)
        if routine is None:
            raise UnhandledEventError(event.type)
        _LOGGER.debug("Executing event %r", event.type)
        await routine(handle, event)
