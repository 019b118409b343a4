"""Assertion dispatcher: state name -> assertion routine.

Several registered names can match one model state (a compound region and
its active leaf, say). All of them run, in registration order, one at a time.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Union

from ui_mbt.errors import AssertionFailure
from ui_mbt.matching import matches_state, state_key
from ui_mbt.models import ModelState

_LOGGER = logging.getLogger(__name__)

AssertionRoutine = Callable[[Any, ModelState], Awaitable[None]]


class AssertionDispatcher:
    """Registry of assertion routines keyed by (possibly dotted) state name."""

    def __init__(self):
        self._routines: list[tuple[str, AssertionRoutine]] = []

    def __len__(self):
        return len(self._routines)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._routines]

    def register(self, name: Union[str, Enum], routine: AssertionRoutine) -> AssertionRoutine:
        key = state_key(name)
        if not key:
            raise ValueError("State name must not be empty")
        self._routines.append((key, routine))
        _LOGGER.debug("Registered assertion for state %r", key)
        return routine

    def state(self, name: Union[str, Enum]) -> Callable[[AssertionRoutine], AssertionRoutine]:
        """Decorator form of :meth:`register`.

        Example:
            @assertions.state("Single todo")
            async def single_todo(handle, state):
                ...
        """

        def decorator(routine: AssertionRoutine) -> AssertionRoutine:
            return self.register(name, routine)

        return decorator

    def matching_names(self, state: Any) -> list[str]:
        """Names whose assertions would fire for ``state``."""
        state = ModelState.from_value(state)
        return [name for name, _ in self._routines if matches_state(name, state)]

    async def assert_state(self, state: Any, handle: Any) -> list[str]:
        """Run every assertion whose name matches ``state``.

        Zero matches is a pass. The first failing routine stops the step.

        Returns:
            Names of the assertions that ran

        Raises:
            AssertionFailure: A routine raised; carries the state name and cause
        """
        state = ModelState.from_value(state)
        fired: list[str] = []
        for name, routine in self._routines:
            if not matches_state(name, state):
                continue
            _LOGGER.debug("Asserting state %r for %s", name, state.name)
            try:
                await routine(handle, state)
            except AssertionFailure:
                raise
            except Exception as exc:
                raise AssertionFailure(name, exc) from exc
            fired.append(name)
        if not fired:
            _LOGGER.debug("No assertion registered for state %s", state.name)
        return fired
