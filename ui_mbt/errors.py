"""Error taxonomy for path execution.

None of these are recovered inside the harness. They propagate up to the
path sequencer, abort the running path and end up verbatim in the
:class:`~ui_mbt.models.PathReport`.
"""

from __future__ import annotations

from typing import Iterable, Optional


class HarnessError(Exception):
    """Base class for every error raised by the harness."""


class ConfigurationError(HarnessError):
    """Configuration or selector file is missing or malformed."""


class InvalidPathError(HarnessError, ValueError):
    """A path does not alternate state/event/state or cannot be parsed."""


class AssertionFailure(HarnessError, AssertionError):
    """An expectation about the SUT-observable state did not hold.

    Args:
        state_name: Registered state name whose assertion failed
        cause: Underlying exception raised by the assertion routine
    """

    def __init__(self, state_name: str, cause: Optional[BaseException] = None):
        self.state_name = state_name
        self.cause = cause
        message = f'Assertion for state "{state_name}" failed'
        if cause is not None:
            message = f"{message}: {cause.__class__.__name__}: {cause}"
        super().__init__(message)


class MissingElementError(HarnessError):
    """A driver query required an element to exist and it did not."""

    def __init__(self, selector: str, what: str = ""):
        self.selector = selector
        self.what = what or selector
        super().__init__(f"Could not find {self.what} ({selector})")


class UnhandledEventError(HarnessError):
    """An event type has no registered action routine."""

    def __init__(self, event_type: str, event_types: Iterable[str] = ()):
        self.event_type = event_type
        self.event_types = tuple(event_types) or (event_type,)
        if len(self.event_types) > 1:
            listed = ", ".join(repr(t) for t in self.event_types)
            super().__init__(f"Unhandled events: {listed}")
        else:
            super().__init__(f"Unhandled event: {event_type}")


class DriverTimeoutError(HarnessError):
    """An automation operation exceeded its deadline."""

    def __init__(self, operation: str, selector: str = "", detail: str = ""):
        self.operation = operation
        self.selector = selector
        target = f" {selector!r}" if selector else ""
        message = f"{operation}{target} timed out"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
