"""Model-based UI path harness.

Walks paths produced by a state-machine model through a live UI: every state
is asserted against the application, every event is performed on it.
"""

from ui_mbt.actions import EventDispatcher
from ui_mbt.assertions import AssertionDispatcher
from ui_mbt.errors import (
    AssertionFailure,
    ConfigurationError,
    DriverTimeoutError,
    HarnessError,
    InvalidPathError,
    MissingElementError,
    UnhandledEventError,
)
from ui_mbt.matching import active_paths, ancestors, matches_state
from ui_mbt.models import Event, ModelState, Outcome, Path, PathReport, StepKind, StepReport
from ui_mbt.sequencer import PathSequencer, SequencerPhase, run_paths

__all__ = [
    "AssertionDispatcher",
    "AssertionFailure",
    "ConfigurationError",
    "DriverTimeoutError",
    "Event",
    "EventDispatcher",
    "HarnessError",
    "InvalidPathError",
    "MissingElementError",
    "ModelState",
    "Outcome",
    "Path",
    "PathReport",
    "PathSequencer",
    "SequencerPhase",
    "StepKind",
    "StepReport",
    "UnhandledEventError",
    "active_paths",
    "ancestors",
    "matches_state",
    "run_paths",
]
