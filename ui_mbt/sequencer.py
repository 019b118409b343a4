"""Path sequencer: walks a path through the dispatchers, fail-fast.

Each state becomes an ``Assert state ...`` step and each event an
``Execute event ...`` step. The first failing step ends the run; the report
keeps every step up to and including the failure.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import AbstractAsyncContextManager
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Union

from ui_mbt.actions import EventDispatcher
from ui_mbt.assertions import AssertionDispatcher
from ui_mbt.models import (
    Event,
    ModelState,
    Outcome,
    Path,
    PathReport,
    StepKind,
    StepReport,
    ensure_sequence,
)

_LOGGER = logging.getLogger(__name__)

StepListener = Callable[[StepReport], None]


class SequencerPhase(str, Enum):
    IDLE = "idle"
    RUNNING_ASSERTION = "running_assertion"
    RUNNING_ACTION = "running_action"
    PASSED = "passed"
    FAILED = "failed"


TERMINAL_PHASES = (SequencerPhase.PASSED, SequencerPhase.FAILED)


class _PathRun:
    """Bookkeeping for a single :meth:`PathSequencer.run` call."""

    def __init__(self, path: Path):
        self.path = path
        self.phase = SequencerPhase.IDLE
        self.steps: list[StepReport] = []

    def move_to(self, phase: SequencerPhase) -> None:
        if self.phase in TERMINAL_PHASES:
            raise RuntimeError(f"Path run already finished ({self.phase.value})")
        _LOGGER.debug("Path %s: %s -> %s", self.path.name, self.phase.value, phase.value)
        self.phase = phase


class PathSequencer:
    """Runs paths against a SUT handle using the two dispatchers.

    The sequencer keeps no state between runs; one instance may serve many
    paths, including concurrent ones on distinct handles.
    """

    def __init__(
        self,
        assertions: AssertionDispatcher,
        actions: EventDispatcher,
        on_step: Optional[StepListener] = None,
    ):
        self.assertions = assertions
        self.actions = actions
        self.on_step = on_step

    async def run(self, path: Union[Path, Sequence[Any]], handle: Any) -> PathReport:
        """Walk ``path`` left to right against ``handle``.

        Failures never escape: they are recorded on the failing step and the
        report is marked failed.
        """
        path = ensure_sequence(path)
        run = _PathRun(path)
        _LOGGER.info("Running path %s (%d steps)", path.name or path.description, len(path))

        for index, element in enumerate(path.elements):
            step = await self._run_step(run, index, element, handle)
            run.steps.append(step)
            if self.on_step is not None:
                self.on_step(step)
            if not step.passed:
                run.move_to(SequencerPhase.FAILED)
                _LOGGER.error(
                    "Path %s failed at step %d: %s",
                    path.name or path.description,
                    index + 1,
                    step.label,
                )
                return PathReport(Outcome.FAILED, run.steps, path.name)

        run.move_to(SequencerPhase.PASSED)
        return PathReport(Outcome.PASSED, run.steps, path.name)

    async def _run_step(
        self, run: _PathRun, index: int, element: Union[ModelState, Event], handle: Any
    ) -> StepReport:
        if isinstance(element, ModelState):
            run.move_to(SequencerPhase.RUNNING_ASSERTION)
            kind = StepKind.STATE
        else:
            run.move_to(SequencerPhase.RUNNING_ACTION)
            kind = StepKind.EVENT

        step = StepReport(index=index, kind=kind, label=repr(element), outcome=Outcome.PASSED)
        started = time.monotonic()
        try:
            step.label = element.label
            if kind is StepKind.STATE:
                step.matched = await self.assertions.assert_state(element, handle)
            else:
                await self.actions.execute(element, handle)
        except Exception as exc:  # noqa: BLE001
            step.outcome = Outcome.FAILED
            step.error = exc
        step.duration = time.monotonic() - started

        if step.passed:
            _LOGGER.info("✓ %s (%.3fs)", step.label, step.duration)
        else:
            _LOGGER.error("✗ %s: %s", step.label, step.error)
        return step


HandleFactory = Callable[[], AbstractAsyncContextManager]


async def run_paths(
    sequencer: PathSequencer,
    paths: Sequence[Path],
    open_handle: HandleFactory,
    max_concurrency: int = 1,
) -> list[PathReport]:
    """Run independent paths, each on its own freshly opened SUT handle.

    Args:
        sequencer: Sequencer shared by all paths
        paths: Paths to run
        open_handle: Factory returning an async context manager that yields a
            ready SUT handle (for example a new isolated browser context)
        max_concurrency: Maximum number of paths running at once

    Returns:
        One report per path, in the order of ``paths``. A path whose handle
        cannot be opened gets a failed report with a single setup step.
    """
    if max_concurrency < 1:
        raise ValueError("max_concurrency must be at least 1")
    semaphore = asyncio.Semaphore(max_concurrency)

    async def _run_one(path: Path) -> PathReport:
        async with semaphore:
            try:
                async with open_handle() as handle:
                    return await sequencer.run(path, handle)
            except Exception as exc:  # noqa: BLE001
                _LOGGER.error(
                    "Path %s could not get a SUT handle: %s",
                    path.name or path.description,
                    exc,
                )
                step = StepReport(
                    index=-1,
                    kind=StepKind.SETUP,
                    label="Open SUT handle",
                    outcome=Outcome.FAILED,
                    error=exc,
                )
                return PathReport(Outcome.FAILED, [step], path.name)

    return list(await asyncio.gather(*(_run_one(path) for path in paths)))
