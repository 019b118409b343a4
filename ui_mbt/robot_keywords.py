"""Path Keywords for Robot Framework.

Keywords for walking model paths against TodoMVC from ``.robot`` suites.
Uses @keyword decorator to map clean function names to scenario step text.

Mirrors: tests/step_defs/todomvc_steps.py

Usage:
    *** Settings ***
    Library    ui_mbt.robot_keywords.PathKeywords

    *** Test Cases ***
    Reaches Single Todo
        Load Paths From File    tests/paths/todomvc.yaml
        Walk Path    single_todo
        Path Should Pass
        Todo List Should Contain Items    1
"""

import asyncio
from typing import Any, Callable, Optional

from robot.api import logger
from robot.api.deco import keyword

from ui_mbt.config import load_config
from ui_mbt.driver import open_browser
from ui_mbt.models import PathReport, StepReport
from ui_mbt.paths import load_paths
from ui_mbt.todomvc import TodoMvcApp


class PathKeywords:
    """Keywords for running model paths and checking their reports."""

    ROBOT_LIBRARY_SCOPE = "SUITE"
    ROBOT_LIBRARY_DOC_FORMAT = "TEXT"

    def __init__(
        self,
        config_file: Optional[str] = None,
        open_handle: Optional[Callable[[], Any]] = None,
    ) -> None:
        """Initialize PathKeywords.

        Arguments:
            config_file: Optional harness YAML configuration
            open_handle: Factory for SUT handles, defaults to a new browser
        """
        self._app = TodoMvcApp(load_config(config_file))
        self._open_handle = open_handle or (lambda: open_browser(self._app.config))
        self._paths: dict = {}
        self._report: Optional[PathReport] = None
        self._item_count: Optional[int] = None

    # =========================================================================
    # Path Keywords
    # =========================================================================

    @keyword("Load Paths From File")
    def load_paths_from_file(self, path_file: str) -> list:
        """Load named paths from a YAML or JSON file.

        Returns:
            Names of the loaded paths
        """
        self._paths.update(load_paths(path_file))
        print(f"✓ Loaded {len(self._paths)} paths from {path_file}")
        return list(self._paths)

    @keyword("Walk Path")
    def walk_path(self, path_name: str) -> PathReport:
        """Run a loaded path against a fresh TodoMVC instance.

        Maps to scenario step:
        - "When the "<name>" path is walked"

        Arguments:
            path_name: Name of a path loaded with `Load Paths From File`
        """
        if path_name not in self._paths:
            raise AssertionError(f"Unknown path: {path_name}")
        self._report, self._item_count = asyncio.run(
            self._app.walk(self._paths[path_name], self._open_handle, self._log_step)
        )
        return self._report

    @staticmethod
    def _log_step(step: StepReport) -> None:
        if step.passed:
            logger.info(f"✓ {step.label}")
        else:
            logger.error(f"✗ {step.label}: {step.error}")

    # =========================================================================
    # Verification Keywords
    # =========================================================================

    def _last_report(self) -> PathReport:
        if self._report is None:
            raise AssertionError("No path has been walked yet")
        return self._report

    @keyword("Path Should Pass")
    def path_should_pass(self) -> None:
        """Fail with the recorded step error unless the last path passed."""
        report = self._last_report()
        if not report.passed:
            step = report.failed_step
            raise AssertionError(f"Path failed at {step.label}: {step.error}")
        print(f"✓ Path passed with {len(report.steps)} steps")

    @keyword("Path Should Fail At Step")
    def path_should_fail_at_step(self, label: str) -> None:
        """Verify the last path failed and that ``label`` was the failing step.

        Arguments:
            label: Expected step label, e.g. Execute event {"type":"delete todo"}
        """
        report = self._last_report()
        if report.passed:
            raise AssertionError("Path passed but was expected to fail")
        if report.failed_step.label != label:
            raise AssertionError(
                f"Path failed at {report.failed_step.label!r}, expected {label!r}"
            )
        print(f"✓ Path failed at {label}")

    @keyword("Todo List Should Contain Items")
    def todo_list_should_contain_items(self, count: int) -> None:
        """Verify how many todo items were left after the last path.

        Arguments:
            count: Expected number of items
        """
        self._last_report()
        if self._item_count != int(count):
            raise AssertionError(f"Expected {count} todo items, found {self._item_count}")
        print(f"✓ Todo list holds {count} items")
