"""Shared helpers for the path step definitions."""

from pathlib import Path as FilePath
from typing import Optional

from ui_mbt.models import PathReport

PATHS_DIR = FilePath(__file__).parent.parent / "paths"
TODOMVC_PATHS_FILE = PATHS_DIR / "todomvc.yaml"


class ScenarioContext:
    """Per-scenario state shared between given/when/then steps."""

    def __init__(self):
        self.paths: dict = {}
        self.report: Optional[PathReport] = None
        self.item_count: Optional[int] = None

    def require_report(self) -> PathReport:
        assert self.report is not None, "No path has been walked in this scenario"
        return self.report
