"""
Test runner for 'todomvc.feature'.

Step definitions live in tests/step_defs/todomvc_steps.py and are registered
in conftest.py (at project root). Scenarios run against the in-memory
TodoMVC page unless --todomvc-url points them at a live application.
"""

from pathlib import Path

from pytest_bdd import scenarios

# Use absolute path to the feature file
TESTS_DIR = Path(__file__).parent.absolute()
FEATURE_FILE = TESTS_DIR / "features" / "todomvc.feature"

scenarios(str(FEATURE_FILE.absolute()))
