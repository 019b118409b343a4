"""Root conftest.py - harness fixtures and step definition registration for pytest-bdd."""

from contextlib import asynccontextmanager

import pytest

from tests.step_defs.helpers import ScenarioContext
from tests.unit.mocks import MockTodoPage
from ui_mbt.config import BROWSERS, HarnessConfig, load_config
from ui_mbt.driver import open_browser
from ui_mbt.todomvc import TodoMvcApp

# Register step definition modules so pytest-bdd finds them from every test module
pytest_plugins = ["tests.step_defs.todomvc_steps"]


def pytest_addoption(parser):
    group = parser.getgroup("ui-mbt", "model-based UI path harness")
    group.addoption(
        "--todomvc-url",
        action="store",
        default=None,
        help="Walk the BDD scenarios against a live TodoMVC at this URL "
        "instead of the in-memory page",
    )
    group.addoption(
        "--browser-name",
        action="store",
        default=None,
        choices=BROWSERS,
        help="Playwright browser used with --todomvc-url",
    )
    group.addoption(
        "--harness-config",
        action="store",
        default=None,
        help="Harness YAML configuration file",
    )
    group.addoption(
        "--show-browser",
        action="store_true",
        default=False,
        help="Run the browser with a window",
    )


@pytest.fixture(scope="session")
def harness_config(pytestconfig) -> HarnessConfig:
    """Harness settings from the YAML configuration and command line."""
    return load_config(
        pytestconfig.getoption("harness_config"),
        base_url=pytestconfig.getoption("todomvc_url"),
        browser=pytestconfig.getoption("browser_name"),
        headless=False if pytestconfig.getoption("show_browser") else None,
    )


@pytest.fixture
def todomvc_app(harness_config: HarnessConfig) -> TodoMvcApp:
    """TodoMVC assertions and actions bound to the harness settings."""
    return TodoMvcApp(harness_config)


@pytest.fixture
def open_todomvc(pytestconfig, harness_config: HarnessConfig):
    """Factory of SUT handles: a live browser page or the in-memory page.

    Each call opens a new handle, so every walked path owns its SUT.
    """
    if pytestconfig.getoption("todomvc_url"):
        return lambda: open_browser(harness_config)

    @asynccontextmanager
    async def _open_mock_page():
        yield MockTodoPage()

    return _open_mock_page


@pytest.fixture
def path_context() -> ScenarioContext:
    """Per-scenario context shared between BDD steps."""
    return ScenarioContext()
