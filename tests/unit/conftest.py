"""Unit test conftest for the harness.

Provides the in-memory TodoMVC page instead of a real browser, enabling
isolated unit testing of the dispatchers, the sequencer and the TodoMVC
binding.
"""

from contextlib import asynccontextmanager

import pytest

from tests.unit.mocks import MockTodoPage
from ui_mbt.config import HarnessConfig
from ui_mbt.models import Path
from ui_mbt.todomvc import TodoMvcApp


# -- Mock SUT Fixtures --


@pytest.fixture
def page() -> MockTodoPage:
    """Mock TodoMVC page fixture."""
    return MockTodoPage()


@pytest.fixture
def app() -> TodoMvcApp:
    """TodoMVC binding using the packaged selectors and default settings."""
    return TodoMvcApp(HarnessConfig(base_url="http://todomvc.test/"))


@pytest.fixture
def open_mock_page():
    """Factory of fresh mock pages, shaped like ``open_browser``.

    Every opened page is kept on ``open_mock_page.opened`` for inspection.
    """
    opened = []

    @asynccontextmanager
    async def _open():
        page = MockTodoPage()
        opened.append(page)
        yield page

    _open.opened = opened
    return _open


# -- Paths --


@pytest.fixture
def single_todo_path() -> Path:
    """Scenario 1: from the empty form to a single todo."""
    return Path.of(
        "Empty todo form",
        "fill out todo",
        "New todo",
        "add todo",
        "Single todo",
        name="single_todo",
    )


@pytest.fixture
def delete_todo_path() -> Path:
    """Scenarios 2 and 3: two todos, then delete the first one."""
    return Path.of(
        "Empty todo form",
        "fill out todo",
        "New todo",
        "add todo",
        "Single todo",
        "add todo",
        "Multiple todos",
        "delete todo",
        "Single todo",
        name="delete_todo",
    )
