"""TodoMVC binding: concrete assertions and actions for the TodoMVC model.

Maps the model vocabulary ("Single todo", "add todo", ...) onto the TodoMVC
UI through the driver capability.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from ui_mbt.actions import EventDispatcher
from ui_mbt.assertions import AssertionDispatcher
from ui_mbt.config import HarnessConfig, SelectorMap
from ui_mbt.driver import require
from ui_mbt.errors import MissingElementError
from ui_mbt.models import Event, ModelState, PathReport
from ui_mbt.sequencer import PathSequencer, StepListener

_LOGGER = logging.getLogger(__name__)


class TodoState(str, Enum):
    EMPTY_TODO_FORM = "Empty todo form"
    NEW_TODO = "New todo"
    SINGLE_TODO = "Single todo"
    MULTIPLE_TODOS = "Multiple todos"


class TodoEvent(str, Enum):
    FILL_OUT_TODO = "fill out todo"
    ADD_TODO = "add todo"
    DELETE_TODO = "delete todo"


class TodoMvcApp:
    """Assertions and actions for TodoMVC, plus a ready path sequencer.

    Example:
        app = TodoMvcApp(load_config())
        async with open_browser(app.config) as driver:
            await app.start(driver)
            report = await app.sequencer().run(path, driver)
    """

    def __init__(
        self,
        config: Optional[HarnessConfig] = None,
        selectors: Optional[SelectorMap] = None,
    ):
        self.config = config or HarnessConfig()
        self.selectors = selectors or SelectorMap.load(self.config.selectors_file)
        self.assertions = AssertionDispatcher()
        self.actions = EventDispatcher()

        self.assertions.register(TodoState.EMPTY_TODO_FORM, self.assert_empty_todo_form)
        self.assertions.register(TodoState.NEW_TODO, self.assert_new_todo)
        self.assertions.register(TodoState.SINGLE_TODO, self.assert_single_todo)
        self.assertions.register(TodoState.MULTIPLE_TODOS, self.assert_multiple_todos)

        self.actions.register(TodoEvent.FILL_OUT_TODO, self.fill_out_todo)
        self.actions.register(TodoEvent.ADD_TODO, self.add_todo)
        self.actions.register(TodoEvent.DELETE_TODO, self.delete_todo)

    def sequencer(self, on_step: Optional[StepListener] = None) -> PathSequencer:
        return PathSequencer(self.assertions, self.actions, on_step=on_step)

    async def start(self, handle: Any) -> Any:
        """Load a fresh TodoMVC instance into ``handle``."""
        _LOGGER.info("Starting TodoMVC at %s", self.config.base_url)
        await handle.navigate(self.config.base_url)
        return handle

    async def todo_items(self, handle: Any) -> list:
        return await handle.query_all(self.selectors.get("todo_list.items"))

    async def item_count(self, handle: Any) -> int:
        return len(await self.todo_items(handle))

    async def _expect_item_count(self, handle: Any, expected: int) -> None:
        count = await self.item_count(handle)
        if count != expected:
            raise AssertionError(f"Expected {expected} todo items, found {count}")

    # -- Assertions --

    async def assert_empty_todo_form(self, handle: Any, state: ModelState) -> None:
        await handle.wait_for_selector(self.selectors.get("todo_form.new_todo"))

    async def assert_new_todo(self, handle: Any, state: ModelState) -> None:
        new_todo = await handle.wait_for_selector(self.selectors.get("todo_form.new_todo"))
        value = await new_todo.evaluate("(el) => el.value")
        if value != self.config.todo_text:
            raise AssertionError(
                f"Expected new todo input to hold {self.config.todo_text!r}, found {value!r}"
            )

    async def assert_single_todo(self, handle: Any, state: ModelState) -> None:
        await self._expect_item_count(handle, 1)

    async def assert_multiple_todos(self, handle: Any, state: ModelState) -> None:
        await self._expect_item_count(handle, 2)

    # -- Actions --

    async def fill_out_todo(self, handle: Any, event: Event) -> None:
        new_todo = await require(handle, self.selectors.get("todo_form.new_todo"), "new todo input")
        await new_todo.fill(self.config.todo_text)

    async def add_todo(self, handle: Any, event: Event) -> None:
        new_todo = await require(handle, self.selectors.get("todo_form.new_todo"), "new todo input")
        await new_todo.fill(self.config.todo_text)
        await new_todo.press("Enter")

    async def delete_todo(self, handle: Any, event: Event) -> None:
        items = await self.todo_items(handle)
        if not items:
            raise MissingElementError(self.selectors.get("todo_list.items"), "todo items")
        first = items[0]
        # The delete button only shows while the item is hovered
        await first.hover()
        button = await require(first, self.selectors.get("todo_list.destroy"), "delete button")
        await button.click()

    async def walk(
        self,
        path: Any,
        open_handle: Any,
        on_step: Optional[StepListener] = None,
    ) -> tuple[PathReport, int]:
        """Open a fresh SUT, run ``path`` on it and count the todo items left.

        Args:
            path: Path to run
            open_handle: Factory returning an async context manager that yields
                a SUT handle
            on_step: Called with every finished step

        Returns:
            The path report and the number of todo items shown afterwards
        """
        async with open_handle() as handle:
            await self.start(handle)
            report = await self.sequencer(on_step).run(path, handle)
            return report, await self.item_count(handle)
