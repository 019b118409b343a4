"""Driver capability consumed by assertion and action routines.

Routines only ever talk to the SUT through the :class:`Driver` and
:class:`Element` protocols. :class:`PlaywrightDriver` adapts a Playwright
async ``Page`` to them and turns Playwright timeouts into
:class:`~ui_mbt.errors.DriverTimeoutError`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Protocol, runtime_checkable

from playwright.async_api import ElementHandle, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from ui_mbt.config import HarnessConfig
from ui_mbt.errors import ConfigurationError, DriverTimeoutError, MissingElementError

_LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Element(Protocol):
    async def fill(self, text: str) -> None: ...

    async def press(self, key: str) -> None: ...

    async def click(self) -> None: ...

    async def hover(self) -> None: ...

    async def evaluate(self, expression: str) -> Any: ...

    async def query(self, selector: str) -> Optional["Element"]: ...


@runtime_checkable
class Driver(Protocol):
    async def navigate(self, url: str) -> None: ...

    async def query(self, selector: str) -> Optional[Element]: ...

    async def query_all(self, selector: str) -> list[Element]: ...

    async def wait_for_selector(self, selector: str) -> Element: ...


async def require(handle: Any, selector: str, what: str = "") -> Element:
    """Query ``selector`` on a driver or element and fail if it is absent.

    Raises:
        MissingElementError: No element matches ``selector``
    """
    element = await handle.query(selector)
    if element is None:
        raise MissingElementError(selector, what)
    return element


class PlaywrightElement:
    """:class:`Element` backed by a Playwright ``ElementHandle``."""

    def __init__(self, handle: ElementHandle):
        self._handle = handle

    @property
    def handle(self) -> ElementHandle:
        return self._handle

    async def _call(self, operation: str, *args: Any) -> Any:
        try:
            return await getattr(self._handle, operation)(*args)
        except PlaywrightTimeoutError as exc:
            raise DriverTimeoutError(operation, detail=str(exc)) from exc

    async def fill(self, text: str) -> None:
        await self._call("fill", text)

    async def press(self, key: str) -> None:
        await self._call("press", key)

    async def click(self) -> None:
        await self._call("click")

    async def hover(self) -> None:
        await self._call("hover")

    async def evaluate(self, expression: str) -> Any:
        return await self._call("evaluate", expression)

    async def query(self, selector: str) -> Optional["PlaywrightElement"]:
        found = await self._handle.query_selector(selector)
        return PlaywrightElement(found) if found is not None else None


class PlaywrightDriver:
    """:class:`Driver` backed by a Playwright async ``Page``.

    One instance wraps exactly one page and belongs to one running path.
    """

    def __init__(self, page: Page):
        self._page = page

    @property
    def page(self) -> Page:
        return self._page

    async def navigate(self, url: str) -> None:
        _LOGGER.debug("Navigating to %s", url)
        try:
            await self._page.goto(url)
        except PlaywrightTimeoutError as exc:
            raise DriverTimeoutError("navigate", url, str(exc)) from exc

    async def query(self, selector: str) -> Optional[PlaywrightElement]:
        found = await self._page.query_selector(selector)
        return PlaywrightElement(found) if found is not None else None

    async def query_all(self, selector: str) -> list[PlaywrightElement]:
        found = await self._page.query_selector_all(selector)
        return [PlaywrightElement(handle) for handle in found]

    async def wait_for_selector(self, selector: str) -> PlaywrightElement:
        try:
            found = await self._page.wait_for_selector(selector)
        except PlaywrightTimeoutError as exc:
            raise DriverTimeoutError("wait_for_selector", selector, str(exc)) from exc
        if found is None:
            raise MissingElementError(selector)
        return PlaywrightElement(found)


@asynccontextmanager
async def open_browser(config: HarnessConfig) -> AsyncIterator[PlaywrightDriver]:
    """Launch a browser with one isolated context and yield its page driver.

    Every call owns its own context, so concurrently running paths never share
    cookies, storage or the page itself.
    """
    async with async_playwright() as playwright:
        browser_type = getattr(playwright, config.browser, None)
        if browser_type is None:
            raise ConfigurationError(f"Unknown browser: {config.browser}")
        browser = await browser_type.launch(headless=config.headless)
        _LOGGER.info(
            "Browser started: %s (headless=%s, timeout=%dms)",
            config.browser,
            config.headless,
            config.timeout_ms,
        )
        try:
            context = await browser.new_context()
            context.set_default_timeout(config.timeout_ms)
            page = await context.new_page()
            yield PlaywrightDriver(page)
        finally:
            await browser.close()
            _LOGGER.info("Browser closed")
