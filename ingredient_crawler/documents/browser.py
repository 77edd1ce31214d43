from __future__ import annotations

from typing import List, Optional

from playwright.async_api import ElementHandle, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError


class BrowserElement:
    def __init__(self, handle: ElementHandle) -> None:
        self._handle = handle

    async def text(self) -> str:
        return await self._handle.text_content() or ""

    async def attr(self, name: str) -> Optional[str]:
        return await self._handle.get_attribute(name)

    async def click(self) -> None:
        # DOM click, so off-screen accordion buttons still toggle.
        await self._handle.evaluate("el => el.click()")

    async def closest(self, selector: str) -> Optional["BrowserElement"]:
        handle = await self._handle.evaluate_handle("(el, sel) => el.closest(sel)", selector)
        element = handle.as_element()
        return BrowserElement(element) if element is not None else None

    async def query(self, selector: str) -> Optional["BrowserElement"]:
        found = await self._handle.query_selector(selector)
        return BrowserElement(found) if found is not None else None


class BrowserDocument:
    """RawDocument backed by a live Playwright page. Does not own the page."""

    def __init__(self, page: Page) -> None:
        self.page = page

    @property
    def url(self) -> str:
        return self.page.url

    async def query_all(self, selector: str) -> List[BrowserElement]:
        return [BrowserElement(h) for h in await self.page.query_selector_all(selector)]

    async def query(self, selector: str) -> Optional[BrowserElement]:
        found = await self.page.query_selector(selector)
        return BrowserElement(found) if found is not None else None

    async def title(self) -> str:
        return await self.page.title()

    async def wait_for(self, selector: str, timeout: float) -> bool:
        try:
            await self.page.wait_for_selector(selector, timeout=timeout * 1000, state="attached")
        except PlaywrightTimeoutError:
            return False
        return True

    async def html(self) -> str:
        return await self.page.content()

    async def scroll_to(self, y: Optional[int] = None) -> None:
        """Scroll to an absolute offset, or to the bottom when y is None."""
        if y is None:
            await self.page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")
        else:
            await self.page.evaluate("y => window.scrollTo(0, y)", y)
