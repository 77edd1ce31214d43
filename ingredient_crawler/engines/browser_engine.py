from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from playwright.async_api import Browser, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from .base import ExtractionEngine
from ..documents.base import RawDocument
from ..documents.browser import BrowserDocument
from ..errors import NavigationError, SessionError

logger = logging.getLogger(__name__)


def app_data_dir() -> Path:
    base = os.getenv("LOCALAPPDATA") or str(Path.home() / ".ingredient-crawler")
    p = Path(base) / "ingredient-crawler"
    p.mkdir(parents=True, exist_ok=True)
    return p


def provision_browsers_path() -> str:
    """Point Playwright at a per-user browsers dir unless the caller already chose one."""
    return os.environ.setdefault("PLAYWRIGHT_BROWSERS_PATH", str(app_data_dir() / "ms-playwright"))


LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
    "--window-size=1920,1080",
]


class BrowserSession:
    """
    Lazily launched headless Chromium, reused across documents.
    Pages are handed out one at a time; the session is not safe for overlapping pages.
    """
    def __init__(self, *, headless: bool = True, executable_path: Optional[str] = None) -> None:
        self.headless = headless
        self.executable_path = executable_path
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    async def browser(self) -> Browser:
        if self._browser is not None and self._browser.is_connected():
            return self._browser
        try:
            if self._playwright is None:
                # A given executable needs no managed browser download.
                if self.executable_path is None:
                    provision_browsers_path()
                self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                executable_path=self.executable_path,
                args=LAUNCH_ARGS,
            )
        except PlaywrightError as exc:
            raise SessionError(
                f"Could not launch browser: {exc}. "
                f"Run `playwright install chromium` or set PLAYWRIGHT_BROWSERS_PATH "
                f"(currently {os.environ.get('PLAYWRIGHT_BROWSERS_PATH', 'unset')})"
            ) from exc
        logger.info("Browser launched (headless=%s)", self.headless)
        return self._browser

    @property
    def lock(self) -> asyncio.Lock:
        return self._lock

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None


class BrowserEngine(ExtractionEngine):
    """Playwright-driven engine for script-rendered product pages."""

    def __init__(self, *args, session: Optional[BrowserSession] = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.session = session or BrowserSession(
            headless=self.config.headless,
            executable_path=self.config.executable_path,
        )

    @asynccontextmanager
    async def open_document(
        self, url: str, *, wait_selector: Optional[str] = None, timeout: Optional[float] = None
    ) -> AsyncIterator[BrowserDocument]:
        cfg = self.config
        timeout = timeout or cfg.navigation_timeout
        async with self.session.lock:
            browser = await self.session.browser()
            try:
                context = await browser.new_context(user_agent=cfg.user_agent, viewport=cfg.viewport)
            except PlaywrightError as exc:
                raise SessionError(f"Could not open browser context: {exc}", url=url) from exc
            try:
                try:
                    page = await context.new_page()
                except PlaywrightError as exc:
                    raise SessionError(f"Could not open page: {exc}", url=url) from exc
                logger.info("Loading %s", url)
                try:
                    await page.goto(url, wait_until="networkidle", timeout=timeout * 1000)
                except PlaywrightError as exc:
                    raise NavigationError(f"Could not load {url}: {exc}", url=url) from exc

                doc = BrowserDocument(page)
                if wait_selector and not await doc.wait_for(wait_selector, cfg.search_wait_timeout):
                    logger.info("Timed out waiting for %s on %s", wait_selector, url)
                if cfg.settle_delay > 0 and wait_selector is None:
                    await asyncio.sleep(cfg.settle_delay)
                try:
                    yield doc
                except PlaywrightError as exc:
                    raise SessionError(f"Browser error while reading {url}: {exc}", url=url) from exc
            finally:
                await context.close()

    async def prepare(self, doc: RawDocument) -> None:
        # Product detail sections load lazily as they scroll into view.
        if not isinstance(doc, BrowserDocument):
            return
        first, second = (tuple(self.config.scroll_delays) + (0.0, 0.0))[:2]
        await doc.scroll_to(None)
        await asyncio.sleep(first)
        await doc.scroll_to(2000)
        await asyncio.sleep(second)

    async def close(self) -> None:
        await self.session.close()
