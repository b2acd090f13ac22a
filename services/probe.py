import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from playwright.async_api import Browser, Error as PlaywrightError, TimeoutError as PlaywrightTimeout
from playwright.async_api import async_playwright

from core.config import Settings
from core.errors import NavigationError, ProbeBusy, ProbeTimeout, SelectorNotFound
from models.models_tracker import CompareMode

logger = logging.getLogger("pagewatch.probe")

VIEWPORT = {"width": 1512, "height": 823}


class ContentProbe:
    """
    One-shot content extraction in a throwaway Chromium.

    Each call gets its own browser process, which is closed on every exit
    path. At most ``probe_max_concurrency`` browsers run at the same time;
    extra callers wait up to ``probe_queue_timeout`` seconds for a slot.
    """

    def __init__(self, settings: Settings, launcher: Optional[Callable] = None):
        self.settings = settings
        self._launcher = launcher or self._launch_chromium
        self._slots = asyncio.Semaphore(settings.probe_max_concurrency)
        self._active = 0

    @property
    def active_browsers(self) -> int:
        return self._active

    @asynccontextmanager
    async def _launch_chromium(self) -> AsyncIterator[Browser]:
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=self.settings.headless,
                args=["--disable-blink-features=AutomationControlled"],
            )
            try:
                yield browser
            finally:
                await browser.close()

    def _return_slot(self, acquire: asyncio.Future):
        # an abandoned acquire may still have won a permit
        if not acquire.cancelled() and acquire.exception() is None:
            self._slots.release()

    async def _acquire_slot(self):
        acquire = asyncio.ensure_future(self._slots.acquire())
        try:
            done, _ = await asyncio.wait({acquire}, timeout=self.settings.probe_queue_timeout)
        except asyncio.CancelledError:
            acquire.cancel()
            acquire.add_done_callback(self._return_slot)
            raise
        if not done:
            acquire.cancel()
            acquire.add_done_callback(self._return_slot)
            logger.warning("probe rejected, %s browsers busy", self._active)
            raise ProbeBusy()

    async def run(self, website_url: str, selector: str, compare_mode: CompareMode) -> Optional[str]:
        await self._acquire_slot()
        try:
            return await asyncio.wait_for(
                self._probe(website_url, selector, CompareMode(compare_mode)),
                timeout=self.settings.probe_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("probe of %s exceeded %ss", website_url, self.settings.probe_timeout)
            raise ProbeTimeout()
        finally:
            self._slots.release()

    async def _probe(self, website_url: str, selector: str, compare_mode: CompareMode) -> Optional[str]:
        logger.info("probing %s for %r (%s)", website_url, selector, compare_mode.value)
        self._active += 1
        try:
            async with self._launcher() as browser:
                page = await browser.new_page()
                try:
                    await page.goto(
                        website_url,
                        wait_until="load",
                        timeout=self.settings.probe_navigation_timeout_ms,
                    )
                except PlaywrightError as e:
                    logger.info("navigation to %s failed: %s", website_url, e)
                    raise NavigationError()
                await page.set_viewport_size(VIEWPORT)
                try:
                    el = await page.wait_for_selector(
                        selector,
                        state="attached",
                        timeout=self.settings.probe_selector_timeout_ms,
                    )
                except PlaywrightTimeout:
                    raise SelectorNotFound()
                except PlaywrightError as e:
                    logger.info("selector %r unusable: %s", selector, e)
                    raise SelectorNotFound()
                if el is None:
                    raise SelectorNotFound()
                if compare_mode is CompareMode.INNER_HTML:
                    return await el.inner_html()
                return await el.inner_text()
        finally:
            self._active -= 1
