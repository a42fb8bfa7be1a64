"""
Browser session management.

`BrowserSession` is the only object that talks to Playwright. Scanning and
bulk-action code sees it as a small capability interface (navigate, find,
click, fill, wait, read text) so it can run against a fake in tests.
"""
import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, List, Optional, Union

from playwright.async_api import async_playwright, TimeoutError as PlaywrightTimeout

from . import selectors as sel
from .config import Config, config as default_config
from .errors import LoginTimeoutError
from .utils import clean_text

logger = logging.getLogger(__name__)

Target = Union[str, Any]


class BrowserSession:
    """Thin async wrapper around one Playwright page."""

    def __init__(self, page, cfg: Config = default_config):
        self.page = page
        self.cfg = cfg

    @property
    def url(self) -> str:
        return self.page.url

    async def navigate(self, url: str) -> None:
        await self.page.goto(url, timeout=self.cfg.NAVIGATION_TIMEOUT_MS, wait_until="domcontentloaded")

    async def find(self, locator: str, within: Any = None) -> Optional[Any]:
        scope = within if within is not None else self.page
        return await scope.query_selector(locator)

    async def find_all(self, locator: str, within: Any = None) -> List[Any]:
        scope = within if within is not None else self.page
        return await scope.query_selector_all(locator)

    async def click(self, target: Target, timeout_ms: Optional[int] = None) -> None:
        timeout = timeout_ms or self.cfg.CONTROL_TIMEOUT_MS
        if isinstance(target, str):
            await self.page.click(target, timeout=timeout)
        else:
            await target.click(timeout=timeout)

    async def fill(self, locator: str, text: str) -> None:
        await self.page.fill(locator, text)

    async def press(self, locator: str, key: str) -> None:
        await self.page.press(locator, key)

    async def text(self, handle: Any) -> str:
        return clean_text(await handle.inner_text())

    async def attribute(self, handle: Any, name: str) -> Optional[str]:
        return await handle.get_attribute(name)

    async def wait_for(self, locator: str, timeout_ms: int, state: str = "visible") -> Any:
        """Wait for a selector; raises Playwright's TimeoutError when it never shows."""
        return await self.page.wait_for_selector(locator, timeout=timeout_ms, state=state)

    async def wait_for_url(self, predicate: Callable[[str], bool], timeout_ms: int) -> None:
        await self.page.wait_for_url(predicate, timeout=timeout_ms)

    async def settle(self, delay_ms: int) -> None:
        """Wait for network idle, then a fixed settle delay."""
        try:
            await self.page.wait_for_load_state("networkidle", timeout=self.cfg.NETWORK_IDLE_TIMEOUT_MS)
        except PlaywrightTimeout:
            # Seller Hub keeps polling on some pages; networkidle may never come
            await self.page.wait_for_load_state("domcontentloaded", timeout=self.cfg.NETWORK_IDLE_TIMEOUT_MS)
        await self.pause(delay_ms)

    async def pause(self, ms: int) -> None:
        if ms > 0:
            await self.page.wait_for_timeout(ms)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self.page.evaluate(script, arg)

    async def wait_until_logged_in(self, timeout_ms: int) -> None:
        """
        Block until an account marker appears or the URL leaves sign-in.

        Leaving sign-in only counts when the page is on sign-in to begin with.
        """
        waiters = [
            asyncio.ensure_future(
                self.page.wait_for_selector(sel.LOGGED_IN_MARKERS, timeout=timeout_ms)
            ),
        ]
        if "signin" in self.url:
            waiters.append(asyncio.ensure_future(
                self.page.wait_for_url(lambda u: "signin" not in u, timeout=timeout_ms)
            ))
        pending = set(waiters)
        try:
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                if any(not t.exception() for t in done):
                    return
        finally:
            for t in pending:
                t.cancel()
        raise LoginTimeoutError(f"No login detected within {timeout_ms // 1000}s")

    async def save_storage_state(self, path: str) -> None:
        await self.page.context.storage_state(path=path)


async def ensure_logged_in(session: BrowserSession, cfg: Config = default_config) -> bool:
    """
    Make sure the browser is signed in to eBay.

    Sign-in is left to the operator. Returns True when a manual login happened,
    False when the stored session was already valid.
    """
    await session.navigate(cfg.HOME_URL)
    signin = await session.find(sel.SIGNIN_LINK)
    if not signin:
        logger.info(">>> Already logged in. Proceeding...")
        return False

    logger.info(">>> Not logged in. Opening login page...")
    await session.click(signin)
    try:
        await session.wait_for_url(lambda u: "signin" in u, timeout_ms=cfg.NAVIGATION_TIMEOUT_MS)
    except PlaywrightTimeout as e:
        raise LoginTimeoutError(
            f"Sign-in page did not open within {cfg.NAVIGATION_TIMEOUT_MS // 1000}s; still on {session.url}"
        ) from e

    logger.info(f">>> Please log in manually. Waiting up to {cfg.LOGIN_TIMEOUT_MS // 60_000} minutes...")
    await session.wait_until_logged_in(cfg.LOGIN_TIMEOUT_MS)
    logger.info(">>> Login detected! Proceeding...")
    return True


@asynccontextmanager
async def open_browser(cfg: Config = default_config) -> AsyncIterator[BrowserSession]:
    """Launch Chromium and yield a session on a fresh page."""
    launch_args = ["--disable-blink-features=AutomationControlled"]
    if cfg.HEADLESS:
        launch_args += ["--disable-dev-shm-usage", "--no-sandbox", "--disable-gpu"]

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=cfg.HEADLESS, args=launch_args)
        logger.info(f">>> Headless mode: {cfg.HEADLESS}")

        ctx_kwargs = {}
        if cfg.STORAGE_STATE_PATH and os.path.exists(cfg.STORAGE_STATE_PATH):
            ctx_kwargs["storage_state"] = cfg.STORAGE_STATE_PATH
            logger.info(f">>> Using existing storage state: {cfg.STORAGE_STATE_PATH}")

        context = await browser.new_context(
            **ctx_kwargs,
            viewport={"width": 1400, "height": 900},
            locale="en-US",
        )
        context.set_default_timeout(30_000)
        context.set_default_navigation_timeout(cfg.NAVIGATION_TIMEOUT_MS)

        page = await context.new_page()
        try:
            await page.bring_to_front()
        except Exception:
            logger.debug("bring_to_front failed", exc_info=True)

        try:
            yield BrowserSession(page, cfg)
        finally:
            await context.close()
            await browser.close()
