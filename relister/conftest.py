"""
Shared pytest fixtures: an in-memory stand-in for BrowserSession.

The fake models just enough of Seller Hub for the relister: pages of
listing rows, a next-page control, the ended-listings page, menu items and
confirmation surfaces. Every interaction is recorded in `events`.
"""
from typing import Any, Dict, List, Optional

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeout

from . import selectors as sel
from .config import Config


class FakeElement:
    def __init__(self, text: str = "", attrs: Optional[Dict[str, str]] = None,
                 children: Optional[Dict[str, Any]] = None, fail_click: bool = False, name: str = ""):
        self.text = text
        self.attrs = attrs or {}
        self.children = children or {}
        self.fail_click = fail_click
        self.name = name
        self.clicks = 0

    def __repr__(self):
        return f"FakeElement({self.name or self.text!r})"


def build_row(views: Optional[str] = "0", time_left: Optional[str] = "3d 4h 10m",
              sold: Optional[str] = "0", available: Optional[str] = "1",
              listing_id: str = "", checkbox: bool = True, fail_click: bool = False) -> FakeElement:
    children: Dict[str, Any] = {}
    if checkbox:
        children[sel.ROW_CHECKBOX] = FakeElement(
            attrs={"value": listing_id}, fail_click=fail_click, name=f"checkbox {listing_id}"
        )
    if listing_id:
        children[sel.ROW_ITEM_LINK] = FakeElement(attrs={"href": f"https://www.ebay.com/itm/{listing_id}"})
    for locator, value in (
        (sel.ROW_VIEWS, views),
        (sel.ROW_TIME_LEFT, time_left),
        (sel.ROW_SOLD, sold),
        (sel.ROW_AVAILABLE, available),
    ):
        if value is not None:
            children[locator] = FakeElement(text=value)
    return FakeElement(children=children, name=f"row {listing_id}")


class FakeSession:
    def __init__(self, cfg: Config, pages: Optional[List[List[FakeElement]]] = None,
                 ended_rows: Optional[List[FakeElement]] = None, infinite: bool = False):
        self.cfg = cfg
        self.pages = pages if pages is not None else [[]]
        self.ended_rows = ended_rows or []
        self.infinite = infinite
        self.view = "home"
        self.page_index = 0
        self.url = ""

        self.events: List[tuple] = []
        self.scanned_pages: List[int] = []
        self.clicked: List[Any] = []
        self.fills: List[tuple] = []

        # Test knobs
        self.elements: Dict[str, Any] = {}
        self.element_lists: Dict[str, List[Any]] = {}
        self.failing_locators: set = set()
        self.missing_surfaces: set = set()
        self.tableless_pages: set = set()
        self.evaluate_result: Any = True
        self.menu_items: List[FakeElement] = [FakeElement(text="Edit"), FakeElement(text="End listings")]
        self.next_button = FakeElement(name="next")

    # Navigation ---------------------------------------------------------

    async def navigate(self, url: str) -> None:
        self.url = url
        self.events.append(("navigate", url))
        if url == self.cfg.ENDED_URL:
            self.view = "ended"
        elif url == self.cfg.ACTIVE_URL:
            self.view = "active"
            self.page_index = 0
        else:
            self.view = "home"

    def current_rows(self) -> List[FakeElement]:
        if self.view == "ended":
            return self.ended_rows
        if self.view == "active" and self.page_index < len(self.pages):
            return self.pages[self.page_index]
        return []

    def has_next_page(self) -> bool:
        return self.view == "active" and (self.infinite or self.page_index < len(self.pages) - 1)

    # Queries ------------------------------------------------------------

    async def find(self, locator: str, within: Any = None) -> Optional[Any]:
        if locator in self.failing_locators:
            raise RuntimeError(f"find failed: {locator}")
        if within is not None:
            return within.children.get(locator)
        if locator == sel.NEXT_PAGE:
            if self.view != "active":
                return None
            self.next_button.attrs["aria-disabled"] = "false" if self.has_next_page() else "true"
            return self.next_button
        return self.elements.get(locator)

    async def find_all(self, locator: str, within: Any = None) -> List[Any]:
        if locator in self.failing_locators:
            raise RuntimeError(f"find_all failed: {locator}")
        if locator == sel.ROW:
            return list(self.current_rows())
        if locator == sel.MENU_ITEMS:
            return list(self.menu_items)
        return list(self.element_lists.get(locator, []))

    async def text(self, handle: Any) -> str:
        return handle.text

    async def attribute(self, handle: Any, name: str) -> Optional[str]:
        return handle.attrs.get(name)

    # Actions ------------------------------------------------------------

    async def click(self, target: Any, timeout_ms: Optional[int] = None) -> None:
        if isinstance(target, str):
            if target in self.failing_locators:
                raise PlaywrightTimeout(f"Timeout clicking {target}")
            self.clicked.append(target)
            self.events.append(("click", target))
            return
        if target.fail_click:
            raise PlaywrightTimeout(f"Timeout clicking {target!r}")
        target.clicks += 1
        self.clicked.append(target)
        self.events.append(("click", target))
        if target is self.next_button:
            self.page_index += 1

    async def fill(self, locator: str, text: str) -> None:
        self.fills.append((locator, text))
        self.events.append(("fill", locator, text))

    async def press(self, locator: str, key: str) -> None:
        self.events.append(("press", locator, key))

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        self.events.append(("evaluate", arg))
        return self.evaluate_result

    # Waits --------------------------------------------------------------

    async def wait_for(self, locator: str, timeout_ms: int, state: str = "visible") -> Any:
        if locator in self.missing_surfaces or locator in self.failing_locators:
            raise PlaywrightTimeout(f"Timeout {timeout_ms}ms waiting for {locator}")
        if locator == sel.TABLE_CONTAINER and self.view == "active":
            if self.page_index in self.tableless_pages:
                raise PlaywrightTimeout(f"Timeout {timeout_ms}ms waiting for {locator}")
            self.scanned_pages.append(self.page_index)
        self.events.append(("wait_for", locator))
        return self.elements.get(locator) or FakeElement(name=locator)

    async def settle(self, delay_ms: int) -> None:
        self.events.append(("settle", delay_ms))

    async def pause(self, ms: int) -> None:
        self.events.append(("pause", ms))


@pytest.fixture
def cfg() -> Config:
    c = Config()
    c.MODE = "eager"
    c.ON_JOB_ERROR = "abort"
    c.MAX_PAGES = 50
    c.DAYS_LEFT_THRESHOLD = 15
    c.UNDER_ONE_DAY_MATCHES = False
    return c


@pytest.fixture
def make_row():
    return build_row


@pytest.fixture
def make_element():
    return FakeElement


@pytest.fixture
def make_session(cfg):
    def _make(**kwargs) -> FakeSession:
        return FakeSession(cfg, **kwargs)
    return _make
