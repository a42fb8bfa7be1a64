"""
Scan the currently loaded listings page for matching rows.
"""
import logging
from typing import Callable, List, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeout

from . import selectors as sel
from .config import Config, config as default_config
from .errors import TableNotFoundError
from .matcher import match_row
from .models import MatchRecord

logger = logging.getLogger(__name__)

Accept = Callable[[MatchRecord], bool]


async def wait_for_table(session, cfg: Config = default_config) -> None:
    try:
        await session.wait_for(sel.TABLE_CONTAINER, timeout_ms=cfg.TABLE_TIMEOUT_MS)
    except PlaywrightTimeout as e:
        raise TableNotFoundError(
            f"Listings table did not appear within {cfg.TABLE_TIMEOUT_MS} ms on {session.url}"
        ) from e


async def scan_page(
    session,
    cfg: Config = default_config,
    accept: Optional[Accept] = None,
    require_table: bool = False,
) -> List[MatchRecord]:
    """
    Return the matching rows of the current page in display order.

    `accept` narrows the matches further, e.g. to a set of listing ids
    collected before a navigation. A missing table raises TableNotFoundError
    when `require_table` is set and otherwise reads as an empty page.
    """
    try:
        await wait_for_table(session, cfg)
    except TableNotFoundError:
        if require_table:
            raise
        logger.warning("Listings table did not appear; treating page as empty")
        return []
    # Rows render after the container; there is no reliable loaded event
    await session.pause(cfg.SETTLE_MS)

    rows = await session.find_all(sel.ROW)
    logger.info(f"Found {len(rows)} listings on current page.")

    found: List[MatchRecord] = []
    for i, row in enumerate(rows):
        record = await match_row(session, row, i, cfg)
        if record is None:
            continue
        if accept is not None and not accept(record):
            continue
        found.append(record)

    logger.info(f"Found {len(found)} matching items on this page")
    return found
