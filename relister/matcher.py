"""
Row matching for the Seller Hub listings table.

Each field is read on its own. A missing or unreadable cell falls back to a
default instead of failing the row:

    views              -> -1   (unknown, never matches)
    days_left          -> 100  (unknown, never matches)
    sold_count         -> 0
    available_quantity -> 0    (never matches)
"""
import logging
from typing import Any, Optional

from . import selectors as sel
from .config import Config, config as default_config
from .models import ListingRow, MatchRecord
from .utils import listing_id_from_href, parse_days_left, parse_leading_int

logger = logging.getLogger(__name__)


async def _cell_text(session, row: Any, locator: str) -> str:
    handle = await session.find(locator, within=row)
    if handle is None:
        return ""
    return await session.text(handle)


async def _listing_id(session, row: Any, checkbox: Any) -> str:
    link = await session.find(sel.ROW_ITEM_LINK, within=row)
    if link is not None:
        lid = listing_id_from_href(await session.attribute(link, "href"))
        if lid:
            return lid
    value = await session.attribute(checkbox, "value")
    return (value or "").strip()


async def read_row(session, row: Any, cfg: Config = default_config) -> Optional[ListingRow]:
    """Extract a ListingRow, or None when the row has no checkbox to select."""
    checkbox = await session.find(sel.ROW_CHECKBOX, within=row)
    if checkbox is None:
        return None

    views_text = await _cell_text(session, row, sel.ROW_VIEWS)
    views = parse_leading_int(views_text) if views_text else None

    days_left = parse_days_left(
        await _cell_text(session, row, sel.ROW_TIME_LEFT),
        default=cfg.DAYS_LEFT_UNKNOWN,
        under_one_day=0 if cfg.UNDER_ONE_DAY_MATCHES else None,
    )
    sold = parse_leading_int(await _cell_text(session, row, sel.ROW_SOLD))
    available = parse_leading_int(await _cell_text(session, row, sel.ROW_AVAILABLE))

    return ListingRow(
        row=row,
        checkbox=checkbox,
        views=views if views is not None else -1,
        days_left=days_left,
        sold_count=sold or 0,
        available_quantity=available or 0,
        listing_id=await _listing_id(session, row, checkbox),
    )


def matches(listing: ListingRow, cfg: Config = default_config) -> bool:
    """Zero views, under the day threshold, nothing sold, stock on hand."""
    return (
        listing.views == 0
        and listing.days_left < cfg.DAYS_LEFT_THRESHOLD
        and listing.sold_count == 0
        and listing.available_quantity > 0
    )


async def match_row(session, row: Any, index: int, cfg: Config = default_config) -> Optional[MatchRecord]:
    """Read and test one row. Never raises; a broken row is logged and skipped."""
    try:
        listing = await read_row(session, row, cfg)
    except Exception as e:
        logger.warning(f"Error processing row {index + 1}: {e!r}")
        return None
    if listing is None:
        return None

    if cfg.LOG_EVERY_NTH_ROW and index % cfg.LOG_EVERY_NTH_ROW == 0:
        logger.debug(
            f"Item {index + 1} - Views: {listing.views}, Days left: {listing.days_left}, "
            f"Sold: {listing.sold_count}, Available: {listing.available_quantity}"
        )

    if not matches(listing, cfg):
        return None

    record = MatchRecord(listing=listing, index=index)
    logger.info(
        f"Match found: item {listing.listing_id or '?'} | {listing.views} views, "
        f"{listing.days_left} days left, {listing.sold_count} sold, {listing.available_quantity} available"
    )
    return record
