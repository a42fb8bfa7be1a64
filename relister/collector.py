"""
Cross-page collection of matching listings.
"""
import logging
from typing import Awaitable, Callable, List, Optional

from .config import Config, config as default_config
from .models import CollectionTarget, MatchRecord
from .paginator import Paginator
from .scanner import Accept, scan_page

logger = logging.getLogger(__name__)

# Called with a page's accepted records while that page is still loaded.
OnPage = Callable[[List[MatchRecord], int], Awaitable[None]]


async def collect(
    session,
    target: CollectionTarget,
    cfg: Config = default_config,
    paginator: Optional[Paginator] = None,
    accept: Optional[Accept] = None,
    on_page: Optional[OnPage] = None,
) -> List[MatchRecord]:
    """
    Walk the listings table until `target.requested_count` matches are found.

    Stops early when pagination runs out or after `cfg.MAX_PAGES` page
    visits. A short or empty result is normal, but a first page without a
    listings table raises TableNotFoundError. Row handles in the returned
    records are only valid for the page they came from; when `on_page` is
    given it is the place to act on them.
    """
    if target.requested_count <= 0:
        return []

    paginator = paginator or Paginator(session, cfg)
    collected: List[MatchRecord] = []
    page_no = 0

    logger.info(f"Looking for up to {target.requested_count} items across at most {cfg.MAX_PAGES} pages...")
    while page_no < cfg.MAX_PAGES:
        page_no += 1
        logger.info(f"--- Processing page {page_no} ---")

        # No table on page 1 means the view itself never loaded
        page_matches = await scan_page(session, cfg, accept=accept, require_table=page_no == 1)
        remaining = target.requested_count - len(collected)
        taken = page_matches[:remaining]
        if taken:
            collected.extend(taken)
            logger.info(f"Took {len(taken)} items from page {page_no} ({len(collected)}/{target.requested_count})")
            if on_page is not None:
                await on_page(taken, page_no)
        else:
            logger.info("No matching items on this page, moving to next page...")

        if len(collected) >= target.requested_count:
            logger.info(f"Reached target of {target.requested_count} items")
            break
        if page_no >= cfg.MAX_PAGES:
            logger.warning(f"Stopped at page ceiling ({cfg.MAX_PAGES})")
            break
        if not await paginator.advance():
            logger.info("No more pages available")
            break

    logger.info(f">>> Collected {len(collected)} items across {page_no} pages")
    return collected
