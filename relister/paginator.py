"""
Next-page control for the Seller Hub listings table.
"""
import logging

from . import selectors as sel
from .config import Config, config as default_config

logger = logging.getLogger(__name__)


class Paginator:
    """Moves the listings table forward one page at a time."""

    def __init__(self, session, cfg: Config = default_config):
        self.session = session
        self.cfg = cfg

    async def _next_control(self):
        button = await self.session.find(sel.NEXT_PAGE)
        if button is None:
            logger.info("Next page button not found")
            return None
        if (await self.session.attribute(button, "aria-disabled")) == "true":
            logger.info("Next page button is disabled (last page reached)")
            return None
        return button

    async def has_next(self) -> bool:
        return await self._next_control() is not None

    async def advance(self) -> bool:
        """Click next and wait for the table to settle. False means no more pages."""
        try:
            button = await self._next_control()
            if button is None:
                return False
            logger.debug("Clicking next page button...")
            await self.session.click(button)
            await self.session.settle(self.cfg.SETTLE_MS)
        except Exception as e:
            logger.warning(f"Error navigating to next page: {e!r}")
            return False
        logger.info("Successfully navigated to next page")
        return True
