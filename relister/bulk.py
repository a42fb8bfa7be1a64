"""
Bulk actions on selected Seller Hub rows.

Every bulk action has the same shape: tick row checkboxes, open the Actions
menu, click a named item, then confirm a dialog. Menu items and dialog
buttons are located with ordered fallback chains (see fallback.py). Running
out of strategies raises, because a bulk action we cannot confirm may or may
not have been applied to live inventory.
"""
import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, List, Optional, Sequence, Tuple

from playwright.async_api import TimeoutError as PlaywrightTimeout

from . import selectors as sel
from .config import Config, config as default_config
from .errors import DialogNotFoundError
from .fallback import Strategy, first_success
from .models import MatchRecord
from .scanner import wait_for_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkAction:
    label: str
    item_chain: Tuple[str, ...]
    # Clicking the first menu item blindly is only safe when the confirmation
    # that follows checks for the expected label.
    first_item_fallback: bool = False


@dataclass(frozen=True)
class ConfirmDialog:
    label: str
    surface: str
    primary: str
    text: str
    buttons: str
    container: str
    footer: Optional[str] = None
    strict: bool = False


END_LISTINGS = BulkAction("End listings", sel.END_LISTINGS_ITEM_CHAIN, first_item_fallback=True)
SELL_SIMILAR = BulkAction("Sell similar", sel.SELL_SIMILAR_ITEM_CHAIN)

END_CONFIRM = ConfirmDialog(
    label="End listings",
    surface=sel.END_LISTINGS_CONFIRM,
    primary=sel.END_LISTINGS_CONFIRM,
    text=sel.END_LISTINGS_CONFIRM_TEXT,
    buttons=sel.END_LISTINGS_DIALOG_BUTTONS,
    container=sel.END_LISTINGS_DIALOG,
    strict=True,
)
SUBMIT_CONFIRM = ConfirmDialog(
    label="Submit",
    surface=sel.SUBMIT_DIALOG,
    primary=sel.SUBMIT_DIALOG_PRIMARY,
    text=sel.SUBMIT_DIALOG_TEXT,
    buttons=sel.SUBMIT_DIALOG_BUTTONS,
    container=sel.SUBMIT_DIALOG,
    footer=sel.SUBMIT_DIALOG_FOOTER,
)


async def _wait_and_click(session, locator: str, timeout_ms: int) -> None:
    handle = await session.wait_for(locator, timeout_ms=timeout_ms)
    await session.click(handle)


async def _click_button_by_text(session, locator: str, label: str) -> bool:
    for button in await session.find_all(locator):
        if label in await session.text(button):
            await session.click(button)
            return True
    return False


async def _click_first_menu_item(session) -> bool:
    items = await session.find_all(sel.MENU_ITEMS)
    if not items:
        return False
    labels = [await session.text(item) for item in items]
    logger.warning(f"Clicking first menu item as last resort; available items: {labels}")
    await session.click(items[0])
    return True


def _selector_chain(session, locators: Sequence[str], first_wait_ms: Optional[int] = None) -> List[Strategy]:
    """One click strategy per selector; optionally wait for the first to appear."""
    strategies = []
    for i, loc in enumerate(locators):
        if i == 0 and first_wait_ms:
            action = partial(_wait_and_click, session, loc, first_wait_ms)
        else:
            action = partial(session.click, loc)
        strategies.append(Strategy(f"selector {loc}", action))
    return strategies


async def select_rows(session, checkboxes: Sequence[Any], cfg: Config = default_config) -> List[int]:
    """
    Tick each checkbox in order. A checkbox that will not click is skipped.

    Returns the positions (into `checkboxes`) that were actually ticked.
    """
    total = len(checkboxes)
    logger.info(f"Selecting {total} items on current page...")
    selected: List[int] = []
    for i, checkbox in enumerate(checkboxes):
        try:
            await session.click(checkbox)
        except Exception as e:
            logger.warning(f"Error selecting item {i + 1}/{total}: {e!r}")
            continue
        selected.append(i)
        logger.debug(f"Selected item {i + 1}/{total}")
        await session.pause(cfg.CLICK_PACING_MS)
    logger.info(f"Selected {len(selected)} of {total} items")
    return selected


async def trigger_bulk_action(session, action: BulkAction, cfg: Config = default_config) -> str:
    """Open the Actions menu and click `action`. Returns the winning strategy name."""
    logger.info(f'Opening Actions dropdown menu for "{action.label}"...')
    await session.click(sel.ACTIONS_MENU_BUTTON)
    await session.pause(cfg.MENU_OPEN_MS)

    strategies = _selector_chain(session, action.item_chain)
    if action.first_item_fallback:
        strategies.append(Strategy("first menu item", partial(_click_first_menu_item, session)))

    result = await first_success(f'"{action.label}" menu item', strategies)
    result.unwrap()
    return result.strategy


async def confirm_dialog(
    session,
    dialog: ConfirmDialog,
    timeout_ms: int,
    commit_ms: int,
    cfg: Config = default_config,
) -> str:
    """Wait for a confirmation surface, click its primary button and let it commit."""
    logger.info(f'Waiting for "{dialog.label}" confirmation dialog to appear...')
    try:
        await session.wait_for(dialog.surface, timeout_ms=timeout_ms)
    except PlaywrightTimeout as e:
        raise DialogNotFoundError(
            f'"{dialog.label}" confirmation did not appear within {timeout_ms} ms'
        ) from e
    logger.info("Confirmation dialog detected")
    await session.pause(cfg.DIALOG_RENDER_MS)

    script_arg = {
        "dialog": dialog.container,
        "footer": dialog.footer,
        "label": dialog.label,
        "strict": dialog.strict,
    }
    strategies = [
        Strategy("direct selector", partial(_wait_and_click, session, dialog.primary, cfg.CONTROL_TIMEOUT_MS)),
        Strategy("text selector", partial(session.click, dialog.text)),
        Strategy("button text scan", partial(_click_button_by_text, session, dialog.buttons, dialog.label)),
        Strategy("scripted click", partial(session.evaluate, sel.SCRIPTED_DIALOG_CLICK, script_arg)),
    ]
    result = await first_success(f'"{dialog.label}" confirmation button', strategies)
    result.unwrap()

    logger.info(f'Clicked "{dialog.label}" confirmation; waiting for it to complete...')
    await session.settle(commit_ms)
    return result.strategy


async def end_selected_listings(session, cfg: Config = default_config) -> None:
    await trigger_bulk_action(session, END_LISTINGS, cfg)
    await session.settle(cfg.SETTLE_MS)
    await confirm_dialog(session, END_CONFIRM, cfg.DIALOG_TIMEOUT_MS, cfg.END_COMMIT_MS, cfg)
    logger.info("Ending listings process completed for current page")


async def end_listings(
    session, records: Sequence[MatchRecord], cfg: Config = default_config
) -> List[MatchRecord]:
    """
    End `records`, which must come from the page that is loaded right now.

    Returns the records whose rows were selected and ended.
    """
    if not records:
        return []
    positions = await select_rows(session, [r.checkbox for r in records], cfg)
    if not positions:
        logger.warning("No rows could be selected; not ending anything on this page")
        return []
    await end_selected_listings(session, cfg)
    return [records[i] for i in positions]


async def submit_bulk_form(session, cfg: Config = default_config) -> None:
    """Tick "select all" on the bulk edit form, submit it and confirm."""
    logger.info('Looking for "Select all items" checkbox...')
    select_all = await first_success(
        '"Select all items" checkbox',
        _selector_chain(session, sel.SELECT_ALL_CHAIN, first_wait_ms=cfg.DIALOG_TIMEOUT_MS),
    )
    select_all.unwrap()
    await session.pause(cfg.SELECT_ALL_SETTLE_MS)

    logger.info('Looking for "Submit" button...')
    submit = await first_success(
        '"Submit" button',
        _selector_chain(session, sel.FORM_SUBMIT_CHAIN, first_wait_ms=cfg.DIALOG_TIMEOUT_MS),
    )
    submit.unwrap()
    await session.settle(cfg.SETTLE_MS)

    await confirm_dialog(session, SUBMIT_CONFIRM, cfg.SUBMIT_DIALOG_TIMEOUT_MS, cfg.SUBMIT_COMMIT_MS, cfg)
    logger.info(">>> Successfully completed the listing submission")


async def sell_similar(session, ended_count: int, cfg: Config = default_config) -> int:
    """
    Relist up to `ended_count` unsold ended listings via "Sell similar".

    Rows are read fresh from the ended-listings page once its table has
    rendered (TableNotFoundError otherwise); at most
    min(rows on the page, ended_count) are selected. Returns the number
    selected.
    """
    if ended_count <= 0:
        return 0

    logger.info("Navigating to unsold/not relisted items page...")
    await session.navigate(cfg.ENDED_URL)
    await session.settle(cfg.ENDED_PAGE_SETTLE_MS)
    await wait_for_table(session, cfg)

    rows = await session.find_all(sel.ROW)
    to_select = min(len(rows), ended_count)
    logger.info(f"Found {len(rows)} ended listings; will select the first {to_select}.")
    if to_select == 0:
        logger.info("No ended listings found to resell.")
        return 0

    checkboxes = []
    for i, row in enumerate(rows[:to_select], 1):
        try:
            checkbox = await session.find(sel.ROW_CHECKBOX, within=row)
        except Exception as e:
            logger.warning(f"Error reading ended listing {i}: {e!r}")
            continue
        if checkbox is None:
            logger.warning(f"Ended listing {i} has no checkbox")
            continue
        checkboxes.append(checkbox)

    selected = len(await select_rows(session, checkboxes, cfg))
    if selected == 0:
        logger.warning("No ended listings could be selected; skipping Sell similar")
        return 0

    await trigger_bulk_action(session, SELL_SIMILAR, cfg)
    logger.info("Waiting for listing form to load...")
    await session.settle(cfg.FORM_LOAD_MS)
    await submit_bulk_form(session, cfg)
    return selected
