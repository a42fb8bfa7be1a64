"""
Seller Hub selectors.

These strings belong to eBay's markup and break whenever it changes. Keep
them here so a selector update never touches the scanning or bulk-action
logic.
"""

# Session
SIGNIN_LINK = "a[href*='signin']"
LOGGED_IN_MARKERS = ".gh-identity, .gh-account, .account-info"

# Listing table
TABLE_CONTAINER = "div.shui-dt"
ROW = "tr.grid-row"
ROW_CHECKBOX = "input[type='checkbox']"
ROW_ITEM_LINK = "a[href*='/itm/']"
ROW_VIEWS = "td.shui-dt-column__visitCount .column-views button"
ROW_TIME_LEFT = "td.shui-dt-column__timeRemaining div.shui-dt--text-column div"
ROW_SOLD = "td.shui-dt-column__soldQuantity div.shui-dt--text-column div"
ROW_AVAILABLE = "td.shui-dt-column__availableQuantity div.shui-dt--text-column div span"

# Search / brand filter
SEARCH_BOX = "#shui-search-box-v3__input"

# Pagination
NEXT_PAGE = "a.pagination__next[aria-label='Go to next page']"

# Actions menu
ACTIONS_MENU_BUTTON = "button.fake-menu-button__button:has-text('Actions')"
MENU_ITEMS = "li button"

END_LISTINGS_ITEM_CHAIN = (
    "button.fake-menu-button__item:has-text('End listings')",
    ".shui-menu-dropdown__primary-text:text('End listings')",
    "button:has-text('End listings')",
    "xpath=//button[contains(.,'End listings')]",
)
END_LISTINGS_CONFIRM = "button.btn--primary:has-text('End listings')"
END_LISTINGS_CONFIRM_TEXT = "button:has-text('End listings')"

SELL_SIMILAR_ITEM_CHAIN = (
    "button.btn.fake-btn.actionGroupLink:has-text('Sell similar')",
    "button:has-text('Sell similar')",
    "text=\"Sell similar\"",
    "xpath=//button[contains(text(),'Sell similar')]",
)

# Bulk edit form reached through "Sell similar"
SELECT_ALL_CHAIN = (
    ".bg-checkbox input.checkbox__control[type='checkbox'][aria-label='Select all items for bulk edit.']",
    "input.checkbox__control[type='checkbox'][aria-label='Select all items for bulk edit.']",
    "th .checkbox input[type='checkbox']",
)
FORM_SUBMIT_CHAIN = (
    "button.bg-button.call-to-actions__submit-btn.btn.btn--small.btn--primary",
    "button:has-text('Submit')",
)

# Submission confirmation lightbox
SUBMIT_DIALOG = ".lightbox-dialog__window.lightbox-dialog__window--animate.keyboard-trap--active"
SUBMIT_DIALOG_FOOTER = ".lightbox-dialog__footer"
SUBMIT_DIALOG_PRIMARY = ".lightbox-dialog__footer button.btn--primary"
SUBMIT_DIALOG_TEXT = ".lightbox-dialog__footer button:has-text('Submit')"
SUBMIT_DIALOG_BUTTONS = ".lightbox-dialog__footer button"

END_LISTINGS_DIALOG = "[role='dialog']"
END_LISTINGS_DIALOG_BUTTONS = "[role='dialog'] button"

# In-page last resort inside a dialog. Clicks the primary button of `footer`
# under `dialog` (only if its text contains `label` when `strict`), else any
# button there whose text contains `label`. Returns whether it clicked.
SCRIPTED_DIALOG_CLICK = """
({ dialog, footer, label, strict }) => {
    const root = document.querySelector(dialog);
    if (!root) return false;
    const scope = footer ? root.querySelector(footer) : root;
    if (!scope) return false;
    const primary = scope.querySelector('button.btn--primary');
    if (primary && (!strict || primary.textContent.includes(label))) {
        primary.click();
        return true;
    }
    for (const button of scope.querySelectorAll('button')) {
        if (button.textContent.includes(label)) { button.click(); return true; }
    }
    return false;
}
"""
