"""
Relister configuration and tunables.

Every delay below is backpressure for a UI that has no reliable "ready"
signal. They are tunables, not correctness guarantees; condition waits are
used first wherever the page offers one.
"""
import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


MODES = ("eager", "collect_all")
JOB_ERROR_POLICIES = ("abort", "skip")


class Config:
    """Application configuration."""

    # Seller Hub URLs
    HOME_URL: str = os.getenv("RELISTER_HOME_URL", "https://www.ebay.com/")
    ACTIVE_URL: str = os.getenv(
        "RELISTER_ACTIVE_URL", "https://www.ebay.com/sh/lst/active?action=sort&sort=visitCount"
    )
    ENDED_URL: str = os.getenv(
        "RELISTER_ENDED_URL", "https://www.ebay.com/sh/lst/ended?status=UNSOLD_NOT_RELISTED"
    )

    # Run shape
    DEFAULT_ITEM_LIMIT: int = _env_int("RELISTER_ITEM_LIMIT", 10)
    MAX_PAGES: int = _env_int("RELISTER_MAX_PAGES", 50)
    MODE: str = os.getenv("RELISTER_MODE", "eager")
    ON_JOB_ERROR: str = os.getenv("RELISTER_ON_JOB_ERROR", "abort")

    # Matching
    DAYS_LEFT_THRESHOLD: int = _env_int("RELISTER_DAYS_LEFT_THRESHOLD", 15)
    DAYS_LEFT_UNKNOWN: int = 100
    UNDER_ONE_DAY_MATCHES: bool = _env_bool("UNDER_ONE_DAY_MATCHES", False)
    LOG_EVERY_NTH_ROW: int = 10

    # Bounded waits (ms)
    LOGIN_TIMEOUT_MS: int = _env_int("RELISTER_LOGIN_TIMEOUT_MS", 300_000)
    NAVIGATION_TIMEOUT_MS: int = 45_000
    NETWORK_IDLE_TIMEOUT_MS: int = 15_000
    TABLE_TIMEOUT_MS: int = 10_000
    SEARCH_BOX_TIMEOUT_MS: int = 20_000
    DIALOG_TIMEOUT_MS: int = 10_000
    SUBMIT_DIALOG_TIMEOUT_MS: int = 15_000
    CONTROL_TIMEOUT_MS: int = 5_000

    # Settle delays (ms)
    SETTLE_MS: int = _env_int("RELISTER_SETTLE_MS", 2_000)
    CLICK_PACING_MS: int = _env_int("RELISTER_CLICK_PACING_MS", 200)
    MENU_OPEN_MS: int = 500
    DIALOG_RENDER_MS: int = 500
    END_COMMIT_MS: int = 3_000
    PAGE_COOLDOWN_MS: int = 5_000
    ENDED_PAGE_SETTLE_MS: int = 3_000
    FORM_LOAD_MS: int = 5_000
    SELECT_ALL_SETTLE_MS: int = 1_000
    SUBMIT_COMMIT_MS: int = 5_000
    RESELL_COOLDOWN_MS: int = _env_int("RELISTER_RESELL_COOLDOWN_MS", 60_000)
    JOB_COOLDOWN_MS: int = _env_int("RELISTER_JOB_COOLDOWN_MS", 3_000)

    # Browser
    HEADLESS: bool = _env_bool("HEADLESS", False)
    STORAGE_STATE_PATH: str = os.getenv("RELISTER_STORAGE_STATE", "storage_state.json")

    def validate(self) -> None:
        """Validate configuration before a run."""
        if self.MODE not in MODES:
            raise ValueError(f"Unknown mode {self.MODE!r}; expected one of {MODES}")
        if self.ON_JOB_ERROR not in JOB_ERROR_POLICIES:
            raise ValueError(
                f"Unknown job error policy {self.ON_JOB_ERROR!r}; expected one of {JOB_ERROR_POLICIES}"
            )
        if self.MAX_PAGES < 1:
            raise ValueError("MAX_PAGES must be at least 1")
        if self.DEFAULT_ITEM_LIMIT < 0:
            raise ValueError("DEFAULT_ITEM_LIMIT cannot be negative")


# Global config instance
config = Config()
