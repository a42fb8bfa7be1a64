"""
Utility functions for logging setup and parsing Seller Hub cell text.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Optional


def init_logger(
    name: str = "relister",
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    log_file: Optional[str] = "relister.log"
) -> logging.Logger:
    """Initialize logger with console and optional file handlers."""
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return logger

    console_level_num = getattr(logging, console_level.upper(), logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(console_level_num)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file:  # Create file handler only if log_file is provided
        file_level_num = getattr(logging, file_level.upper(), logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level_num)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def now_iso() -> str:
    """Return current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def clean_text(s: Optional[str]) -> str:
    """Clean and normalize text by removing extra whitespace."""
    if not s:
        return ""
    s = re.sub(r"\s+", " ", s)
    return s.strip()


def parse_leading_int(text: Optional[str]) -> Optional[int]:
    """
    Parse the leading integer of a cell, ignoring thousands separators.

    "1,204 views" -> 1204, "3" -> 3, "--" -> None.
    """
    t = clean_text(text).replace(",", "")
    m = re.match(r"[+-]?\d+", t)
    if not m:
        return None
    return int(m.group(0))


def parse_days_left(text: Optional[str], default: int = 100, under_one_day: Optional[int] = None) -> int:
    """
    Extract whole days from a duration such as "18d 9h 12m".

    A duration with no day component ("5h 12m") returns `under_one_day`
    when given, otherwise `default`. Empty text always returns `default`.
    """
    t = clean_text(text)
    if not t:
        return default
    m = re.search(r"(\d+)\s*d", t)
    if m:
        return int(m.group(1))
    if under_one_day is not None and re.search(r"\d+\s*[hms]\b", t):
        return under_one_day
    return default


def listing_id_from_href(href: Optional[str]) -> str:
    """Pull the numeric item id out of an /itm/ link."""
    if not href:
        return ""
    m = re.search(r"/itm/(?:[^/?#]+/)?(\d{6,})", href)
    return m.group(1) if m else ""
