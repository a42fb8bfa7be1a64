"""
Tests for row extraction and the selection predicate.
"""
import asyncio
import itertools
import logging

import pytest

from relister import selectors as sel
from relister.matcher import match_row, matches, read_row
from relister.models import ListingRow


def _row(**kw):
    base = dict(row=None, checkbox=None, views=0, days_left=3, sold_count=0, available_quantity=2)
    base.update(kw)
    return ListingRow(**base)


def test_predicate_truth_table(cfg):
    """matches() holds exactly when all four conditions hold."""
    for views, days, sold, avail in itertools.product((0, 1, -1), (0, 14, 15, 100), (0, 1), (0, 1, 5)):
        listing = _row(views=views, days_left=days, sold_count=sold, available_quantity=avail)
        expected = views == 0 and days < 15 and sold == 0 and avail > 0
        assert matches(listing, cfg) is expected, (views, days, sold, avail)


def test_day_threshold_is_configurable(cfg):
    cfg.DAYS_LEFT_THRESHOLD = 5
    assert matches(_row(days_left=4), cfg)
    assert not matches(_row(days_left=5), cfg)


def test_read_row_extracts_fields(make_session, make_row, cfg):
    session = make_session()
    row = make_row(views="0", time_left="12d 3h", sold="0", available="4", listing_id="123456789")
    listing = asyncio.run(read_row(session, row, cfg))
    assert listing.views == 0
    assert listing.days_left == 12
    assert listing.sold_count == 0
    assert listing.available_quantity == 4
    assert listing.listing_id == "123456789"
    assert listing.checkbox is row.children[sel.ROW_CHECKBOX]


def test_missing_cells_use_defaults(make_session, make_row, cfg):
    """Missing cells default to views=-1, days=100, sold=0, available=0."""
    session = make_session()
    row = make_row(views=None, time_left=None, sold=None, available=None)
    listing = asyncio.run(read_row(session, row, cfg))
    assert (listing.views, listing.days_left, listing.sold_count, listing.available_quantity) == (-1, 100, 0, 0)
    assert not matches(listing, cfg)


@pytest.mark.parametrize("missing", ["views", "time_left", "available"])
def test_single_missing_field_excludes_row(make_session, make_row, cfg, missing):
    session = make_session()
    row = make_row(**{missing: None})
    assert asyncio.run(match_row(session, row, 0, cfg)) is None


def test_missing_sold_still_matches(make_session, make_row, cfg):
    """Sold defaults to 0, so a row without the sold cell can still match."""
    session = make_session()
    row = make_row(sold=None)
    assert asyncio.run(match_row(session, row, 0, cfg)) is not None


def test_unparseable_views_is_unknown(make_session, make_row, cfg):
    session = make_session()
    listing = asyncio.run(read_row(session, make_row(views="--"), cfg))
    assert listing.views == -1


def test_under_one_day_policy(make_session, make_row, cfg):
    session = make_session()
    row = make_row(time_left="7h 30m")
    assert asyncio.run(match_row(session, row, 0, cfg)) is None

    cfg.UNDER_ONE_DAY_MATCHES = True
    record = asyncio.run(match_row(session, row, 0, cfg))
    assert record is not None
    assert record.listing.days_left == 0


def test_row_without_checkbox_is_skipped(make_session, make_row, cfg):
    session = make_session()
    assert asyncio.run(read_row(session, make_row(checkbox=False), cfg)) is None


def test_extraction_error_skips_row(make_session, make_row, cfg, caplog):
    """A row that blows up during extraction is logged and skipped, not raised."""
    caplog.set_level(logging.WARNING)
    session = make_session()
    session.failing_locators.add(sel.ROW_SOLD)
    assert asyncio.run(match_row(session, make_row(), 4, cfg)) is None
    assert "Error processing row 5" in caplog.text
