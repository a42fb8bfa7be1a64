"""
Data models for the Seller Hub relister.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass
class ListingRow:
    """
    One row of the Seller Hub listings table.

    `row` and `checkbox` are live element handles and die with the page that
    produced them. Never keep a ListingRow across a navigation; use
    `listing_id` to find the row again.
    """

    row: Any
    checkbox: Any
    views: int = -1
    days_left: int = 100
    sold_count: int = 0
    available_quantity: int = 0
    listing_id: str = ""


@dataclass
class MatchRecord:
    """A ListingRow that satisfied the selection predicate."""

    listing: ListingRow
    index: int

    @property
    def listing_id(self) -> str:
        return self.listing.listing_id

    @property
    def checkbox(self) -> Any:
        return self.listing.checkbox

    def describe(self) -> Dict[str, Any]:
        return {
            "listing_id": self.listing.listing_id,
            "row": self.index + 1,
            "views": self.listing.views,
            "days_left": self.listing.days_left,
            "sold": self.listing.sold_count,
            "available": self.listing.available_quantity,
        }


@dataclass
class CollectionTarget:
    requested_count: int
    brand_filter: Optional[str] = None


@dataclass
class BrandJob:
    brand_name: Optional[str]
    item_limit: int

    @property
    def label(self) -> str:
        return self.brand_name or "all items"


class JobStage(str, Enum):
    FILTER = "filter"
    COLLECT = "collect"
    END = "end"
    COOLDOWN = "cooldown"
    RESELL = "resell"
    DONE = "done"


@dataclass
class JobOutcome:
    """What happened to one BrandJob."""

    job: BrandJob
    status: str = "pending"  # done | skipped | failed
    stage: JobStage = JobStage.FILTER
    ended: int = 0
    resell_selected: int = 0
    records: List[Dict[str, Any]] = field(default_factory=list)
    error: str = ""
