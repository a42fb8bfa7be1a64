"""
eBay Seller Hub relister package
"""
from .models import BrandJob, CollectionTarget, JobOutcome, ListingRow, MatchRecord
from .collector import collect
from .bulk import end_listings, sell_similar
from .fallback import Strategy, FallbackResult, first_success
from .workflow import build_jobs, run_brand_job, run_jobs
from .utils import init_logger, now_iso

__version__ = "1.0.0"

__all__ = [
    "BrandJob",
    "CollectionTarget",
    "JobOutcome",
    "ListingRow",
    "MatchRecord",
    "collect",
    "end_listings",
    "sell_similar",
    "Strategy",
    "FallbackResult",
    "first_success",
    "build_jobs",
    "run_brand_job",
    "run_jobs",
    "init_logger",
    "now_iso"
]
