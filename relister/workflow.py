"""
Brand job orchestration: filter, collect, end, cool down, resell.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Set

from . import selectors as sel
from .bulk import end_listings, sell_similar
from .collector import collect
from .config import Config, config as default_config
from .errors import ResellIncompleteError, RunAbortedError
from .models import BrandJob, CollectionTarget, JobOutcome, JobStage, MatchRecord

logger = logging.getLogger(__name__)


def build_jobs(brands: Optional[Iterable[str]], item_limit: int) -> List[BrandJob]:
    """One job per non-empty brand, or a single unfiltered job."""
    names = [b.strip() for b in (brands or []) if b and b.strip()]
    if not names:
        return [BrandJob(brand_name=None, item_limit=item_limit)]
    return [BrandJob(brand_name=name, item_limit=item_limit) for name in names]


async def apply_brand_filter(session, brand_name: str, cfg: Config = default_config) -> None:
    logger.info(f'Applying filter for brand: "{brand_name}"')
    await session.wait_for(sel.SEARCH_BOX, timeout_ms=cfg.SEARCH_BOX_TIMEOUT_MS)
    await session.fill(sel.SEARCH_BOX, "")
    await session.fill(sel.SEARCH_BOX, brand_name)
    await session.press(sel.SEARCH_BOX, "Enter")
    await session.settle(cfg.SETTLE_MS)
    logger.info(f'Filter applied for brand: "{brand_name}"')


async def open_listings_view(session, brand_name: Optional[str], cfg: Config = default_config) -> None:
    """Load active listings sorted by views, filtered to `brand_name` if given."""
    await session.navigate(cfg.ACTIVE_URL)
    await session.settle(0)
    if brand_name:
        await apply_brand_filter(session, brand_name, cfg)


async def end_matching_listings(
    session,
    job: BrandJob,
    outcome: JobOutcome,
    cfg: Config = default_config,
) -> int:
    """
    End up to `job.item_limit` matching listings and return how many ended.

    eager:       end each page's matches before moving to the next page.
    collect_all: find every match first, reopen the view, then end rows
                 found again by listing id.
    """
    target = CollectionTarget(requested_count=job.item_limit, brand_filter=job.brand_name)
    ended = 0

    async def end_on_page(records: List[MatchRecord], page_no: int) -> None:
        nonlocal ended
        outcome.stage = JobStage.END
        ended_records = await end_listings(session, records, cfg)
        count = len(ended_records)
        ended += count
        outcome.ended = ended
        outcome.records.extend(r.describe() for r in ended_records)
        logger.info(f"Ended {count} items from page {page_no}. Total ended so far: {ended}")
        if count and ended < target.requested_count:
            logger.info(f"Waiting {cfg.PAGE_COOLDOWN_MS // 1000} seconds before moving to next page...")
            await session.pause(cfg.PAGE_COOLDOWN_MS)

    if cfg.MODE == "eager":
        await collect(session, target, cfg, on_page=end_on_page)
        return ended

    found = await collect(session, target, cfg)
    wanted: Set[str] = {r.listing_id for r in found if r.listing_id}
    if len(wanted) < len(found):
        logger.warning(f"{len(found) - len(wanted)} matched rows had no listing id and will not be ended")
    if not wanted:
        return 0

    # Row handles from the first pass are stale after this navigation
    logger.info(f"Re-opening listings to end {len(wanted)} collected items")
    await open_listings_view(session, job.brand_name, cfg)
    await collect(
        session,
        CollectionTarget(requested_count=len(wanted), brand_filter=job.brand_name),
        cfg,
        accept=lambda r: r.listing_id in wanted,
        on_page=end_on_page,
    )
    return ended


async def run_brand_job(
    session,
    job: BrandJob,
    cfg: Config = default_config,
    outcome: Optional[JobOutcome] = None,
) -> JobOutcome:
    """Run one job to completion. Errors propagate; `outcome.stage` shows where."""
    outcome = outcome or JobOutcome(job=job)

    logger.info(f'--- Step 1: Finding and ending active listings for "{job.label}" ---')
    outcome.stage = JobStage.FILTER
    await open_listings_view(session, job.brand_name, cfg)

    outcome.stage = JobStage.COLLECT
    ended = await end_matching_listings(session, job, outcome, cfg)
    outcome.ended = ended
    if ended == 0:
        logger.info(f"No items found for {job.label}. Skipping to next brand.")
        outcome.stage = JobStage.DONE
        outcome.status = "skipped"
        return outcome
    logger.info(f'Successfully ended {ended} listings for "{job.label}"')

    outcome.stage = JobStage.COOLDOWN
    logger.info(f"Waiting {cfg.RESELL_COOLDOWN_MS // 1000} seconds before proceeding to resell...")
    await session.pause(cfg.RESELL_COOLDOWN_MS)

    logger.info("--- Step 2: Reselling ended listings ---")
    outcome.stage = JobStage.RESELL
    outcome.resell_selected = await sell_similar(session, ended, cfg)
    if outcome.resell_selected == 0:
        raise ResellIncompleteError(
            f'Ended {ended} listings for "{job.label}" but selected none of them for Sell similar'
        )

    outcome.stage = JobStage.DONE
    outcome.status = "done"
    logger.info(f'Successfully completed all steps for "{job.label}"')
    return outcome


async def run_jobs(session, jobs: Sequence[BrandJob], cfg: Config = default_config) -> List[JobOutcome]:
    """
    Run brand jobs one after another with a cooldown in between.

    A failing job is logged with its traceback. With ON_JOB_ERROR="abort"
    the run stops and RunAbortedError carries the outcomes so far; with
    "skip" the job is marked failed and the next one starts.
    """
    outcomes: List[JobOutcome] = []
    logger.info(f"Will process {len(jobs)} job(s): {', '.join(j.label for j in jobs)}")

    for i, job in enumerate(jobs):
        logger.info("========================================")
        logger.info(f'Processing brand {i + 1} of {len(jobs)}: "{job.label}"')
        logger.info("========================================")

        outcome = JobOutcome(job=job)
        outcomes.append(outcome)
        try:
            await run_brand_job(session, job, cfg, outcome)
        except Exception as e:
            outcome.status = "failed"
            outcome.error = repr(e)
            logger.exception(f'Error processing brand "{job.label}" during {outcome.stage.value}')
            if cfg.ON_JOB_ERROR == "abort":
                raise RunAbortedError(f'Run aborted at brand "{job.label}"', outcomes) from e
            logger.info("Continuing with next brand")

        if i < len(jobs) - 1:
            logger.info(f"Waiting {cfg.JOB_COOLDOWN_MS // 1000} seconds before processing next brand...")
            await session.pause(cfg.JOB_COOLDOWN_MS)

    done = sum(1 for o in outcomes if o.status == "done")
    skipped = sum(1 for o in outcomes if o.status == "skipped")
    failed = sum(1 for o in outcomes if o.status == "failed")
    logger.info(f">>> All jobs processed: {done} done, {skipped} skipped, {failed} failed")
    return outcomes
