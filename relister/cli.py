"""
Command-line entry point: end stale Seller Hub listings and relist them.
"""
import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from pydantic import ValidationError

from .config import Config, MODES, JOB_ERROR_POLICIES
from .errors import LoginTimeoutError, RelisterError, RunAbortedError
from .export import save_run_report
from .models import BrandJob, JobOutcome
from .schemas import load_job_file
from .session import ensure_logged_in, open_browser
from .utils import init_logger, now_iso
from .workflow import build_jobs, run_jobs

logger = logging.getLogger("relister")


def parse_args(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(
        description="End zero-view eBay listings close to expiry and relist them with Sell similar"
    )
    ap.add_argument("--brand", action="append", default=[],
                    help="Brand keyword to filter by; repeat for several brands")
    ap.add_argument("--limit", type=int, default=None,
                    help="Maximum listings to end per brand (default from env RELISTER_ITEM_LIMIT or 10)")
    ap.add_argument("--jobs", type=str, default="",
                    help="JSON job file with per-brand limits (overrides --brand/--limit)")
    ap.add_argument("--mode", choices=MODES, default=None,
                    help="eager: end matches page by page; collect_all: collect everything first")
    ap.add_argument("--on-job-error", choices=JOB_ERROR_POLICIES, default=None,
                    help="Stop the whole run or skip to the next brand when a brand fails")
    ap.add_argument("--max-pages", type=int, default=None, help="Page ceiling per scan")
    ap.add_argument("--under-one-day-matches", action="store_true",
                    help="Treat listings with less than one day left as matching")
    ap.add_argument("--resell-cooldown", type=int, default=None,
                    help="Seconds to wait between ending and relisting")
    ap.add_argument("--headless", action="store_true", help="Run without UI (login must already be stored)")
    ap.add_argument("--storage-state", type=str, default=None, help="Path to storage_state.json")
    ap.add_argument("--report", type=str, default="", help="Write a CSV/XLSX run report to this path")
    ap.add_argument("--keep-open", action="store_true",
                    help="Keep the browser open for review until Enter is pressed")
    # Logging
    lvl_choices = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ap.add_argument("--log-level", choices=lvl_choices, default=None,
                    help="Global log level for both console and file (overrides --log-console/--log-file).")
    ap.add_argument("--log-console", choices=lvl_choices, default=os.getenv("LOG_CONSOLE", "INFO"),
                    help="Console log level (default from env LOG_CONSOLE or INFO).")
    ap.add_argument("--log-file", choices=lvl_choices, default=os.getenv("LOG_FILE", "DEBUG"),
                    help="File log level (default from env LOG_FILE or DEBUG).")
    ap.add_argument("--log-file-path", default=os.getenv("LOG_FILE_PATH", "relister.log"),
                    help="Path to log file (default from env LOG_FILE_PATH or relister.log).")
    ap.add_argument("--no-file-log", action="store_true",
                    help="Disable file logging (only console output).")

    return ap.parse_args(argv)


def build_config(args) -> Config:
    """Apply CLI overrides on top of the env-derived defaults."""
    cfg = Config()
    if args.limit is not None:
        cfg.DEFAULT_ITEM_LIMIT = args.limit
    if args.mode:
        cfg.MODE = args.mode
    if args.on_job_error:
        cfg.ON_JOB_ERROR = args.on_job_error
    if args.max_pages is not None:
        cfg.MAX_PAGES = args.max_pages
    if args.under_one_day_matches:
        cfg.UNDER_ONE_DAY_MATCHES = True
    if args.resell_cooldown is not None:
        cfg.RESELL_COOLDOWN_MS = args.resell_cooldown * 1000
    if args.headless:
        cfg.HEADLESS = True
    if args.storage_state is not None:
        cfg.STORAGE_STATE_PATH = args.storage_state
    return cfg


def load_jobs(args, cfg: Config) -> List[BrandJob]:
    if not args.jobs:
        return build_jobs(args.brand, cfg.DEFAULT_ITEM_LIMIT)
    job_file = load_job_file(args.jobs)
    # Explicit CLI flags win over the job file
    if job_file.mode and not args.mode:
        cfg.MODE = job_file.mode
    if job_file.on_job_error and not args.on_job_error:
        cfg.ON_JOB_ERROR = job_file.on_job_error
    return job_file.to_brand_jobs()


async def run(cfg: Config, jobs: List[BrandJob], keep_open: bool) -> List[JobOutcome]:
    async with open_browser(cfg) as session:
        if await ensure_logged_in(session, cfg) and cfg.STORAGE_STATE_PATH:
            await session.save_storage_state(cfg.STORAGE_STATE_PATH)
            logger.info(f">>> Saved storage state to {cfg.STORAGE_STATE_PATH}")

        try:
            return await run_jobs(session, jobs, cfg)
        finally:
            if keep_open:
                logger.info("Automation complete. Browser will remain open for you to review.")
                logger.info("Press Enter in this terminal to close it.")
                try:
                    input()
                except EOFError:
                    pass


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    eff_console = args.log_level or args.log_console
    eff_file = args.log_level or args.log_file
    init_logger(
        console_level=eff_console,
        file_level=eff_file,
        log_file=None if args.no_file_log else args.log_file_path
    )
    logger.info(
        f"Logger initialized: console={eff_console}, "
        f"file={'DISABLED' if args.no_file_log else eff_file}, "
        f"path={'N/A' if args.no_file_log else args.log_file_path}"
    )

    cfg = build_config(args)
    try:
        jobs = load_jobs(args, cfg)
        cfg.validate()
    except (OSError, ValidationError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)

    logger.info(f">>> Run started at {now_iso()} (mode={cfg.MODE}, on_job_error={cfg.ON_JOB_ERROR})")

    outcomes: List[JobOutcome] = []
    exit_code = 0
    try:
        outcomes = asyncio.run(run(cfg, jobs, args.keep_open))
    except RunAbortedError as e:
        outcomes = e.outcomes
        logger.error(str(e))
        exit_code = 1
    except LoginTimeoutError as e:
        logger.error(f"Login was not completed: {e}")
        exit_code = 1
    except RelisterError as e:
        logger.error(f"Run failed: {e}")
        exit_code = 1

    if args.report and outcomes:
        save_run_report(outcomes, args.report)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
