"""
Run report export for the relister.
"""
import logging
from typing import List

import pandas as pd

from .models import JobOutcome

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "brand", "status", "stage", "ended", "resell_selected", "error",
    "listing_id", "row", "views", "days_left", "sold", "available",
]


def outcomes_to_frame(outcomes: List[JobOutcome]) -> pd.DataFrame:
    """One row per ended listing; jobs that ended nothing get a single summary row."""
    rows = []
    for o in outcomes:
        base = {
            "brand": o.job.label,
            "status": o.status,
            "stage": o.stage.value,
            "ended": o.ended,
            "resell_selected": o.resell_selected,
            "error": o.error,
        }
        if not o.records:
            rows.append(base)
            continue
        for rec in o.records:
            rows.append({**base, **rec})
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def save_run_report(outcomes: List[JobOutcome], out_path: str) -> pd.DataFrame:
    """Save the run report to CSV or Excel file."""
    df = outcomes_to_frame(outcomes)
    if out_path.lower().endswith(".xlsx"):
        df.to_excel(out_path, index=False)
    else:
        df.to_csv(out_path, index=False)
    logger.info(f">>> Saved {len(df)} report rows to {out_path}")
    return df
