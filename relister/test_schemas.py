"""
Tests for the job file schema, CLI config wiring and run report export.
"""
import json

import pytest
from pydantic import ValidationError

from relister.cli import build_config, load_jobs, parse_args
from relister.export import outcomes_to_frame, save_run_report
from relister.models import BrandJob, JobOutcome, JobStage
from relister.schemas import JobFile, load_job_file


def test_job_file_defaults_per_brand_limits(tmp_path):
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps({
        "default_item_limit": 50,
        "on_job_error": "skip",
        "jobs": [{"brand": "DND"}, {"brand": "Pokemon", "item_limit": 20}, {"brand": "  "}],
    }))
    job_file = load_job_file(str(path))
    assert job_file.on_job_error == "skip"
    assert job_file.to_brand_jobs() == [
        BrandJob("DND", 50),
        BrandJob("Pokemon", 20),
        BrandJob(None, 50),
    ]


def test_empty_job_file_runs_all_items():
    assert JobFile().to_brand_jobs() == [BrandJob(None, 10)]


def test_job_file_rejects_bad_values():
    with pytest.raises(ValidationError):
        JobFile.model_validate({"jobs": [{"brand": "X", "item_limit": -1}]})
    with pytest.raises(ValidationError):
        JobFile.model_validate({"on_job_error": "retry"})


def test_cli_overrides():
    args = parse_args(["--brand", "DND", "--brand", "Lego", "--limit", "7",
                       "--mode", "collect_all", "--on-job-error", "skip", "--resell-cooldown", "5"])
    cfg = build_config(args)
    cfg.validate()
    assert (cfg.MODE, cfg.ON_JOB_ERROR, cfg.RESELL_COOLDOWN_MS) == ("collect_all", "skip", 5000)
    assert load_jobs(args, cfg) == [BrandJob("DND", 7), BrandJob("Lego", 7)]


def test_cli_flags_win_over_job_file(tmp_path):
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps({"mode": "collect_all", "on_job_error": "skip", "jobs": [{"brand": "A"}]}))
    args = parse_args(["--jobs", str(path), "--on-job-error", "abort"])
    cfg = build_config(args)
    assert load_jobs(args, cfg) == [BrandJob("A", 10)]
    assert cfg.MODE == "collect_all"
    assert cfg.ON_JOB_ERROR == "abort"


def test_config_validation():
    args = parse_args([])
    cfg = build_config(args)
    cfg.MODE = "sometimes"
    with pytest.raises(ValueError):
        cfg.validate()


def test_report_frame_and_csv(tmp_path):
    done = JobOutcome(job=BrandJob("DND", 5), status="done", stage=JobStage.DONE, ended=2, resell_selected=2,
                      records=[{"listing_id": "100001", "row": 1, "views": 0, "days_left": 3, "sold": 0, "available": 1},
                               {"listing_id": "100003", "row": 3, "views": 0, "days_left": 9, "sold": 0, "available": 2}])
    skipped = JobOutcome(job=BrandJob(None, 5), status="skipped", stage=JobStage.DONE)

    df = outcomes_to_frame([done, skipped])
    assert len(df) == 3
    assert list(df["brand"]) == ["DND", "DND", "all items"]
    assert list(df["listing_id"][:2]) == ["100001", "100003"]

    out = tmp_path / "report.csv"
    save_run_report([done, skipped], str(out))
    assert out.read_text().splitlines()[0].startswith("brand,status,stage")
