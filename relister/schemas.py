"""
Pydantic models for the JSON job file.

Example:

    {
      "default_item_limit": 50,
      "on_job_error": "skip",
      "jobs": [{"brand": "DND"}, {"brand": "Pokemon", "item_limit": 20}]
    }
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .models import BrandJob


class BrandJobIn(BaseModel):
    """One brand keyword and an optional per-brand limit."""
    brand: Optional[str] = None
    item_limit: Optional[int] = Field(default=None, ge=0)

    @field_validator("brand")
    @classmethod
    def blank_brand_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class JobFile(BaseModel):
    """Top-level job file."""
    default_item_limit: int = Field(default=10, ge=0)
    mode: Optional[Literal["eager", "collect_all"]] = None
    on_job_error: Optional[Literal["abort", "skip"]] = None
    jobs: List[BrandJobIn] = Field(default_factory=list)

    def to_brand_jobs(self) -> List[BrandJob]:
        if not self.jobs:
            return [BrandJob(brand_name=None, item_limit=self.default_item_limit)]
        return [
            BrandJob(
                brand_name=j.brand,
                item_limit=self.default_item_limit if j.item_limit is None else j.item_limit,
            )
            for j in self.jobs
        ]


def load_job_file(path: str) -> JobFile:
    """Read and validate a job file; raises pydantic.ValidationError on bad input."""
    with open(path, encoding="utf-8") as f:
        return JobFile.model_validate_json(f.read())
