"""
filters.py — Pass/fail stage filters run by the pipeline after the merge.
Each stage returns the jobs that pass and logs how many it dropped.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from freshness import DEFAULT_STALE_DAYS, is_stale
from locations import LocationRules, is_us_job
from models import JobListing
from monitoring import get_logger

logger = get_logger("filters")

SENIOR_KEYWORDS = [
    "senior", "sr.", "staff", "principal", "lead",
    "architect", "manager", "director", "vp", "head of",
]

ENTRY_LEVEL_KEYWORDS = [
    "entry level", "junior", "jr.", "new grad", "recent graduate",
    "associate", "intern", "campus", "student", "0-2 years", "early career",
]


@dataclass
class SeniorFilter:
    """
    A job is senior when its title or description carries a senior keyword and
    no entry-level keyword. JSearch results are requested with an experience
    cap already, so they are trusted unless `trust_jsearch` is off.
    """
    senior_keywords: list[str] = field(default_factory=lambda: list(SENIOR_KEYWORDS))
    entry_keywords: list[str] = field(default_factory=lambda: list(ENTRY_LEVEL_KEYWORDS))
    trust_jsearch: bool = True

    def is_senior(self, job: JobListing) -> bool:
        if self.trust_jsearch and job.source == "jsearch":
            return False

        text = f"{job.title or ''} {job.description or ''}".lower()
        has_senior = any(kw in text for kw in self.senior_keywords)
        has_entry = any(kw in text for kw in self.entry_keywords)
        return has_senior and not has_entry


DEFAULT_SENIOR_FILTER = SeniorFilter()


def is_senior_job(job: JobListing, senior_filter: Optional[SeniorFilter] = None) -> bool:
    return (senior_filter or DEFAULT_SENIOR_FILTER).is_senior(job)


def filter_us_jobs(jobs: list[JobListing], rules: Optional[LocationRules] = None) -> list[JobListing]:
    results = [job for job in jobs if is_us_job(job, rules)]
    logger.info(f"US filter: {len(jobs)} → {len(results)} (non-US: -{len(jobs) - len(results)})")
    return results


def filter_senior_jobs(jobs: list[JobListing], senior_filter: Optional[SeniorFilter] = None) -> list[JobListing]:
    results = [job for job in jobs if not is_senior_job(job, senior_filter)]
    logger.info(f"Senior filter: {len(jobs)} → {len(results)} (senior: -{len(jobs) - len(results)})")
    return results


def split_stale_jobs(
    jobs: list[JobListing],
    threshold_days: int = DEFAULT_STALE_DAYS,
    now: Optional[datetime] = None,
) -> tuple[list[JobListing], list[JobListing]]:
    """Return (current, stale). Jobs with a missing or unreadable date stay current."""
    current, stale = [], []
    for job in jobs:
        if is_stale(job.posted_at, threshold_days, now=now):
            stale.append(job)
        else:
            current.append(job)

    logger.info(
        f"Age filter: {len(jobs)} → {len(current)} "
        f"(older than {threshold_days} days: -{len(stale)})"
    )
    return current, stale


def filter_stale_jobs(
    jobs: list[JobListing],
    threshold_days: int = DEFAULT_STALE_DAYS,
    now: Optional[datetime] = None,
) -> list[JobListing]:
    current, _ = split_stale_jobs(jobs, threshold_days, now=now)
    return current
