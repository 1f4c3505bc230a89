"""
job_processor.py — The per-run job pipeline.

Fixed sequence:
  assign IDs → write fresh-batch snapshot → load store → merge → US filter
  → senior filter → age filter → save current jobs (+ seen IDs)

Jobs that pass the US and senior filters but are too old are returned as archived.
Every write is atomic on its own; nothing is written until its stage has finished.
"""

from datetime import datetime
from typing import Optional

from classifier import classify_employment_type, classify_experience
from deduplication import merge_jobs
from filters import SeniorFilter, filter_senior_jobs, filter_us_jobs, split_stale_jobs
from freshness import DEFAULT_STALE_DAYS
from instrumentation import NullTracer
from job_id import compute_fingerprint, compute_hash_id, compute_id
from locations import LocationRules
from models import JobListing, ProcessResult
from monitoring import get_logger, log_pipeline_step
from store import StorePaths, load_jobs, load_seen_ids, save_jobs, save_seen_ids, write_new_jobs

logger = get_logger("job_processor")


def assign_identity(jobs: list[JobListing]) -> list[JobListing]:
    """Fill `id` and `fingerprint` in place where missing."""
    for job in jobs:
        job.id = job.id or compute_id(job)
        job.fingerprint = job.fingerprint or compute_fingerprint(job)
    return jobs


def assign_labels(jobs: list[JobListing], level_table=None, type_table=None) -> list[JobListing]:
    """Fill experience level and employment type in place where missing."""
    for job in jobs:
        if not job.experience_level:
            job.experience_level = classify_experience(job.title, job.description, level_table)
        if not job.employment_type:
            job.employment_type = classify_employment_type(job.title, job.description, type_table)
    return jobs


def process_jobs(
    jobs: list[JobListing],
    paths: Optional[StorePaths] = None,
    *,
    location_rules: Optional[LocationRules] = None,
    senior_filter: Optional[SeniorFilter] = None,
    stale_days: int = DEFAULT_STALE_DAYS,
    level_table=None,
    type_table=None,
    tracer=None,
    now: Optional[datetime] = None,
) -> ProcessResult:
    paths = paths or StorePaths.default()
    tracer = tracer or NullTracer()
    counts: dict[str, int] = {}

    # ===== 1. ASSIGN IDS =====
    jobs = assign_labels(assign_identity(list(jobs)), level_table, type_table)
    counts["fresh"] = len(jobs)
    tracer.checkpoint("assign_ids", jobs)

    # ===== 2. SNAPSHOT FRESH BATCH =====
    write_new_jobs(paths, jobs)
    logger.info(f"Wrote {len(jobs)} jobs to {paths.new_jobs.name}")

    # ===== 3. LOAD PERSISTED STORE =====
    persisted = assign_identity(load_jobs(paths.current_jobs))
    counts["persisted"] = len(persisted)
    logger.info(f"Loaded {len(persisted)} persisted jobs")
    tracer.checkpoint("load_persisted", persisted)

    # ===== 4. MERGE =====
    merged = merge_jobs(persisted, jobs)
    counts["merged"] = len(merged)
    log_pipeline_step(logger, "Merge", len(persisted) + len(jobs), len(merged))
    tracer.checkpoint("merge", merged, {"persisted": len(persisted), "fresh": len(jobs)})

    # ===== 5. US ONLY =====
    us_jobs = filter_us_jobs(merged, location_rules)
    counts["us"] = len(us_jobs)
    tracer.checkpoint("us_filter", us_jobs)

    # ===== 6. DROP SENIOR ROLES =====
    non_senior = filter_senior_jobs(us_jobs, senior_filter)
    counts["non_senior"] = len(non_senior)
    tracer.checkpoint("senior_filter", non_senior)

    # ===== 7. AGE =====
    current, archived = split_stale_jobs(non_senior, stale_days, now=now)
    counts["current"] = len(current)
    counts["archived"] = len(archived)
    tracer.checkpoint("age_filter", current, {"archived": len(archived)})

    # ===== 8. SAVE =====
    save_jobs(paths.current_jobs, current)

    seen_ids = load_seen_ids(paths.seen_jobs)
    new_jobs = [job for job in current if compute_hash_id(job) not in seen_ids]
    seen_ids.update(compute_hash_id(job) for job in current)
    save_seen_ids(paths.seen_jobs, seen_ids)
    counts["new"] = len(new_jobs)
    tracer.checkpoint("new_jobs", new_jobs)

    logger.info(
        f"Processing complete: {len(current)} current, {len(archived)} archived, {len(new_jobs)} new",
        context=counts,
    )
    return ProcessResult(current_jobs=current, archived_jobs=archived, new_jobs=new_jobs, stage_counts=counts)
