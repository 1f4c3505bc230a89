"""
deduplication.py — Merging the persisted job set with fresh jobs, and duplicate removal.

Two policies live here and are used for different things:
- merge_jobs(): refresh. Persisted jobs first, then fresh ones; a fresh job with the same
  ID replaces the stored one (last write wins).
- filter_duplicates(): one-shot list cleanup. First occurrence by ID or fingerprint wins.
"""

from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional

from job_id import compute_fingerprint, compute_hash_fingerprint, compute_id
from models import JobListing
from monitoring import get_logger

logger = get_logger("deduplication")


@dataclass
class DuplicateCheck:
    is_duplicate: bool
    match: Optional[JobListing]
    reason: str


def merge_jobs(persisted: Iterable[JobListing], fresh: Iterable[JobListing]) -> list[JobListing]:
    """
    Merge stored jobs with freshly fetched ones, keyed by ID.
    Jobs without an ID are dropped.
    """
    job_map: dict[str, JobListing] = {}
    dropped = 0

    for job in list(persisted) + list(fresh):
        if not job.id:
            dropped += 1
            continue
        job_map[job.id] = job

    if dropped:
        logger.debug(f"Merge skipped {dropped} jobs without an ID")

    return list(job_map.values())


def filter_duplicates(
    jobs: Iterable[JobListing],
    id_fn: Callable[[JobListing], str] = compute_id,
    fingerprint_fn: Callable[[JobListing], str] = compute_fingerprint,
) -> list[JobListing]:
    """
    Remove duplicates in a single pass, keeping input order.
    A job is a duplicate when its ID or fingerprint was already seen. Missing
    IDs and fingerprints are filled in place.
    """
    seen_ids: set[str] = set()
    seen_fingerprints: set[str] = set()
    unique: list[JobListing] = []
    total = 0

    for job in jobs:
        total += 1
        job.id = job.id or id_fn(job)
        job.fingerprint = job.fingerprint or fingerprint_fn(job)

        if job.id in seen_ids or job.fingerprint in seen_fingerprints:
            continue

        seen_ids.add(job.id)
        seen_fingerprints.add(job.fingerprint)
        unique.append(job)

    dupes_removed = total - len(unique)
    if dupes_removed > 0:
        logger.info(f"Deduplication: {total} → {len(unique)} ({dupes_removed} duplicates removed)")

    return unique


def is_duplicate(job: Optional[JobListing], existing_jobs) -> DuplicateCheck:
    """
    Check a job against existing jobs: exact ID first, then the hashed fingerprint
    (same company, title, location, level and employment type from another source).
    """
    if job is None or not isinstance(existing_jobs, (list, tuple)):
        return DuplicateCheck(False, None, "Invalid input")

    job_id = job.id or compute_id(job)
    for existing in existing_jobs:
        if (existing.id or compute_id(existing)) == job_id:
            return DuplicateCheck(True, existing, "ID match (same posting)")

    fingerprint = compute_hash_fingerprint(job)
    for existing in existing_jobs:
        if compute_hash_fingerprint(existing) == fingerprint:
            return DuplicateCheck(True, existing, "Fingerprint match (similar job attributes)")

    return DuplicateCheck(False, None, "No match found")


def enrich_job(job: Optional[JobListing]) -> Optional[JobListing]:
    """Return a copy of the job with `id` and `fingerprint` filled in."""
    if job is None:
        return None
    return replace(
        job,
        id=job.id or compute_id(job),
        fingerprint=job.fingerprint or compute_fingerprint(job),
    )
