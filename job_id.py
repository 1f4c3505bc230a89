"""
job_id.py — Stable job IDs and duplicate-detection fingerprints.

Two fingerprint schemes, each with its own callers:
- compute_fingerprint(): readable `company::title::location` key with seniority and
  version tokens stripped. Used for in-run deduplication.
- compute_hash_fingerprint() / compute_hash_id(): SHA-256 based compact keys. Used for
  cross-source duplicate checks and the seen-ID set. compute_hash_id() keeps only
  8 hex characters, trading collision resistance for short IDs.
"""

import hashlib
import re
from typing import Optional
from urllib.parse import urlsplit

from models import JobListing

_COMPANY_SUFFIX_RE = re.compile(
    r"\s+(inc\.?|incorporated|llc\.?|corp\.?|corporation|ltd\.?|limited|gmbh|co\.?|company)$",
    re.IGNORECASE,
)
_ENHANCED_COMPANY_SUFFIX_RES = [
    re.compile(r"\s+solutions?$", re.IGNORECASE),
    re.compile(r"\s+technologies?$", re.IGNORECASE),
    re.compile(r"\s+systems?$", re.IGNORECASE),
    re.compile(r"\s+group$", re.IGNORECASE),
]
_TRAILING_PUNCT_RE = re.compile(r"[\s.,;:!]+$")
_WHITESPACE_RE = re.compile(r"\s+")

_ROMAN_NUMERALS = [("iii", "3"), ("ii", "2"), ("iv", "4"), ("i", "1"), ("v", "5")]
_SENIORITY_RE = re.compile(r"\b(?:senior|sr|junior|jr|staff|principal|lead|associate)\b\.?", re.IGNORECASE)
_VERSION_RE = re.compile(r"\b(?:i{1,3}|iv|v|[1-5])\b")
_DASH_SUFFIX_RE = re.compile(r"\s+-\s+[^-]+$")
_TRAILING_SEPARATOR_RE = re.compile(r"[-_\s]+$")


def normalize_company_name(company: Optional[str]) -> str:
    """Lowercase, strip legal suffixes (Inc, LLC, Corp, Ltd, GmbH, Co, Company) and trailing punctuation."""
    if not company:
        return ""
    name = _WHITESPACE_RE.sub(" ", company.lower().strip())
    name = _TRAILING_PUNCT_RE.sub("", name)
    name = _COMPANY_SUFFIX_RE.sub("", name)
    name = _TRAILING_PUNCT_RE.sub("", name)
    return name.strip()


def normalize_title(title: Optional[str]) -> str:
    if not title:
        return ""
    return _WHITESPACE_RE.sub(" ", title.lower().strip())


def normalize_location(location: Optional[str]) -> str:
    if not location:
        return ""
    return _WHITESPACE_RE.sub(" ", location.lower().strip())


def sanitize_id(value: str) -> str:
    """Collapse every non-word character to single hyphens and trim them from the ends."""
    value = re.sub(r"[^\w-]", "-", value, flags=re.ASCII)
    value = re.sub(r"-+", "-", value)
    return value.strip("-")


def migrate_old_id(old_id: str) -> str:
    """Re-sanitize an ID produced by an older format."""
    return sanitize_id(old_id or "")


def compute_id(job: JobListing, enhanced: bool = False) -> str:
    """
    Stable ID for a job.

    Prefers the apply URL (`host + path`, trailing slash and query dropped). Falls back to
    a `company-title-location` slug, using the enhanced normalization when requested.
    """
    _require(job)
    url_id = _id_from_url(job.apply_url)
    if url_id:
        return url_id
    return compute_enhanced_id(job) if enhanced else compute_simple_id(job)


def compute_simple_id(job: JobListing) -> str:
    _require(job)
    company = normalize_company_name(job.company).replace(" ", "-")
    title = normalize_title(job.title).replace(" ", "-")
    location = normalize_location(job.location_text).replace(" ", "-")
    return sanitize_id(f"{company}-{title}-{location}")


def compute_enhanced_id(job: JobListing) -> str:
    """
    Slug ID that also folds common title variants together:
    Roman numerals I-V become digits, Sr./Jr. become senior/junior, & becomes and.
    """
    _require(job)
    title = normalize_title(job.title)
    for numeral, digit in _ROMAN_NUMERALS:
        title = re.sub(rf"\b{numeral}\b", digit, title)
    title = re.sub(r"\bsr\b\.?", "senior", title)
    title = re.sub(r"\bjr\b\.?", "junior", title)
    title = re.sub(r"\s*&\s*", " and ", title)

    company = normalize_company_name(job.company)
    for suffix_re in _ENHANCED_COMPANY_SUFFIX_RES:
        company = suffix_re.sub("", company)
    company = re.sub(r"\s*,\s*", "-", company)

    city = normalize_location(job.location_text)

    parts = [sanitize_id(part.replace(" ", "-")) for part in (company, title, city)]
    return "-".join(parts)


def compute_fingerprint(job: JobListing) -> str:
    """
    Coarse duplicate key: `company::title::location`.
    "Senior Software Engineer" and "Software Engineer II" at the same company and city collide.
    """
    _require(job)
    title = (job.title or "").lower().strip()
    title = _DASH_SUFFIX_RE.sub("", title)
    title = _SENIORITY_RE.sub("", title)
    title = _VERSION_RE.sub("", title)
    title = _TRAILING_SEPARATOR_RE.sub("", title)
    title = _WHITESPACE_RE.sub(" ", title).strip()

    company = normalize_company_name(job.company)
    location = job.location_text.split(",")[0].lower().strip()
    return f"{company}::{title}::{location}"


def compute_minimal_fingerprint(job: JobListing) -> str:
    """Fingerprint that keeps seniority in the title; only trailing separators are trimmed."""
    _require(job)
    title = (job.title or "").lower().strip()
    title = _TRAILING_SEPARATOR_RE.sub("", title)
    title = _WHITESPACE_RE.sub(" ", title).strip()

    company = normalize_company_name(job.company)
    location = job.location_text.split(",")[0].lower().strip()
    return f"{company}::{title}::{location}"


def compute_hash_fingerprint(job: JobListing) -> str:
    """SHA-256 hex digest over company, title, location, experience level and employment type."""
    _require(job)
    parts = [
        job.company or "",
        job.title or "",
        job.location_text,
        job.experience_level or "",
        job.employment_type or "",
    ]
    normalized = "|".join(p.lower().strip() for p in parts)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def compute_hash_id(job: JobListing) -> str:
    """8-character hex ID from company, title and location."""
    _require(job)
    company = normalize_company_name(job.company)
    title = normalize_title(job.title)
    hash_input = f"{company}|{title}|{job.location_text}".lower().strip()
    return hashlib.sha256(hash_input.encode("utf-8")).hexdigest()[:8]


def _id_from_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname
    except ValueError:
        return None
    if parts.scheme.lower() not in ("http", "https") or not hostname:
        return None

    path = parts.path[:-1] if parts.path.endswith("/") else parts.path
    normalized = (hostname + path).lower()
    normalized = re.sub(r"[^\w]", "-", normalized, flags=re.ASCII)
    normalized = re.sub(r"-+", "-", normalized)
    return normalized.strip("-") or None


def _require(job):
    if job is None:
        raise ValueError("Job object is required")
