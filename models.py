"""
models.py — Data models for the job board pipeline.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import date
from typing import Optional


@dataclass
class JobListing:
    """A job record from any source. `id` and `fingerprint` are derived once and cached."""
    title: str = ""
    company: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    location: str = ""  # free-text location when the source has no structured fields
    description: str = ""
    posted_at: Optional[str] = None  # ISO-8601 timestamp or relative string like "2w"
    apply_url: Optional[str] = None
    source: str = "unknown"  # "jsearch", "ats-generic", "unknown"
    employment_type: str = ""
    experience_level: str = ""
    id: Optional[str] = None
    fingerprint: Optional[str] = None

    @property
    def location_text(self) -> str:
        """City when known, otherwise the free-text location."""
        return self.city or self.location or ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "JobListing":
        """
        Build a listing from a stored record, a JSearch result, or a generic ATS payload.
        Unknown keys are ignored and missing values become empty strings.
        """
        if "job_title" in data or "employer_name" in data:
            return cls.from_jsearch(data)

        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}

        if not values.get("company"):
            values["company"] = data.get("company_name") or data.get("employer_name") or ""
        if not values.get("location") and isinstance(data.get("locations"), list) and data["locations"]:
            values["location"] = str(data["locations"][0])
        if not values.get("apply_url"):
            values["apply_url"] = data.get("url") or data.get("job_apply_link")
        if not values.get("posted_at"):
            values["posted_at"] = data.get("date_posted") or data.get("job_posted_at_datetime_utc")

        for name in ("title", "company", "city", "state", "country", "location", "description",
                     "employment_type", "experience_level"):
            values[name] = _text(values.get(name))
        values["source"] = _text(values.get("source")) or "unknown"
        return cls(**values)

    @classmethod
    def from_jsearch(cls, data: dict) -> "JobListing":
        """Map a raw JSearch API result onto a listing."""
        return cls(
            title=_text(data.get("job_title")),
            company=_text(data.get("employer_name")),
            city=_text(data.get("job_city")),
            state=_text(data.get("job_state")),
            country=_text(data.get("job_country")),
            location=_text(data.get("job_location")),
            description=_text(data.get("job_description")),
            posted_at=data.get("job_posted_at_datetime_utc") or data.get("job_posted_at") or None,
            apply_url=data.get("job_apply_link") or None,
            source=_text(data.get("job_source")) or "jsearch",
            employment_type=_text(data.get("job_employment_type")),
            id=data.get("id") or None,
            fingerprint=data.get("fingerprint") or None,
        )


@dataclass
class UsageCounter:
    """Per-day JSearch request quota state. Reset when `date` is not today."""
    date: str
    requests_used: int = 0
    remaining: int = 0
    queries_executed: list[str] = field(default_factory=list)

    @classmethod
    def fresh(cls, max_requests: int, today: Optional[date] = None) -> "UsageCounter":
        today = today or date.today()
        return cls(date=today.isoformat(), requests_used=0, remaining=max_requests)

    @classmethod
    def from_dict(cls, data: dict) -> "UsageCounter":
        used = data.get("requests_used", data.get("requests", 0))
        return cls(
            date=str(data.get("date", "")),
            requests_used=int(used or 0),
            remaining=int(data.get("remaining", 0) or 0),
            queries_executed=list(data.get("queries_executed") or []),
        )

    def record_request(self, query: str, max_requests: int):
        self.requests_used += 1
        self.remaining = max(max_requests - self.requests_used, 0)
        self.queries_executed.append(query)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ProcessResult:
    """Outcome of one pipeline run."""
    current_jobs: list[JobListing] = field(default_factory=list)
    archived_jobs: list[JobListing] = field(default_factory=list)
    new_jobs: list[JobListing] = field(default_factory=list)
    stage_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class RunLog:
    """Log entry for a single pipeline run."""
    run_date: str
    jobs_fetched: int = 0
    jobs_current: int = 0
    jobs_archived: int = 0
    jobs_new: int = 0
    errors: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()
