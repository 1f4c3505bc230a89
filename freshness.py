"""
freshness.py — Posting age checks for job listings.

A listing is stale once it is `threshold_days` old (14 by default). Relative ages such as
"36h", "15d", "2w" or "1mo" are understood directly; anything unparseable is never stale.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from models import JobListing

DEFAULT_STALE_DAYS = 14

_RELATIVE_AGE_RE = re.compile(r"^(\d+)\s*(h|d|w|mo)$", re.IGNORECASE)
_COMPACT_AGE_UNITS = {
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
    "mo": timedelta(days=30),
}


def is_stale(posted_at: Optional[str], threshold_days: int = DEFAULT_STALE_DAYS, now: Optional[datetime] = None) -> bool:
    """
    True when the posting is at least `threshold_days` old.
    With the default threshold: >=336h, >=14d, >=2w, or any month value.
    """
    if not posted_at:
        return False

    match = _RELATIVE_AGE_RE.match(str(posted_at).strip())
    if match:
        value = int(match.group(1))
        unit = match.group(2).lower()
        if unit == "h":
            return value >= threshold_days * 24
        if unit == "d":
            return value >= threshold_days
        if unit == "w":
            return value * 7 >= threshold_days
        return True  # "mo"

    now = _as_utc(now or datetime.now(timezone.utc))
    posted = parse_posted_at(str(posted_at), now=now)
    if posted is None:
        return False

    age_days = int((now - posted).total_seconds() // 86400)
    return age_days >= threshold_days


def split_by_age(
    jobs: list[JobListing],
    max_age_days: int = 7,
    now: Optional[datetime] = None,
) -> tuple[list[JobListing], list[JobListing]]:
    """
    Split jobs into (current, archived) by posting age.
    Jobs without a usable date are kept as current.
    """
    current, archived = [], []
    for job in jobs:
        if is_stale(job.posted_at, max_age_days, now=now):
            archived.append(job)
        else:
            current.append(job)
    return current, archived


def format_time_ago(value: Optional[str], now: Optional[datetime] = None) -> str:
    """Compact age label: "5h", "1d", "3d", "2w", "2mo". Falls back to "Recently"."""
    if not value:
        return "Recently"

    text = str(value).strip()
    if _RELATIVE_AGE_RE.match(text):
        return text.lower().replace(" ", "")

    now = _as_utc(now or datetime.now(timezone.utc))
    posted = parse_posted_at(text, now=now)
    if posted is None:
        return "Recently"

    hours = max(int((now - posted).total_seconds() // 3600), 0)
    if hours < 24:
        return f"{hours}h"

    days = hours // 24
    if days == 1:
        return "1d"
    if days < 7:
        return f"{days}d"
    if days < 30:
        return f"{days // 7}w"
    return f"{days // 30}mo"


def parse_posted_at(date_str: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Parse an absolute or relative posting date into an aware UTC datetime."""
    if not date_str:
        return None
    date_str = date_str.strip()

    match = _RELATIVE_AGE_RE.match(date_str)
    if match:
        now = _as_utc(now or datetime.now(timezone.utc))
        return now - _COMPACT_AGE_UNITS[match.group(2).lower()] * int(match.group(1))

    try:
        return _as_utc(datetime.fromisoformat(date_str.replace("Z", "+00:00")))
    except ValueError:
        pass

    formats = [
        "%Y-%m-%dT%H:%M:%S.%fZ",
        "%m/%d/%Y",
        "%B %d, %Y",
        "%b %d, %Y",
        "%a %b %d %Y",
    ]

    for fmt in formats:
        try:
            return _as_utc(datetime.strptime(date_str, fmt))
        except ValueError:
            continue

    return _parse_relative_date(date_str, now=now)


def _parse_relative_date(date_str: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Parse relative date strings like '3 days ago', '1 week ago'."""
    date_str = date_str.lower().strip()
    now = _as_utc(now or datetime.now(timezone.utc))

    if "today" in date_str or "just posted" in date_str or "just now" in date_str:
        return now
    if "yesterday" in date_str:
        return now - timedelta(days=1)

    match = re.search(r'(\d+)\+?\s*(hour|day|week|month)s?\s*ago', date_str)
    if not match:
        return None

    value = int(match.group(1))
    unit = match.group(2)
    if unit == "hour":
        return now - timedelta(hours=value)
    if unit == "day":
        return now - timedelta(days=value)
    if unit == "week":
        return now - timedelta(weeks=value)
    return now - timedelta(days=value * 30)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
