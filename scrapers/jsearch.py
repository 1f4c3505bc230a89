"""
jsearch.py — JSearch (RapidAPI) job search with a daily request quota.

One request per run: the query is picked by the current UTC hour so successive runs
rotate through the configured queries. Usage is persisted to jsearch_usage.json and
reset every day. A failed request still counts against the quota.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import httpx

from config import JSEARCH, JSEARCH_API_KEY, JSEARCH_QUERIES, RETRY
from error_handling import RetryConfig, with_retry
from models import JobListing
from monitoring import get_logger
from scrapers.base import BaseScraper
from store import StorePaths, load_usage, save_usage

logger = get_logger("scrapers.jsearch")


class JSearchScraper(BaseScraper):
    """JSearch API fetcher for US job postings."""

    def __init__(
        self,
        api_key: str = JSEARCH_API_KEY,
        queries: Optional[list[str]] = None,
        usage_file: Optional[Path] = None,
        max_requests_per_day: int = JSEARCH["max_requests_per_day"],
        base_url: str = JSEARCH["base_url"],
        num_pages: int = JSEARCH["num_pages"],
        retry_config: Optional[RetryConfig] = None,
        client: Optional[httpx.Client] = None,
        now: Optional[datetime] = None,
    ):
        super().__init__(name="JSearch", timeout=float(JSEARCH["timeout_seconds"]), client=client)
        self.api_key = api_key
        self.queries = list(queries if queries is not None else JSEARCH_QUERIES)
        self.usage_file = Path(usage_file or StorePaths.default().usage)
        self.max_requests_per_day = max_requests_per_day
        self.base_url = base_url
        self.num_pages = num_pages
        self.retry_config = retry_config or RetryConfig.from_mapping(RETRY)
        self.now = now

    def _get_base_url(self) -> str:
        return f"https://{self.base_url}"

    def current_query(self) -> str:
        now = self.now or datetime.now(timezone.utc)
        return self.queries[now.astimezone(timezone.utc).hour % len(self.queries)]

    def scrape(self) -> list[JobListing]:
        if not self.api_key:
            logger.warning("JSEARCH_API_KEY not set — skipping JSearch fetch")
            return []
        if not self.queries:
            logger.warning("No JSearch queries configured — skipping JSearch fetch")
            return []

        today = (self.now or datetime.now(timezone.utc)).date()
        usage = load_usage(self.usage_file, self.max_requests_per_day, today=today)

        if usage.requests_used >= self.max_requests_per_day:
            logger.info(
                f"JSearch daily limit reached ({usage.requests_used}/{self.max_requests_per_day}), skipping this run"
            )
            return []

        query = self.current_query()
        logger.info(
            f"JSearch query: '{query}' ({usage.requests_used + 1}/{self.max_requests_per_day} today)",
            context={"remaining": usage.remaining},
        )

        try:
            raw_jobs = with_retry(lambda: self._search(query), "jsearch_search", self.retry_config, query=query)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"JSearch request failed for '{query}': {e}")
            raw_jobs = []
        finally:
            usage.record_request(query, self.max_requests_per_day)
            save_usage(self.usage_file, usage)

        listings = [JobListing.from_jsearch(item) for item in raw_jobs if isinstance(item, dict)]
        logger.info(
            f"JSearch returned {len(listings)} jobs",
            context={"used": usage.requests_used, "remaining": usage.remaining},
        )
        return listings

    def _search(self, query: str) -> list[dict]:
        params = {
            "query": f"{query} United States",
            "employment_types": "FULLTIME,PARTTIME,INTERN",
            "num_pages": str(self.num_pages),
            "date_posted": "month",
            "country": "us",
        }
        headers = {
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": self.base_url,
        }
        response = self.client.get(f"https://{self.base_url}/search", params=params, headers=headers)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected JSearch response body: {type(payload).__name__}")
        data = payload.get("data") or []
        if not isinstance(data, list):
            raise ValueError(f"Unexpected JSearch data field: {type(data).__name__}")
        return data
