"""
base.py — Base class for HTTP job sources, plus the polite pacing helper.
"""

import random
import time
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from models import JobListing
from monitoring import get_logger

logger = get_logger("scrapers.base")

USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
]


def delay(seconds: float):
    """Sleep between calls to an external API."""
    if seconds > 0:
        time.sleep(seconds)


class BaseScraper(ABC):
    """
    A job source backed by one httpx.Client. Pass `client` to reuse a shared client
    (or an httpx.MockTransport in tests); otherwise the scraper owns and closes its own.
    """

    def __init__(self, name, delay_min=0.5, delay_max=1.0, timeout=15.0, client: Optional[httpx.Client] = None):
        self.name = name
        self.delay_min = delay_min
        self.delay_max = delay_max
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=timeout,
            headers={"User-Agent": random.choice(USER_AGENTS)},
        )

    def _rate_limit(self):
        delay(random.uniform(self.delay_min, self.delay_max))

    @abstractmethod
    def scrape(self) -> list[JobListing]:
        pass

    def health_check(self) -> bool:
        try:
            r = self.client.head(self._get_base_url())
            return r.status_code < 400
        except httpx.HTTPError as e:
            logger.debug(f"[{self.name}] Health check failed: {e}")
            return False

    def _get_base_url(self) -> str:
        return ""

    def close(self):
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
