"""
locations.py — Decides whether a job is US-based.

The check is permissive. Rules are applied in order and the first one
that decides wins:
  1. country is a US indicator                       → US
  2. country names a known non-US country            → not US
  3. state is a US state/territory code (or name)    → US
  4. city/state text names a non-US city or country  → not US
  5. city/state text says "remote"                   → US
  6. free-text location reads as US on its own       → US
  7. anything still undecided                        → LocationRules.unknown_is_us
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from models import JobListing

US_INDICATORS = ["us", "usa", "u.s.", "u.s.a.", "united states", "united states of america", "america"]

US_STATE_CODES = [
    "al", "ak", "az", "ar", "ca", "co", "ct", "de", "fl", "ga", "hi", "id", "il", "in", "ia",
    "ks", "ky", "la", "me", "md", "ma", "mi", "mn", "ms", "mo", "mt", "ne", "nv", "nh", "nj",
    "nm", "ny", "nc", "nd", "oh", "ok", "or", "pa", "ri", "sc", "sd", "tn", "tx", "ut", "vt",
    "va", "wa", "wv", "wi", "wy", "dc", "pr", "gu", "vi", "as", "mp",
]

US_STATE_NAMES = [
    "alabama", "alaska", "arizona", "arkansas", "california", "colorado", "connecticut",
    "delaware", "florida", "georgia", "hawaii", "idaho", "illinois", "indiana", "iowa",
    "kansas", "kentucky", "louisiana", "maine", "maryland", "massachusetts", "michigan",
    "minnesota", "mississippi", "missouri", "montana", "nebraska", "nevada", "new hampshire",
    "new jersey", "new mexico", "new york", "north carolina", "north dakota", "ohio",
    "oklahoma", "oregon", "pennsylvania", "rhode island", "south carolina", "south dakota",
    "tennessee", "texas", "utah", "vermont", "virginia", "washington", "west virginia",
    "wisconsin", "wyoming", "district of columbia", "puerto rico",
]

NON_US_COUNTRIES = [
    "canada", "mexico",
    "uk", "united kingdom", "great britain", "britain", "england", "scotland", "germany",
    "deutschland", "france", "netherlands", "holland", "sweden", "norway", "denmark", "finland",
    "ireland", "belgium", "austria", "switzerland", "poland", "portugal", "greece", "italy",
    "spain", "romania", "bulgaria", "hungary", "czech republic", "croatia", "serbia", "russia",
    "ukraine", "estonia", "latvia", "lithuania",
    "india", "singapore", "japan", "south korea", "korea", "china", "taiwan", "hong kong",
    "thailand", "vietnam", "philippines", "indonesia", "malaysia",
    "israel", "turkey", "uae", "united arab emirates", "saudi arabia",
    "australia", "new zealand",
    "brazil", "argentina", "chile", "colombia", "peru",
]

NON_US_CITIES = [
    "toronto", "vancouver", "montreal", "ottawa", "calgary", "edmonton", "quebec city",
    "london", "manchester", "birmingham", "glasgow", "liverpool", "bristol", "edinburgh",
    "berlin", "munich", "hamburg", "cologne", "frankfurt", "stuttgart",
    "paris", "marseille", "lyon", "toulouse",
    "amsterdam", "rotterdam", "the hague", "utrecht",
    "stockholm", "copenhagen", "helsinki", "oslo", "gothenburg", "dublin",
    "bangalore", "bengaluru", "mumbai", "delhi", "new delhi", "hyderabad", "pune", "chennai",
    "tokyo", "osaka", "seoul", "busan", "taipei", "bangkok", "shanghai", "beijing", "shenzhen",
    "sydney", "melbourne", "brisbane", "perth", "auckland",
    "tel aviv", "jerusalem", "dubai", "abu dhabi", "riyadh",
    "sao paulo", "são paulo", "buenos aires", "mexico city", "bogota", "bogotá", "santiago", "lima",
]


@dataclass
class LocationRules:
    """Location vocabularies plus the policy for records no rule decides."""
    us_indicators: list[str] = field(default_factory=lambda: list(US_INDICATORS))
    state_codes: list[str] = field(default_factory=lambda: list(US_STATE_CODES))
    state_names: list[str] = field(default_factory=lambda: list(US_STATE_NAMES))
    non_us_countries: list[str] = field(default_factory=lambda: list(NON_US_COUNTRIES))
    non_us_cities: list[str] = field(default_factory=lambda: list(NON_US_CITIES))
    # Applied to records no earlier rule decides
    unknown_is_us: bool = True

    def __post_init__(self):
        self._non_us_re = _word_pattern(self.non_us_countries + self.non_us_cities)
        self._non_us_country_re = _word_pattern(self.non_us_countries)
        self._us_indicator_re = _word_pattern(self.us_indicators)
        self._state_name_re = _word_pattern(self.state_names)
        self._state_codes = {c.lower() for c in self.state_codes}
        self._us_indicator_set = {i.lower() for i in self.us_indicators}
        self._state_name_set = {n.lower() for n in self.state_names}

    def is_us(self, job: JobListing) -> bool:
        city, state, country = _location_fields(job)

        if country:
            if country in self._us_indicator_set:
                return True
            if _search(self._non_us_country_re, country):
                return False

        if state and (state in self._state_codes or state in self._state_name_set):
            return True

        for text in (city, state):
            if text and _search(self._non_us_re, text):
                return False

        if "remote" in city or "remote" in state:
            return True

        # Free text like "USA" or "California" lands in `city`; read it as a whole
        if self.is_us_location(job.location):
            return True

        return self.unknown_is_us

    def is_non_us_location(self, location: Optional[str]) -> bool:
        """True when free text names a known non-US country or city."""
        return bool(location) and _search(self._non_us_re, location.lower())

    def is_us_location(self, location: Optional[str]) -> bool:
        """True when free text carries a US indicator, state, or is remote without non-US hints."""
        if not location:
            return False
        loc = location.lower().strip()
        if self.is_non_us_location(loc):
            return False
        if _search(self._us_indicator_re, loc) or _search(self._state_name_re, loc):
            return True
        tokens = {t.strip() for t in re.split(r"[,/()]", loc)}
        if tokens & self._state_codes:
            return True
        return "remote" in loc


def _location_fields(job: JobListing) -> tuple[str, str, str]:
    city = _clean(job.city)
    state = _clean(job.state)
    country = _clean(job.country)

    if not (city or state or country) and job.location:
        segments = [_clean(s) for s in job.location.split(",") if s.strip()]
        if segments:
            city = segments[0]
        if len(segments) >= 2:
            state = segments[1]
        if len(segments) >= 3:
            country = segments[-1]
        elif len(segments) == 2 and segments[1] in US_INDICATORS:
            country = segments[1]

    return city, state, country


def _clean(value: Optional[str]) -> str:
    if not value:
        return ""
    return re.sub(r"[,\s]+", " ", value.lower()).strip()


def _word_pattern(words: list[str]) -> Optional[re.Pattern]:
    words = sorted({w.lower() for w in words if w}, key=len, reverse=True)
    if not words:
        return None
    return re.compile(r"(?<!\w)(?:" + "|".join(re.escape(w) for w in words) + r")(?!\w)")


def _search(pattern: Optional[re.Pattern], text: str) -> bool:
    return bool(pattern and pattern.search(text))


DEFAULT_RULES = LocationRules()


def is_us_job(job: JobListing, rules: Optional[LocationRules] = None) -> bool:
    return (rules or DEFAULT_RULES).is_us(job)
