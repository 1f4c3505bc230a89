"""
companies.py — Company directory used for display names, emojis and career links.

A CompanyDirectory is built explicitly and passed to whatever needs it, so several
boards (or tests) can each hold their own.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from monitoring import get_logger

logger = get_logger("companies")

DEFAULT_EMOJI = "🏢"
DEFAULT_CAREER_URL = "#"


@dataclass
class Company:
    name: str
    emoji: str = DEFAULT_EMOJI
    career_url: str = DEFAULT_CAREER_URL
    api_names: list[str] = field(default_factory=list)
    group: str = ""


class CompanyDirectory:
    """Case-insensitive lookup of companies by name or any of their API aliases."""

    def __init__(self, companies: Optional[list[Company]] = None):
        self.companies: list[Company] = []
        self._by_name: dict[str, Company] = {}
        for company in companies or []:
            self.add(company)

    @classmethod
    def from_mapping(cls, data: dict) -> "CompanyDirectory":
        """Build from `{group: [{name, emoji, career_url, api_names}, ...]}`."""
        companies = []
        for group, entries in (data or {}).items():
            for entry in entries or []:
                if not entry.get("name"):
                    continue
                companies.append(Company(
                    name=entry["name"],
                    emoji=entry.get("emoji") or DEFAULT_EMOJI,
                    career_url=entry.get("career_url") or DEFAULT_CAREER_URL,
                    api_names=list(entry.get("api_names") or []),
                    group=group,
                ))
        return cls(companies)

    @classmethod
    def from_file(cls, path: Path) -> "CompanyDirectory":
        """Load from a YAML or JSON file. A missing file gives an empty directory."""
        path = Path(path)
        if not path.exists():
            logger.warning(f"Company file not found at {path}, using empty directory")
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f) if path.suffix == ".json" else yaml.safe_load(f)
        directory = cls.from_mapping(data or {})
        logger.info(f"Loaded {len(directory)} companies from {path.name}")
        return directory

    def add(self, company: Company):
        self.companies.append(company)
        self._by_name[company.name.lower()] = company
        for alias in company.api_names:
            self._by_name[alias.lower()] = company

    def get(self, name: Optional[str]) -> Optional[Company]:
        if not name:
            return None
        return self._by_name.get(name.lower().strip())

    def canonical_name(self, name: str) -> str:
        company = self.get(name)
        return company.name if company else name

    def emoji(self, name: str) -> str:
        company = self.get(name)
        return company.emoji if company else DEFAULT_EMOJI

    def career_url(self, name: str) -> str:
        company = self.get(name)
        return company.career_url if company else DEFAULT_CAREER_URL

    def __len__(self) -> int:
        return len(self.companies)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None
