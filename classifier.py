"""
classifier.py — Keyword classification of job category, experience level and employment type.

Each table is an ordered list of Rule(label, predicate). The first rule whose predicate
matches the lowercased "title description" text wins; the default label is returned
when nothing matches. There is no scoring.
"""

from collections.abc import Mapping
from typing import Callable, Iterable, NamedTuple, Optional, Union

DEFAULT_CATEGORY = "Software Engineering"
# Unlabeled listings count as entry-level; pass `default` to change it
DEFAULT_EXPERIENCE_LEVEL = "Entry-Level"
DEFAULT_EMPLOYMENT_TYPE = "Full-time"

# Same order and keywords as the `categories` table in preferences.yaml
DEFAULT_CATEGORY_KEYWORDS = {
    "Mobile Development": ["ios", "android", "mobile", "react native", "flutter", "swift", "kotlin"],
    "Frontend Development": ["frontend", "front-end", "react", "vue", "angular", "ux engineer"],
    "Backend Development": ["backend", "back-end", "api", "server", "microservices"],
    "Full Stack Development": ["full stack", "fullstack", "full-stack"],
    "Machine Learning & AI": [
        "machine learning", "ml ", "ai ", "artificial intelligence", "deep learning", "nlp", "computer vision",
    ],
    "Data Science & Analytics": [
        "data scientist", "data analyst", "analytics", "data engineer", "business intelligence",
    ],
    "DevOps & Infrastructure": ["devops", "infrastructure", "cloud", "platform", "sre", "site reliability"],
    "Security Engineering": ["security", "cybersecurity", "infosec", "information security"],
    "Product Management": ["product manager", "product owner", "pm ", "product lead"],
    "Design": [
        "design", "ux ", "ui ", "user experience", "user interface", "graphic design", "product design",
    ],
}

DEFAULT_EXPERIENCE_KEYWORDS = {
    "Senior": ["senior", "sr.", "lead", "principal", "staff", "architect", "5+ years"],
    "Entry-Level": [
        "entry", "junior", "jr.", "intern", "associate", "level 1", "l1", "campus", "student",
        "new grad", "graduate", "early career", "0-2 years",
    ],
    "Mid-Level": ["mid-level", "mid level", "3-5 years", "4-6 years"],
}

DEFAULT_EMPLOYMENT_KEYWORDS = {
    "Internship": ["internship", "intern"],
    "Co-op": ["co-op", "coop"],
    "Part-time": ["part-time", "part time", "parttime"],
    "Contract": ["contract", "contractor"],
    "Full-time": ["full-time", "full time", "fulltime", "permanent"],
}

KeywordTable = Union[Mapping[str, Iterable[str]], Iterable[tuple[str, Iterable[str]]]]


class Rule(NamedTuple):
    label: str
    predicate: Callable[[str], bool]


def keyword_predicate(keywords: Iterable[str]) -> Callable[[str], bool]:
    """Predicate that matches when any keyword is a substring of the text."""
    lowered = tuple(k.lower() for k in keywords if k)

    def _matches(text: str) -> bool:
        return any(k in text for k in lowered)

    return _matches


def build_rules(table: KeywordTable) -> list[Rule]:
    """Turn an ordered {label: [keywords]} mapping (or sequence of pairs) into rules."""
    items = table.items() if isinstance(table, Mapping) else table
    return [Rule(label, keyword_predicate(keywords or [])) for label, keywords in items]


_DEFAULT_CATEGORY_RULES = build_rules(DEFAULT_CATEGORY_KEYWORDS)
_DEFAULT_EXPERIENCE_RULES = build_rules(DEFAULT_EXPERIENCE_KEYWORDS)
_DEFAULT_EMPLOYMENT_RULES = build_rules(DEFAULT_EMPLOYMENT_KEYWORDS)


def classify(text: str, rules: Iterable[Rule], default: str) -> str:
    for rule in rules:
        if rule.predicate(text):
            return rule.label
    return default


def classify_category(
    title: str,
    description: str = "",
    keyword_table: Optional[KeywordTable] = None,
    default: str = DEFAULT_CATEGORY,
) -> str:
    rules = build_rules(keyword_table) if keyword_table else _DEFAULT_CATEGORY_RULES
    return classify(_text(title, description), rules, default)


def classify_experience(
    title: str,
    description: str = "",
    level_table: Optional[KeywordTable] = None,
    default: str = DEFAULT_EXPERIENCE_LEVEL,
) -> str:
    rules = build_rules(level_table) if level_table else _DEFAULT_EXPERIENCE_RULES
    return classify(_text(title, description), rules, default)


def classify_employment_type(
    title: str,
    description: str = "",
    type_table: Optional[KeywordTable] = None,
    default: str = DEFAULT_EMPLOYMENT_TYPE,
) -> str:
    rules = build_rules(type_table) if type_table else _DEFAULT_EMPLOYMENT_RULES
    return classify(_text(title, description), rules, default)


def _text(title: Optional[str], description: Optional[str]) -> str:
    return f"{title or ''} {description or ''}".lower()
