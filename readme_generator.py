"""
readme_generator.py — Renders the job board README from current and archived jobs.

Jobs are grouped by category (job_categories.json order). Inside a category, companies
with more than 10 jobs get their own table (collapsed when over 50); the rest share one
table. Every table is sorted newest first. Current jobs older than `max_age_days`
(7 by default) render in the archived section.
"""

import json
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from classifier import DEFAULT_EXPERIENCE_LEVEL, build_rules, classify, classify_experience
from companies import CompanyDirectory
from config import README_MAX_AGE_DAYS, REPO_ROOT
from freshness import format_time_ago, parse_posted_at, split_by_age
from job_id import compute_minimal_fingerprint
from models import JobListing
from monitoring import get_logger
from store import atomic_write_text
from template_renderer import render_config_templates

logger = get_logger("readme")

BIG_COMPANY_THRESHOLD = 10
COLLAPSE_COMPANY_THRESHOLD = 50
MAX_ROLE_LENGTH = 35

LEVEL_BADGES = {
    "Entry-Level": '![Entry](https://img.shields.io/badge/-Entry-brightgreen "Entry-Level")',
    "Mid-Level": '![Mid](https://img.shields.io/badge/-Mid-blue "Mid-Level")',
    "Senior": '![Senior](https://img.shields.io/badge/-Senior-red "Senior-Level")',
}

EMPTY_TABLE = (
    "| Company | Role | Location | Posted | Level | Apply |\n"
    "|---------|------|----------|--------|-------|-------|\n"
    "| *No current openings* | *Check back tomorrow* | *-* | *-* | *-* | *-* |"
)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def load_job_categories(path: Path) -> dict:
    """Load the ordered category table: {key: {emoji, title, keywords}}."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def format_location(city: Optional[str], state: Optional[str]) -> str:
    if not city and not state:
        return "Remote"
    if not city:
        return state
    if not state:
        return city
    if city.lower() == "remote":
        return "Remote 🏠"
    return f"{city}, {state}"


def truncate_role(title: str) -> str:
    title = title or ""
    return title[:32] + "..." if len(title) > MAX_ROLE_LENGTH else title


def status_indicator(job: JobListing) -> str:
    description = (job.description or "").lower()
    indicator = ""
    if "no sponsorship" in description or "us citizen" in description:
        indicator = " 🇺🇸"
    if "remote" in description:
        indicator += " 🏠"
    return indicator


class ReadmeGenerator:
    """README renderer for one job board."""

    def __init__(
        self,
        board: dict,
        job_categories: dict,
        companies: Optional[CompanyDirectory] = None,
        repo_root: Optional[Path] = None,
        level_table=None,
        default_level: str = DEFAULT_EXPERIENCE_LEVEL,
        max_age_days: int = README_MAX_AGE_DAYS,
        now: Optional[datetime] = None,
    ):
        self.board = board
        self.max_age_days = max_age_days
        self.job_categories = job_categories
        self.companies = companies or CompanyDirectory()
        self.repo_root = Path(repo_root or REPO_ROOT)
        self.readme_path = self.repo_root / "README.md"
        self.level_table = level_table
        self.default_level = default_level
        self.now = now
        self._category_rules = build_rules(
            (key, data.get("keywords", [])) for key, data in job_categories.items()
        )

    # --- Classification ---

    def category_for(self, job: JobListing) -> str:
        text = f"{job.title or ''} {job.description or ''}".lower()
        return classify(text, self._category_rules, self.board["default_category"])

    def category_title(self, key: str) -> str:
        return self.job_categories.get(key, {}).get("title", key)

    def level_for(self, job: JobListing) -> str:
        return classify_experience(job.title, job.description, self.level_table, self.default_level)

    def filter_out_senior_positions(self, jobs: list[JobListing]) -> list[JobListing]:
        return [job for job in jobs if self.level_for(job) != "Senior"]

    def compute_stats(self, jobs: list[JobListing]) -> dict:
        """Counts by level, location, category title and company."""
        return {
            "by_level": dict(Counter(self.level_for(job) for job in jobs)),
            "by_location": dict(Counter(format_location(job.city, job.state) for job in jobs)),
            "by_category": dict(Counter(self.category_title(self.category_for(job)) for job in jobs)),
            "total_by_company": dict(Counter(job.company for job in jobs)),
        }

    # --- Tables ---

    def _sort_newest_first(self, jobs: list[JobListing]) -> list[JobListing]:
        return sorted(jobs, key=lambda job: parse_posted_at(job.posted_at or "", now=self.now) or _EPOCH, reverse=True)

    def _row_cells(self, job: JobListing) -> list[str]:
        level = self.level_for(job)
        apply_link = job.apply_url or self.companies.career_url(job.company)
        return [
            f"{truncate_role(job.title)}{status_indicator(job)}",
            format_location(job.city, job.state) if (job.city or job.state) else (job.location or "Remote"),
            format_time_ago(job.posted_at, now=self.now),
            LEVEL_BADGES.get(level, level),
            f'[<img src="images/apply.png" width="75" alt="Apply">]({apply_link})',
        ]

    def generate_job_table(self, jobs: list[JobListing]) -> str:
        jobs = self.filter_out_senior_positions(jobs)
        if not jobs:
            return EMPTY_TABLE

        by_category: dict[str, list[JobListing]] = {}
        fingerprints = set()
        for job in jobs:
            fingerprints.add(compute_minimal_fingerprint(job))
            by_category.setdefault(self.category_for(job), []).append(job)

        logger.debug("Jobs by category", context={k: len(v) for k, v in by_category.items()})

        output = []
        for key, category in self.job_categories.items():
            category_jobs = by_category.get(key)
            if not category_jobs:
                continue
            output.append(self._category_section(category, category_jobs))

        logger.debug(f"Rendered {len(fingerprints)} distinct jobs")
        return "".join(output)

    def _category_section(self, category: dict, jobs: list[JobListing]) -> str:
        by_company: dict[str, list[JobListing]] = {}
        for job in jobs:
            by_company.setdefault(job.company, []).append(job)

        lines = [
            "<details>",
            f"<summary><h3>{category.get('emoji', '')} <strong>{category.get('title', '')}</strong> "
            f"({len(jobs)} positions)</h3></summary>",
            "",
        ]

        big = sorted(
            ((name, cj) for name, cj in by_company.items() if len(cj) > BIG_COMPANY_THRESHOLD),
            key=lambda item: len(item[1]),
            reverse=True,
        )
        for name, company_jobs in big:
            emoji = self.companies.emoji(name)
            collapse = len(company_jobs) > COLLAPSE_COMPANY_THRESHOLD
            if collapse:
                lines += [
                    "<details>",
                    f"<summary><h4>{emoji} <strong>{name}</strong> ({len(company_jobs)} positions)</h4></summary>",
                    "",
                ]
            else:
                lines += [f"#### {emoji} **{name}** ({len(company_jobs)} positions)", ""]

            lines += ["| Role | Location | Posted | Level | Apply |", "|------|----------|--------|-------|-------|"]
            for job in self._sort_newest_first(company_jobs):
                lines.append("| " + " | ".join(self._row_cells(job)) + " |")
            lines += ["", "</details>", ""] if collapse else [""]

        small_jobs = [job for cj in by_company.values() if len(cj) <= BIG_COMPANY_THRESHOLD for job in cj]
        if small_jobs:
            lines += [
                "| Company | Role | Location | Posted | Level | Apply |",
                "|---------|------|----------|--------|-------|-------|",
            ]
            for job in self._sort_newest_first(small_jobs):
                company_cell = f"{self.companies.emoji(job.company)} **{job.company}**"
                lines.append("| " + " | ".join([company_cell] + self._row_cells(job)) + " |")
            lines.append("")

        lines += ["</details>", "", ""]
        return "\n".join(lines)

    # --- Sections ---

    def generate_internship_section(self, internship_data: Optional[dict]) -> str:
        if not internship_data:
            return ""
        prefix = self.board["repo_prefix"]

        program_rows = []
        for program in internship_data.get("company_programs", []):
            emoji = self.companies.emoji(program["company"])
            program_rows.append(
                f"| {emoji} **{program['company']}** | {program['program']} | "
                f'<p align="center">[<img src="images/apply.png" width="75" alt="Apply button">]({program["url"]})</p> |'
            )

        source_rows = []
        for source in internship_data.get("sources", []):
            source_rows.append(
                f"| **{source.get('emoji', '')} {source['name']}** | {source['type']} | {source['description']} | "
                f'[<img src="images/{prefix}-visit.png" width="75" alt="Visit button">]({source["url"]}) |'
            )

        return "\n".join([
            "",
            "---",
            "",
            "## Internships 2026",
            "",
            f'<img src="images/{prefix}-internships.png" alt="Internships for 2026.">',
            "",
            "### 🏢 **Internship Programs**",
            "",
            "| Company | Program | Application Link |",
            "|---------|---------|------------------|",
            *program_rows,
            "",
            "### 📚 **Internship Resources**",
            "",
            "| Platform | Type | Description | Link |",
            "|----------|------|-------------|------|",
            *source_rows,
            "",
        ])

    def generate_archived_section(self, archived_jobs: list[JobListing], stats: dict) -> str:
        archived_jobs = self.filter_out_senior_positions(archived_jobs)
        if not archived_jobs:
            return ""

        category_counts = Counter(self.category_title(self.category_for(job)) for job in archived_jobs)
        top_category = category_counts.most_common(1)[0][0]

        return "\n".join([
            "",
            "---",
            "",
            "<details>",
            f"<summary><h2>🗂️ <strong>ARCHIVED JOBS</strong> - {len(archived_jobs)} Older Positions "
            f"({self.max_age_days}+ days old) - Click to Expand 👆</h2></summary>",
            "",
            "### 📊 **Archived Job Stats**",
            f"- **📁 Total Jobs**: {len(archived_jobs)} positions",
            f"- **🏢 Companies**: {len(stats.get('total_by_company', {}))} companies",
            f"- **🏷️ Top Category**: {top_category}",
            "",
            self.generate_job_table(archived_jobs),
            "",
            "</details>",
            "",
            "---",
            "",
        ])

    def generate_readme(
        self,
        current_jobs: list[JobListing],
        archived_jobs: Optional[list[JobListing]] = None,
        internship_data: Optional[dict] = None,
    ) -> str:
        board = self.board
        features = board.get("features", {})
        now = self.now or datetime.now(timezone.utc)

        # Listings past the README window move to the archive section
        current_jobs, aged_out = split_by_age(current_jobs, self.max_age_days, now=now)
        archived_jobs = aged_out + list(archived_jobs or [])

        current_jobs = self.filter_out_senior_positions(current_jobs)
        stats = self.compute_stats(current_jobs)
        total_companies = len(stats["total_by_company"])

        top = Counter(stats["by_category"]).most_common(1)
        top_category, top_count = top[0] if top else (board["default_category"], 0)
        top_badge = top_category.replace(" ", "_")[:20]

        rendered = render_config_templates(board, {
            "total_companies": total_companies,
            "current_jobs": len(current_jobs),
        })
        prefix = board["repo_prefix"]

        parts = [
            '<div align="center">',
            "",
            f'<img src="images/{prefix}-heading.png" alt="{board["heading_image_alt"]}">',
            "",
            f"# {board['title']}",
            "",
            f"![Total Jobs](https://img.shields.io/badge/Total_Jobs-{len(current_jobs)}-brightgreen?style=flat&logo=briefcase)",
            f"![Companies](https://img.shields.io/badge/Companies-{total_companies}-blue?style=flat&logo=building)",
            f"![{top_category[:15]}](https://img.shields.io/badge/{top_badge}-{top_count}-red?style=flat&logo=star)",
            "",
            board.get("tagline") or "",
            "",
            "</div>",
            "",
            f'<p align="center">{rendered["description_line1"]}</p>',
            "",
        ]
        if rendered.get("description_line2"):
            parts += [f'<p align="center">{rendered["description_line2"]}</p>', ""]
        parts += [
            f"> [!{board['note_type']}]",
            f"> {board['note_text']}",
            "",
            "---",
            "",
            f"## {board.get('jobs_section_header') or 'Fresh Software Jobs 2026'}",
            "",
            f'<img src="images/{prefix}-listings.png" alt="Fresh job listings.">',
            "",
            self.generate_job_table(current_jobs),
            "",
        ]
        if features.get("internships") and internship_data:
            parts += [self.generate_internship_section(internship_data), ""]
        if features.get("more_resources"):
            parts += [
                "---",
                "",
                "## More Resources",
                "",
                "- Openings are US-based and refreshed automatically.",
                "- Open an issue with a job URL to add or update a listing.",
                "",
            ]
        if archived_jobs:
            parts += [self.generate_archived_section(archived_jobs, stats)]
        parts += [
            '<div align="center">',
            "",
            f"**🎯 {len(current_jobs)} current opportunities from {total_companies} companies**",
            "",
            "*Not affiliated with any companies listed. All applications redirect to official career pages.*",
            "",
            "---",
            "",
            f"**Last Updated**: {now:%B} {now.day}, {now.year}",
            "",
            "</div>",
            "",
        ]
        return "\n".join(parts)

    def update_readme(
        self,
        current_jobs: list[JobListing],
        archived_jobs: Optional[list[JobListing]] = None,
        internship_data: Optional[dict] = None,
    ) -> Path:
        """Render and atomically write README.md. Write errors are logged and re-raised."""
        archived_jobs = archived_jobs or []
        logger.info("Generating README content", context={"current": len(current_jobs), "archived": len(archived_jobs)})
        content = self.generate_readme(current_jobs, archived_jobs, internship_data)
        try:
            atomic_write_text(self.readme_path, content)
        except OSError as e:
            logger.error(f"Error updating README: {e}", context={"path": str(self.readme_path)})
            raise
        logger.info(f"README.md updated at {self.readme_path}")
        return self.readme_path
