from datetime import timedelta
from pathlib import Path

import pytest

from companies import Company, CompanyDirectory
from models import JobListing
from readme_generator import (
    EMPTY_TABLE,
    ReadmeGenerator,
    format_location,
    load_job_categories,
    status_indicator,
    truncate_role,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent

BOARD = {
    "version": 1,
    "repo_prefix": "sej",
    "heading_image_alt": "Heading",
    "title": "New Grad Jobs",
    "tagline": "Fresh roles.",
    "description_line1": "{current_jobs}+ openings from {total_companies}+ companies",
    "description_line2": "",
    "note_type": "TIP",
    "note_text": "Apply early.",
    "default_category": "Software Engineering",
    "jobs_section_header": "Fresh Jobs",
    "features": {"internships": True, "more_resources": False},
}


@pytest.fixture
def generator(tmp_path, now):
    categories = load_job_categories(PROJECT_ROOT / "job_categories.json")
    companies = CompanyDirectory([Company(name="Acme", emoji="🚀", career_url="https://acme.com/careers")])
    return ReadmeGenerator(BOARD, categories, companies, tmp_path, now=now)


def _job(n: int, company: str = "Acme", **kwargs) -> JobListing:
    base = {
        "title": "Software Engineer",
        "company": company,
        "city": "Austin",
        "state": "TX",
        "apply_url": f"https://{company.lower()}.com/jobs/{n}",
    }
    base.update(kwargs)
    return JobListing(**base)


def test_format_location():
    assert format_location("", "") == "Remote"
    assert format_location("", "CA") == "CA"
    assert format_location("Austin", "") == "Austin"
    assert format_location("remote", "US") == "Remote 🏠"
    assert format_location("Austin", "TX") == "Austin, TX"


def test_truncate_role():
    assert truncate_role("x" * 35) == "x" * 35
    assert truncate_role("x" * 36) == "x" * 32 + "..."


def test_status_indicator():
    assert status_indicator(JobListing(description="US citizen only, remote ok")) == " 🇺🇸 🏠"
    assert status_indicator(JobListing(description="On-site")) == ""


def test_empty_table(generator):
    assert generator.generate_job_table([]) == EMPTY_TABLE
    assert generator.generate_job_table([_job(1, title="Senior Engineer")]) == EMPTY_TABLE


def test_small_companies_share_one_table(generator, now):
    jobs = [
        _job(1, posted_at=(now - timedelta(days=3)).isoformat()),
        _job(2, company="Globex", title="Backend Engineer", posted_at=(now - timedelta(hours=5)).isoformat()),
    ]
    table = generator.generate_job_table(jobs)

    assert "💻 <strong>Software Engineering</strong> (1 positions)" in table
    assert "<strong>Backend Development</strong> (1 positions)" in table
    assert "| 🚀 **Acme** | Software Engineer | Austin, TX | 3d |" in table
    assert "| 🏢 **Globex** | Backend Engineer | Austin, TX | 5h |" in table
    assert "[<img src=\"images/apply.png\" width=\"75\" alt=\"Apply\">](https://acme.com/jobs/1)" in table


def test_big_company_gets_own_table_sorted_newest_first(generator, now):
    jobs = [_job(n, posted_at=(now - timedelta(days=n)).isoformat()) for n in range(1, 13)]
    table = generator.generate_job_table(jobs)

    assert "#### 🚀 **Acme** (12 positions)" in table
    assert "| Company | Role |" not in table
    assert table.index("(https://acme.com/jobs/1)") < table.index("(https://acme.com/jobs/12)")


def test_compact_ages_sort_with_absolute_dates(generator, now):
    older = _job(1, posted_at=(now - timedelta(days=10)).isoformat())
    newer = _job(2, posted_at="1d")
    assert generator._sort_newest_first([older, newer]) == [newer, older]


def test_huge_company_is_collapsed(generator):
    table = generator.generate_job_table([_job(n) for n in range(51)])
    assert "<summary><h4>🚀 <strong>Acme</strong> (51 positions)</h4></summary>" in table


def test_apply_link_falls_back_to_career_url(generator):
    table = generator.generate_job_table([_job(1, apply_url=None)])
    assert "(https://acme.com/careers)" in table


def test_compute_stats(generator):
    stats = generator.compute_stats([_job(1), _job(2, company="Globex", title="iOS Engineer", city="", state="")])
    assert stats["total_by_company"] == {"Acme": 1, "Globex": 1}
    assert stats["by_category"] == {"Software Engineering": 1, "Mobile Development": 1}
    assert stats["by_location"] == {"Austin, TX": 1, "Remote": 1}
    assert stats["by_level"] == {"Entry-Level": 2}


def test_generate_readme(generator):
    readme = generator.generate_readme(
        [_job(1), _job(2, company="Globex"), _job(3, title="Senior Engineer")],
        archived_jobs=[_job(4, title="Data Analyst")],
        internship_data={
            "company_programs": [{"company": "Acme", "program": "Summer Intern", "url": "https://acme.com/i"}],
            "sources": [],
        },
    )

    assert '<img src="images/sej-heading.png" alt="Heading">' in readme
    assert "# New Grad Jobs" in readme
    assert "2+ openings from 2+ companies" in readme
    assert "> [!TIP]" in readme
    assert "## Fresh Jobs" in readme
    assert "## Internships 2026" in readme
    assert "| 🚀 **Acme** | Summer Intern |" in readme
    assert "## More Resources" not in readme
    assert "ARCHIVED JOBS</strong> - 1 Older Positions (7+ days old)" in readme
    assert "Top Category**: Data Science & Analytics" in readme
    assert "**🎯 2 current opportunities from 2 companies**" in readme
    assert "**Last Updated**: March 1, 2026" in readme
    assert "Senior Engineer" not in readme


def test_update_readme_writes_file(generator, tmp_path):
    path = generator.update_readme([_job(1)], [])
    assert path == tmp_path / "README.md"
    assert "Software Engineer" in path.read_text(encoding="utf-8")


def test_current_jobs_past_readme_window_are_archived(generator, now):
    recent = _job(1, posted_at=(now - timedelta(days=2)).isoformat())
    aged = _job(2, company="Globex", title="Backend Engineer", posted_at=(now - timedelta(days=9)).isoformat())
    readme = generator.generate_readme([recent, aged])

    assert "**🎯 1 current opportunities from 1 companies**" in readme
    assert "ARCHIVED JOBS</strong> - 1 Older Positions (7+ days old)" in readme
    archive = readme[readme.index("ARCHIVED JOBS"):]
    assert "**Globex**" in archive
    assert "**Acme**" not in archive


def test_readme_window_is_configurable(tmp_path, now):
    categories = load_job_categories(PROJECT_ROOT / "job_categories.json")
    generator = ReadmeGenerator(BOARD, categories, repo_root=tmp_path, max_age_days=14, now=now)
    readme = generator.generate_readme([_job(1, posted_at=(now - timedelta(days=9)).isoformat())])
    assert "ARCHIVED JOBS" not in readme
    assert "**🎯 1 current opportunities from 1 companies**" in readme
