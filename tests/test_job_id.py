import hashlib

import pytest

from job_id import (
    compute_enhanced_id,
    compute_fingerprint,
    compute_hash_fingerprint,
    compute_hash_id,
    compute_id,
    compute_minimal_fingerprint,
    compute_simple_id,
    migrate_old_id,
    normalize_company_name,
)
from models import JobListing


def _job(**kwargs) -> JobListing:
    base = {"title": "Software Engineer", "company": "Acme Inc.", "city": "Austin", "state": "TX"}
    base.update(kwargs)
    return JobListing(**base)


def test_url_id_uses_host_and_path():
    job = _job(title="Senior Engineer", apply_url="https://acme.com/jobs/42")
    job_id = compute_id(job)
    assert "acme-com" in job_id
    assert "jobs-42" in job_id
    assert job_id == "acme-com-jobs-42"


def test_url_id_ignores_query_string_and_trailing_slash():
    a = _job(apply_url="https://Acme.com/jobs/42/")
    b = _job(apply_url="https://acme.com/jobs/42?utm_source=x&ref=y")
    c = _job(apply_url="https://acme.com/jobs/42")
    assert compute_id(a) == compute_id(b) == compute_id(c)


def test_url_id_collapses_non_word_runs():
    job = _job(apply_url="https://careers.example.org/apply/--role__7/")
    assert compute_id(job) == "careers-example-org-apply-role__7"


def test_unparseable_url_falls_back_to_slug():
    job = _job(title="Data  Engineer", company="Widgets LLC", apply_url="not a url")
    assert compute_id(job) == "widgets-data-engineer-austin"
    assert compute_id(job) == compute_simple_id(job)


def test_missing_fields_never_raise():
    assert compute_id(JobListing()) == ""
    assert compute_fingerprint(JobListing()) == "::::"


def test_none_job_raises():
    with pytest.raises(ValueError):
        compute_id(None)
    with pytest.raises(ValueError):
        compute_fingerprint(None)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Acme Inc.", "acme"),
        ("Acme, Inc.", "acme"),
        ("Widgets LLC", "widgets"),
        ("Globex Corporation", "globex"),
        ("Initech Ltd", "initech"),
        ("Hooli GmbH", "hooli"),
        ("Vandelay Company", "vandelay"),
        ("", ""),
    ],
)
def test_normalize_company_name(raw, expected):
    assert normalize_company_name(raw) == expected


def test_fingerprint_strips_seniority_and_version_tokens():
    senior = _job(title="Senior Software Engineer")
    leveled = _job(title="Software Engineer II")
    assert compute_fingerprint(senior) == compute_fingerprint(leveled)
    assert compute_id(senior) != compute_id(leveled)


def test_fingerprint_shape_and_trailing_clause():
    job = _job(title="Backend Engineer - Payments", city="New York, NY", state="")
    assert compute_fingerprint(job) == "acme::backend engineer::new york"


@pytest.mark.parametrize("title", ["Software Engineer - Senior", "Software Engineer - II", "Software Engineer -"])
def test_fingerprint_drops_trailing_level_clause(title):
    assert compute_fingerprint(_job(title=title)) == compute_fingerprint(_job(title="Software Engineer"))


def test_minimal_fingerprint_keeps_seniority():
    senior = _job(title="Senior Software Engineer")
    plain = _job(title="Software Engineer")
    assert compute_minimal_fingerprint(senior) != compute_minimal_fingerprint(plain)


def test_enhanced_id_folds_title_variants():
    a = _job(title="Sr. Software Engineer II", company="Acme Technologies")
    b = _job(title="Senior Software Engineer 2", company="Acme")
    assert compute_enhanced_id(a) == compute_enhanced_id(b)
    assert compute_id(a, enhanced=True) == compute_enhanced_id(a)


def test_hash_fingerprint_is_full_sha256():
    job = _job(experience_level="Entry-Level", employment_type="Full-time")
    expected = hashlib.sha256("acme inc.|software engineer|austin|entry-level|full-time".encode()).hexdigest()
    assert compute_hash_fingerprint(job) == expected


def test_hash_id_is_eight_hex_chars_and_stable():
    job = _job()
    first = compute_hash_id(job)
    assert len(first) == 8
    assert int(first, 16) >= 0
    assert compute_hash_id(_job()) == first
    assert compute_hash_id(_job(city="Boston")) != first


def test_migrate_old_id():
    assert migrate_old_id("--acme//software engineer--") == "acme-software-engineer"
    assert migrate_old_id(None) == ""
