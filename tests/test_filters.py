from datetime import timedelta

from filters import SeniorFilter, filter_senior_jobs, filter_stale_jobs, filter_us_jobs, is_senior_job, split_stale_jobs
from locations import LocationRules
from models import JobListing


def test_senior_keywords_without_entry_keywords():
    assert is_senior_job(JobListing(title="Staff Engineer")) is True
    assert is_senior_job(JobListing(title="Engineering Manager")) is True
    assert is_senior_job(JobListing(title="Software Engineer")) is False


def test_entry_keyword_rescues_senior_keyword():
    job = JobListing(title="Software Engineer", description="Join our lead team as a new grad")
    assert is_senior_job(job) is False


def test_jsearch_jobs_are_trusted_unless_disabled():
    job = JobListing(title="Senior Engineer", source="jsearch")
    assert is_senior_job(job) is False
    assert is_senior_job(job, SeniorFilter(trust_jsearch=False)) is True


def test_custom_keywords():
    strict = SeniorFilter(senior_keywords=["ii"], entry_keywords=[])
    assert strict.is_senior(JobListing(title="engineer ii")) is True


def test_stage_filters(now):
    jobs = [
        JobListing(title="Engineer", country="Canada"),
        JobListing(title="Senior Engineer", state="CA"),
        JobListing(title="Engineer", state="NY", posted_at=(now - timedelta(days=20)).isoformat()),
        JobListing(title="Engineer", state="WA", posted_at="2d"),
        JobListing(title="Engineer"),
    ]
    us = filter_us_jobs(jobs)
    assert len(us) == 4
    assert len(filter_us_jobs(jobs, LocationRules(unknown_is_us=False))) == 3

    non_senior = filter_senior_jobs(us)
    assert [job.state for job in non_senior] == ["NY", "WA", ""]

    current, stale = split_stale_jobs(non_senior, 14, now=now)
    assert [job.state for job in current] == ["WA", ""]
    assert [job.state for job in stale] == ["NY"]
    assert filter_stale_jobs(non_senior, 14, now=now) == current
