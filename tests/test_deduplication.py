from deduplication import enrich_job, filter_duplicates, is_duplicate, merge_jobs
from job_id import compute_fingerprint
from models import JobListing


def _job(n: int, **kwargs) -> JobListing:
    base = {
        "title": f"Engineer {chr(ord('a') + n % 26)}{n}",
        "company": "Acme",
        "city": "Austin",
        "state": "TX",
        "apply_url": f"https://acme.com/jobs/{n}",
        "id": f"acme-com-jobs-{n}",
    }
    base.update(kwargs)
    return JobListing(**base)


def test_merge_fresh_record_replaces_persisted():
    persisted = [_job(1, description="old"), _job(2)]
    fresh = [_job(1, description="new")]
    merged = merge_jobs(persisted, fresh)
    assert len(merged) == 2
    by_id = {job.id: job for job in merged}
    assert by_id["acme-com-jobs-1"].description == "new"


def test_merge_drops_records_without_id():
    merged = merge_jobs([_job(1), _job(2, id=None)], [_job(3, id="")])
    assert [job.id for job in merged] == ["acme-com-jobs-1"]


def test_merge_100_persisted_with_20_fresh():
    persisted = [_job(n) for n in range(100)]
    fresh = [_job(n, description="fresh") for n in range(95, 115)]
    merged = merge_jobs(persisted, fresh)

    assert len(merged) == 115
    by_id = {job.id: job for job in merged}
    for n in range(95, 100):
        assert by_id[f"acme-com-jobs-{n}"].description == "fresh"
    assert by_id["acme-com-jobs-0"].description == ""


def test_filter_duplicates_first_fingerprint_wins():
    a = JobListing(title="Senior Software Engineer", company="Acme", city="Austin", apply_url="https://acme.com/1")
    a_prime = JobListing(title="Software Engineer II", company="Acme", city="Austin", apply_url="https://acme.com/2")
    assert compute_fingerprint(a) == compute_fingerprint(a_prime)

    result = filter_duplicates([a, a_prime])
    assert result == [a]


def test_filter_duplicates_by_id_and_fills_fields():
    a = JobListing(title="Data Analyst", company="Globex", apply_url="https://globex.com/7")
    b = JobListing(title="Analytics Engineer", company="Globex", apply_url="https://globex.com/7/")
    c = JobListing(title="Designer", company="Globex")
    result = filter_duplicates([a, b, c])

    assert result == [a, c]
    assert a.id == "globex-com-7"
    assert a.fingerprint == "globex::data analyst::"
    assert c.id == "globex-designer"


def test_is_duplicate_by_id_then_fingerprint():
    existing = [_job(1, experience_level="Entry-Level")]

    by_id = is_duplicate(_job(1, title="Different"), existing)
    assert by_id.is_duplicate and by_id.reason.startswith("ID match")

    same_attrs = _job(1, id="other-source-1", apply_url=None, experience_level="Entry-Level")
    by_fingerprint = is_duplicate(same_attrs, existing)
    assert by_fingerprint.is_duplicate and by_fingerprint.reason.startswith("Fingerprint match")
    assert by_fingerprint.match is existing[0]

    assert not is_duplicate(_job(50), existing).is_duplicate


def test_is_duplicate_invalid_input():
    assert is_duplicate(None, []).reason == "Invalid input"
    assert is_duplicate(_job(1), None).is_duplicate is False


def test_enrich_job_returns_copy():
    job = JobListing(title="Engineer", company="Acme", apply_url="https://acme.com/x")
    enriched = enrich_job(job)
    assert enriched is not job
    assert job.id is None
    assert enriched.id == "acme-com-x"
    assert enriched.fingerprint == "acme::engineer::"
    assert enrich_job(None) is None
