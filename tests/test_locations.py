import pytest

from locations import DEFAULT_RULES, LocationRules, is_us_job
from models import JobListing


@pytest.mark.parametrize(
    "fields,expected",
    [
        ({"country": "Canada"}, False),
        ({"city": "Remote"}, True),
        ({}, True),
        ({"country": "US"}, True),
        ({"country": "United States", "city": "Toronto"}, True),
        ({"state": "TX", "city": "Austin"}, True),
        ({"state": "dc"}, True),
        ({"city": "London", "state": ""}, False),
        ({"city": "Remote", "state": "Berlin"}, False),
        ({"country": "Germany", "state": "CA"}, False),
        ({"city": "Indianapolis", "state": "Indiana"}, True),
    ],
)
def test_structured_fields(fields, expected):
    assert is_us_job(JobListing(**fields)) is expected


def test_state_rule_runs_before_city_rule():
    # Paris, Texas
    assert is_us_job(JobListing(city="Paris", state="TX")) is True


def test_free_text_location():
    assert is_us_job(JobListing(location="Austin, TX")) is True
    assert is_us_job(JobListing(location="Bangalore, Karnataka, India")) is False
    assert is_us_job(JobListing(location="Remote, USA")) is True
    assert is_us_job(JobListing(location="Toronto, ON")) is False


def test_unknown_policy_is_configurable():
    strict = LocationRules(unknown_is_us=False)
    assert strict.is_us(JobListing()) is False
    assert strict.is_us(JobListing(city="Somewhere")) is False
    assert strict.is_us(JobListing(state="NY")) is True


@pytest.mark.parametrize("text", ["USA", "United States", "California", "Remote", "New York"])
def test_strict_policy_accepts_single_segment_us_text(text):
    strict = LocationRules(unknown_is_us=False)
    assert strict.is_us(JobListing(location=text)) is True


@pytest.mark.parametrize("text", ["Somewhere", "Germany", "Toronto"])
def test_strict_policy_rejects_unknown_and_foreign_text(text):
    assert LocationRules(unknown_is_us=False).is_us(JobListing(location=text)) is False


def test_module_default_rules_are_built_at_import():
    assert DEFAULT_RULES.unknown_is_us is True
    assert is_us_job(JobListing(country="Canada"), DEFAULT_RULES) is False


def test_word_boundaries():
    rules = LocationRules()
    assert rules.is_non_us_location("India") is True
    assert rules.is_non_us_location("Indiana") is False
    assert rules.is_non_us_location("Lima, Ohio") is True
    assert rules.is_non_us_location("Limassol") is False


def test_is_us_location_text():
    rules = LocationRules()
    assert rules.is_us_location("Seattle, WA") is True
    assert rules.is_us_location("Remote") is True
    assert rules.is_us_location("Remote - Canada") is False
    assert rules.is_us_location("") is False
