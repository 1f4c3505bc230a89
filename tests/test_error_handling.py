import httpx
import pytest

from error_handling import RetryConfig, is_retryable, log_and_reraise, validate_params, with_retry

NO_WAIT = RetryConfig(max_attempts=3, initial_delay=0, max_delay=0)


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://example.com")
    return httpx.HTTPStatusError("boom", request=request, response=httpx.Response(code, request=request))


def test_is_retryable():
    assert is_retryable(httpx.ConnectTimeout("timeout"))
    assert is_retryable(_status_error(503))
    assert is_retryable(_status_error(429))
    assert not is_retryable(_status_error(404))
    assert not is_retryable(ValueError("bad"))


def test_retries_then_succeeds():
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise httpx.ConnectError("refused")
        return "ok"

    assert with_retry(flaky, "flaky", NO_WAIT) == "ok"
    assert len(calls) == 3


def test_gives_up_after_max_attempts():
    calls = []

    def always_down():
        calls.append(1)
        raise _status_error(502)

    with pytest.raises(httpx.HTTPStatusError):
        with_retry(always_down, "down", NO_WAIT)
    assert len(calls) == 3


def test_non_retryable_error_propagates_immediately():
    calls = []

    def broken():
        calls.append(1)
        raise KeyError("data")

    with pytest.raises(KeyError):
        with_retry(broken, "broken", NO_WAIT)
    assert len(calls) == 1


def test_backoff_delays_are_capped():
    sleeps = []
    config = RetryConfig(max_attempts=4, initial_delay=1.0, max_delay=3.0, multiplier=2.0)

    def always_timeout():
        raise httpx.ReadTimeout("slow")

    with pytest.raises(httpx.ReadTimeout):
        with_retry(always_timeout, "slow", config, sleep=sleeps.append)
    assert sleeps == [1.0, 2.0, 3.0]


def test_retry_config_from_mapping():
    config = RetryConfig.from_mapping({"max_attempts": 5, "retryable_status_codes": [500]})
    assert config.max_attempts == 5
    assert config.initial_delay == 1.0
    assert config.retryable_status_codes == (500,)
    assert RetryConfig.from_mapping(None) == RetryConfig()


def test_log_and_reraise():
    assert log_and_reraise(lambda: 3, "three") == 3
    with pytest.raises(ZeroDivisionError):
        log_and_reraise(lambda: 1 / 0, "divide", job_id="x")


def test_validate_params():
    assert validate_params({"query": "swe", "key": "k"}, ["query", "key"], "search") is True
    with pytest.raises(ValueError, match="Missing required parameters: key, pages"):
        validate_params({"query": "swe", "key": ""}, ["query", "key", "pages"], "search")
