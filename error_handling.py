"""
error_handling.py — Retry and error-reporting helpers for calls to external services.

Only network-style failures are retried: httpx transport errors (timeouts, refused or
reset connections) and HTTP responses with a retryable status code. Anything else
propagates on the first failure.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, TypeVar

import httpx
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from monitoring import get_logger

logger = get_logger("error_handling")

T = TypeVar("T")

RETRYABLE_STATUS_CODES = (408, 429, 500, 502, 503, 504)


@dataclass
class RetryConfig:
    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 30.0
    multiplier: float = 2.0
    retryable_status_codes: tuple[int, ...] = field(default=RETRYABLE_STATUS_CODES)

    @classmethod
    def from_mapping(cls, data: Optional[dict]) -> "RetryConfig":
        data = data or {}
        defaults = cls()
        return cls(
            max_attempts=int(data.get("max_attempts", defaults.max_attempts)),
            initial_delay=float(data.get("initial_delay", defaults.initial_delay)),
            max_delay=float(data.get("max_delay", defaults.max_delay)),
            multiplier=float(data.get("multiplier", defaults.multiplier)),
            retryable_status_codes=tuple(data.get("retryable_status_codes", defaults.retryable_status_codes)),
        )


def is_retryable(exc: BaseException, status_codes: Iterable[int] = RETRYABLE_STATUS_CODES) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in tuple(status_codes)
    return False


def with_retry(
    fn: Callable[[], T],
    operation: str,
    config: Optional[RetryConfig] = None,
    sleep: Optional[Callable[[float], None]] = None,
    **context,
) -> T:
    """
    Call `fn` until it succeeds, raises a non-retryable error, or runs out of attempts.
    Delays grow as initial_delay * multiplier**n, capped at max_delay. The last error
    is re-raised unchanged.
    """
    config = config or RetryConfig()

    def _log_retry(retry_state):
        error = retry_state.outcome.exception()
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"Retry {retry_state.attempt_number + 1}/{config.max_attempts} for {operation} after {wait:.1f}s",
            context={**context, "error": str(error)},
        )

    retrying_kwargs = dict(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(
            multiplier=config.initial_delay, exp_base=config.multiplier, max=config.max_delay
        ),
        retry=retry_if_exception(lambda e: is_retryable(e, config.retryable_status_codes)),
        before_sleep=_log_retry,
        reraise=True,
    )
    if sleep is not None:
        retrying_kwargs["sleep"] = sleep

    try:
        for attempt in Retrying(**retrying_kwargs):
            with attempt:
                result = fn()
    except Exception as e:
        logger.error(
            f"{operation} failed: {type(e).__name__}: {e}",
            context={**context, "retryable": is_retryable(e, config.retryable_status_codes)},
        )
        raise

    return result


def log_and_reraise(fn: Callable[[], T], operation: str, **context) -> T:
    """Run `fn`; on failure log the error with its context and re-raise it."""
    try:
        return fn()
    except Exception as e:
        logger.error(f"Error in {operation}: {type(e).__name__}: {e}", context=context)
        raise


def validate_params(params: dict[str, Any], required: Iterable[str], operation: str) -> bool:
    """Raise ValueError naming every required parameter that is missing or empty."""
    missing = [name for name in required if not params.get(name)]
    if missing:
        logger.error(f"Validation failed for {operation}", context={"missing": missing})
        raise ValueError(f"Missing required parameters: {', '.join(missing)}")
    return True
