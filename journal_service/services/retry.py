"""
Retry policy for outbound inference calls.

The hosted inference API answers 429 while throttling and 503 while a model
is loading, so both are retried a bounded number of times with a growing
pause. Everything else (4xx) fails immediately.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

import httpx

logger = logging.getLogger("Journal.Retry")


def is_retryable_status(status_code: int) -> bool:
    """429 (rate limited) and any 5xx are worth another attempt."""
    return status_code == 429 or status_code >= 500


def linear_backoff(unit: float) -> Callable[[int], float]:
    """Backoff of ``attempt * unit`` seconds: 1u after the first failure, 2u after the second."""
    def _backoff(attempt: int) -> float:
        return attempt * unit
    return _backoff


@dataclass(frozen=True)
class RetryPolicy:
    """
    How often and how patiently to retry a request.

    Attributes:
        max_attempts: Total attempts including the first one
        retry_on: Predicate deciding whether a status code is retryable
        backoff: Seconds to wait after the given (1-based) failed attempt
        retry_transport_errors: Also retry connection errors and timeouts
    """
    max_attempts: int = 3
    retry_on: Callable[[int], bool] = is_retryable_status
    backoff: Callable[[int], float] = field(default_factory=lambda: linear_backoff(1.0))
    retry_transport_errors: bool = True

    @classmethod
    def linear(cls, max_attempts: int = 3, unit: float = 1.0) -> "RetryPolicy":
        return cls(max_attempts=max_attempts, backoff=linear_backoff(unit))


class RetryExhaustedError(Exception):
    """The last attempt still failed; carries what the last attempt saw."""

    def __init__(self, message: str, status_code: Optional[int] = None, attempts: int = 0):
        super().__init__(message)
        self.status_code = status_code
        self.attempts = attempts


async def send_with_retry(
    send: Callable[[], Awaitable[httpx.Response]],
    policy: RetryPolicy,
    label: str = "request",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> httpx.Response:
    """
    Call ``send`` until it returns a 2xx response or the policy gives up.

    Returns:
        The first successful response.

    Raises:
        RetryExhaustedError: non-retryable status, or attempts used up.
    """
    for attempt in range(1, policy.max_attempts + 1):
        has_next = attempt < policy.max_attempts
        try:
            response = await send()
        except httpx.TransportError as exc:
            if policy.retry_transport_errors and has_next:
                wait = policy.backoff(attempt)
                logger.warning(
                    f"{label}: transport error on attempt {attempt}/{policy.max_attempts} "
                    f"({exc.__class__.__name__}), retrying in {wait:.1f}s"
                )
                await sleep(wait)
                continue
            raise RetryExhaustedError(
                f"{label}: {exc.__class__.__name__}: {exc}", attempts=attempt
            ) from exc

        if response.is_success:
            if attempt > 1:
                logger.info(f"{label}: succeeded on attempt {attempt}")
            return response

        if policy.retry_on(response.status_code) and has_next:
            wait = policy.backoff(attempt)
            logger.warning(
                f"{label}: status {response.status_code} on attempt "
                f"{attempt}/{policy.max_attempts}, retrying in {wait:.1f}s"
            )
            await sleep(wait)
            continue

        raise RetryExhaustedError(
            f"{label}: API error {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
            attempts=attempt,
        )

    # max_attempts < 1
    raise RetryExhaustedError(f"{label}: no attempts allowed", attempts=0)
