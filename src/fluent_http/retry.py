"""Bounded retry loop for async operations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from .errors import NoData, StatusCodeError
from .http.protocols import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Decides whether to retry after a failure: (error, attempt_index) -> bool
ShouldRetry = Callable[[Exception, int], bool]


def default_should_retry(error: Exception) -> bool:
    """
    Default retry decision.

    Retries server-side failures (HTTP 5xx) and transient connectivity
    problems: timeouts, lost connections, unreachable hosts and failed DNS
    lookups. Client errors (HTTP 4xx) and everything else are not retried.
    """
    if isinstance(error, StatusCodeError):
        return error.code >= 500
    if isinstance(error, TransportError):
        return error.is_transient
    return False


@dataclass(frozen=True)
class RetryPolicy:
    """
    How many times to retry, how long to wait, and whether to retry at all.

    Attributes:
        retry_count: Retries after the first attempt (negative values clamp to 0)
        delay: Seconds to sleep between attempts (negative values clamp to 0)
        should_retry: Optional decision function; default_should_retry is
            used when it is None
    """

    retry_count: int = 0
    delay: float = 0.0
    should_retry: Optional[ShouldRetry] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "retry_count", max(0, self.retry_count))
        object.__setattr__(self, "delay", max(0.0, self.delay))

    @property
    def max_attempts(self) -> int:
        return self.retry_count + 1

    def decide(self, error: Exception, attempt: int) -> bool:
        if self.should_retry is not None:
            return self.should_retry(error, attempt)
        return default_should_retry(error)


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
) -> T:
    """
    Run operation until it succeeds or the policy gives up.

    Attempts run strictly one after another. After a failed attempt that
    is not the last one, the policy decides whether to continue; if it
    declines, the error is raised at once. Otherwise the loop sleeps for
    the policy delay before the next attempt. The error of the final
    attempt is re-raised unchanged.

    Cancelling the awaiting task abandons the loop, including during the
    sleep between attempts.

    Args:
        operation: Zero-argument coroutine function performing one attempt
        policy: Retry count, delay and decision function

    Returns:
        The result of the first successful attempt
    """
    max_attempts = policy.max_attempts
    last_error: Optional[Exception] = None

    for attempt in range(max_attempts):
        try:
            return await operation()
        except Exception as e:
            last_error = e
            if attempt == max_attempts - 1:
                if max_attempts > 1:
                    logger.error(f"Giving up after {max_attempts} attempts: {e}")
                raise

            if not policy.decide(e, attempt):
                logger.debug(f"Not retrying after attempt {attempt + 1}: {e}")
                raise

            logger.warning(
                f"Attempt {attempt + 1}/{max_attempts} failed: {e}, "
                f"retrying in {policy.delay:.1f}s"
            )
            await asyncio.sleep(policy.delay)

    # Unreachable while max_attempts >= 1
    if last_error:
        raise last_error
    raise NoData()
