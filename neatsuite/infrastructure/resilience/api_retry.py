"""Executing async API calls with automatic retries.

Implements exponential backoff for transient failures such as 5xx
responses, network errors and timeouts. Whether a given failure is worth
retrying is decided by an optional predicate supplied by the caller.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_DELAY_MS = 1000
DEFAULT_MAX_DELAY_MS = 30000
DEFAULT_BACKOFF_FACTOR = 2

RetryPredicate = Callable[[BaseException], bool]
RetryObserver = Callable[[int, BaseException], Any]
Sleeper = Callable[[float], Awaitable[Any]]


def compute_delay_ms(attempt: int, initial_delay_ms: float, max_delay_ms: float, factor: float) -> float:
    """Backoff delay after the failed attempt with zero-based index ``attempt``."""
    return min(initial_delay_ms * (factor ** attempt), max_delay_ms)


async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_delay_ms: float = DEFAULT_INITIAL_DELAY_MS,
    max_delay_ms: float = DEFAULT_MAX_DELAY_MS,
    factor: float = DEFAULT_BACKOFF_FACTOR,
    should_retry: Optional[RetryPredicate] = None,
    on_retry: Optional[RetryObserver] = None,
    sleep: Sleeper = asyncio.sleep,
) -> T:
    """Runs ``func`` until it succeeds or the retry budget is spent.

    Makes at most ``max_retries + 1`` attempts. Between attempts it calls
    ``on_retry(attempt_number, error)`` (attempt numbers start at 1) and then
    sleeps ``min(initial_delay_ms * factor ** attempt, max_delay_ms)``.

    Args:
        func: Zero-argument coroutine function performing one attempt.
        max_retries: Retries after the first attempt; 0 means a single attempt.
        initial_delay_ms: Delay before the first retry.
        max_delay_ms: Upper bound for any delay.
        factor: Multiplier applied to the delay after each failure.
        should_retry: Returns False for failures that must not be retried.
        on_retry: Called before each backoff sleep.
        sleep: Coroutine function taking seconds; ``asyncio.sleep`` by default.

    Returns:
        The result of the first successful attempt.

    Raises:
        Exception: The failure of the last attempt, or the first failure the
            predicate rejected, unchanged.
    """
    if max_retries < 0:
        raise ValueError(f"max_retries must be >= 0, got {max_retries}")

    for attempt in range(max_retries + 1):
        try:
            return await func()
        except Exception as e:
            if attempt >= max_retries:
                logger.debug(f"Max retries ({max_retries}) reached. Last error: {e}")
                raise
            if should_retry is not None and not should_retry(e):
                logger.debug(f"Non-retryable error on attempt {attempt + 1}: {type(e).__name__}")
                raise

            if on_retry is not None:
                on_retry(attempt + 1, e)

            delay_ms = compute_delay_ms(attempt, initial_delay_ms, max_delay_ms, factor)
            logger.debug(
                f"Retryable error on attempt {attempt + 1}/{max_retries + 1}: {type(e).__name__}. "
                f"Waiting {delay_ms:.0f}ms..."
            )
            await sleep(delay_ms / 1000)


class RetryController:
    """Holds a backoff policy and applies it to async operations.

    Constructed once per client so the policy is injected rather than looked
    up at call time.
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_delay_ms: float = DEFAULT_INITIAL_DELAY_MS,
        max_delay_ms: float = DEFAULT_MAX_DELAY_MS,
        factor: float = DEFAULT_BACKOFF_FACTOR,
        should_retry: Optional[RetryPredicate] = None,
        on_retry: Optional[RetryObserver] = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        """Initializes the RetryController.

        Args:
            max_retries: Default maximum number of retry attempts.
            initial_delay_ms: Delay before the first retry.
            max_delay_ms: Upper bound on the delay.
            factor: Multiplier for the backoff delay (e.g., 2 for exponential).
            should_retry: Default retry predicate.
            on_retry: Default per-attempt observer.
            sleep: Coroutine function used to wait between attempts.
        """
        self.max_retries = max_retries
        self.initial_delay_ms = initial_delay_ms
        self.max_delay_ms = max_delay_ms
        self.factor = factor
        self.should_retry = should_retry
        self.on_retry = on_retry
        self._sleep = sleep

        logger.debug(
            f"RetryController initialized: max_retries={max_retries}, "
            f"initial_delay={initial_delay_ms}ms, max_delay={max_delay_ms}ms, factor={factor}"
        )

    async def execute(
        self,
        func: Callable[[], Awaitable[T]],
        max_retries: Optional[int] = None,
        should_retry: Optional[RetryPredicate] = None,
        on_retry: Optional[RetryObserver] = None,
    ) -> T:
        """Executes ``func`` with this controller's policy.

        Per-call arguments override the controller defaults when given.
        """
        return await retry_with_backoff(
            func,
            max_retries=self.max_retries if max_retries is None else max_retries,
            initial_delay_ms=self.initial_delay_ms,
            max_delay_ms=self.max_delay_ms,
            factor=self.factor,
            should_retry=should_retry or self.should_retry,
            on_retry=on_retry or self.on_retry,
            sleep=self._sleep,
        )
