"""Rate-limited batch execution with exponential backoff.

Every network-calling component paces and retries through this module:
items run concurrently inside a batch, batches run one after another with a
minimum pause between them, and only rate-limit failures are retried.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar, cast

from coinscout.errors import RateLimitError

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]

_RATE_LIMIT_PATTERN = re.compile(r"rate.?limit|too many requests", re.IGNORECASE)
_DROPPED = object()


def _status_code(exc: BaseException) -> int | None:
    """Pull an HTTP status code off an exception, if it carries one."""
    status = getattr(exc, "status_code", None)
    if isinstance(status, int):
        return status
    response = getattr(exc, "response", None)
    status = getattr(response, "status_code", None)
    if isinstance(status, int):
        return status
    return None


def is_rate_limit_error(exc: BaseException) -> bool:
    """Return True if the failure signals rate limiting.

    Covers ``RateLimitError``, anything carrying HTTP status 429 (httpx and
    anthropic errors both expose it), and errors whose message mentions a
    rate limit.
    """
    if isinstance(exc, RateLimitError):
        return True
    if _status_code(exc) == 429:
        return True
    return bool(_RATE_LIMIT_PATTERN.search(str(exc)))


class RateLimitedBatchExecutor:
    """Run operations in paced batches, retrying rate-limited calls.

    Args:
        batch_size: Maximum operations in flight at once.
        min_delay: Minimum pause in seconds between consecutive batches.
        max_retries: Maximum retries per item after a rate-limit failure.
        base_backoff: First backoff delay in seconds.
        backoff_factor: Multiplier applied to the delay after each retry
            (2.0 doubles, 1.0 keeps a fixed delay).
        sleep: Awaitable used for every pause (defaults to ``asyncio.sleep``).
    """

    def __init__(
        self,
        *,
        batch_size: int = 5,
        min_delay: float = 1.0,
        max_retries: int = 4,
        base_backoff: float = 1.0,
        backoff_factor: float = 2.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if max_retries < 0:
            raise ValueError("max_retries must not be negative")
        self._batch_size = batch_size
        self._min_delay = min_delay
        self._max_retries = max_retries
        self._base_backoff = base_backoff
        self._backoff_factor = backoff_factor
        self._sleep = sleep

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def max_retries(self) -> int:
        return self._max_retries

    async def pause(self, seconds: float) -> None:
        """Cooperatively wait ``seconds`` through the configured sleep."""
        if seconds > 0:
            await self._sleep(seconds)

    async def call(self, operation: Callable[[], Awaitable[R]]) -> R:
        """Invoke ``operation``, retrying with backoff while it is rate limited.

        Raises:
            Exception: The last failure, when it is not a rate-limit signal or
                retries are exhausted.
        """
        attempt = 0
        delay = self._base_backoff
        while True:
            try:
                return await operation()
            except Exception as e:
                if not is_rate_limit_error(e) or attempt >= self._max_retries:
                    raise
                attempt += 1
                logger.info(
                    "Rate limited (attempt %d/%d), backing off %.2fs",
                    attempt,
                    self._max_retries,
                    delay,
                )
                await self._sleep(delay)
                delay *= self._backoff_factor

    async def run(
        self,
        items: Sequence[T],
        operation: Callable[[T], Awaitable[R]],
    ) -> list[R]:
        """Run ``operation`` over ``items`` and return the successful results.

        Items whose operation fails (after any rate-limit retries) are logged
        and dropped. Results within a batch may come back in any order
        relative to the input.
        """
        results: list[R] = []
        for start in range(0, len(items), self._batch_size):
            batch = items[start : start + self._batch_size]
            outcomes = await asyncio.gather(*(self._attempt(item, operation) for item in batch))
            results.extend(cast(R, o) for o in outcomes if o is not _DROPPED)

            if start + self._batch_size < len(items):
                await self.pause(self._min_delay)

        return results

    async def _attempt(self, item: T, operation: Callable[[T], Awaitable[R]]) -> object:
        try:
            return await self.call(lambda: operation(item))
        except Exception as e:
            logger.warning(f"Dropping item {item!r}. Error: {e}")
            return _DROPPED
