"""
RetryPolicy - retries rate-limited reads with exponential backoff.

Only GET is retried, and only on HTTP 429. Delay before retry n is
base_delay * 2**n (0.5s then 1.0s with the defaults). Writes and every
other failure pass straight through.
"""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from loguru import logger

from storefront.services.errors import RateLimitError

T = TypeVar("T")

RETRYABLE_METHODS = frozenset({"GET"})


class RetryPolicy:
    """
    Bounded 429 retry for idempotent requests.

    Usage:
        policy = RetryPolicy()
        data = await policy.run("GET", lambda: transport.request(...), label="/service")
    """

    def __init__(
        self,
        max_retries: int = 2,
        base_delay: float = 0.25,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._sleep = sleep

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before retry number `attempt` (1-based)."""
        return self.base_delay * (2**attempt)

    def should_retry(self, method: str, error: Exception) -> bool:
        return method.upper() in RETRYABLE_METHODS and isinstance(error, RateLimitError)

    async def run(
        self,
        method: str,
        request_fn: Callable[[], Awaitable[T]],
        label: str = "",
    ) -> T:
        """
        Execute request_fn, retrying rate-limited GETs.

        Raises:
            RateLimitError: The last one, once retries are exhausted
        """
        attempt = 0
        while True:
            try:
                return await request_fn()
            except RateLimitError as e:
                if not self.should_retry(method, e) or attempt >= self.max_retries:
                    raise
                attempt += 1
                delay = self.delay_for(attempt)
                logger.warning(
                    f"Received 429 - retrying {method.upper()} {label} in "
                    f"{delay * 1000:.0f}ms (attempt {attempt})"
                )
                await self._sleep(delay)
