"""Retry helper for operations that may hit transient site failures."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple, Type, TypeVar

from trendsnap.errors import BlockedPageError

__all__ = ["RetryPolicy"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryPolicy:
    """Call an operation up to ``max_attempts`` times.

    Only exceptions matching ``retry_on`` are retried. The wait before attempt
    ``n + 1`` is ``delay * backoff ** (n - 1)`` seconds, so ``backoff=1`` keeps
    a fixed delay. Other exceptions, and the last retryable one, propagate.
    """

    max_attempts: int = 3
    delay: float = 2.0
    backoff: float = 1.0
    retry_on: Tuple[Type[BaseException], ...] = (BlockedPageError,)
    sleep: Optional[Callable[[float], None]] = field(default=None, repr=False)

    def is_retryable(self, exc: BaseException) -> bool:
        return isinstance(exc, self.retry_on)

    def wait_for(self, attempt: int) -> float:
        return self.delay * (self.backoff ** (attempt - 1))

    def call(self, operation: Callable[..., T], *args, **kwargs) -> T:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        for attempt in range(1, self.max_attempts + 1):
            try:
                return operation(*args, **kwargs)
            except Exception as exc:
                if not self.is_retryable(exc) or attempt == self.max_attempts:
                    raise
                wait = self.wait_for(attempt)
                logger.warning(
                    "Attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt,
                    self.max_attempts,
                    exc,
                    wait,
                )
                (self.sleep or time.sleep)(wait)
        raise AssertionError("unreachable")  # pragma: no cover
