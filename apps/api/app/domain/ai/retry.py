from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from typing import Callable, TypeVar

from app.domain.ai.errors import RETRYABLE_UPSTREAM_ERRORS, UpstreamExhausted


logger = logging.getLogger(__name__)

T = TypeVar("T")


def linear_backoff(step_sec: float) -> Callable[[int], float]:
    """Attempt n waits (n - 1) * step_sec seconds; the first attempt never waits."""

    def _delay(attempt: int) -> float:
        return max(0, attempt - 1) * step_sec

    return _delay


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    backoff: Callable[[int], float] = field(default_factory=lambda: linear_backoff(2))
    sleep: Callable[[float], None] = time.sleep
    retry_on: tuple[type[BaseException], ...] = RETRYABLE_UPSTREAM_ERRORS

    def run(self, call: Callable[[int], T]) -> T:
        attempts = max(1, int(self.max_attempts))
        last_error: BaseException | None = None

        for attempt in range(1, attempts + 1):
            delay = self.backoff(attempt)
            if attempt > 1 and delay > 0:
                logger.info("retry attempt %d after %.1fs: %s", attempt, delay, last_error)
                self.sleep(delay)
            try:
                return call(attempt)
            except self.retry_on as exc:
                logger.warning("completion attempt %d/%d failed: %s", attempt, attempts, exc)
                last_error = exc

        raise UpstreamExhausted(attempts, last_error) from last_error
