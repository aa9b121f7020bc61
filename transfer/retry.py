"""Retry policy for chunk delivery."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RetryPolicy:
    """
    Decides whether a failed chunk upload is attempted again and how long to wait.

    The default policy retries forever without delay, so a chunk is delivered
    as soon as the API becomes reachable again. Bound it with max_attempts,
    or wrap the transfer in asyncio.wait_for.

    Attributes:
        max_attempts: Total attempts per chunk, None for unbounded
        initial_delay: Delay in seconds after the first failure (0 disables backoff)
        backoff_multiplier: Growth factor applied to the delay per failure
        max_delay: Upper bound for a single delay in seconds
    """
    max_attempts: Optional[int] = None
    initial_delay: float = 0.0
    backoff_multiplier: float = 2.0
    max_delay: float = 30.0

    def __post_init__(self):
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must not be negative")
        if self.backoff_multiplier < 1:
            raise ValueError("backoff_multiplier must be at least 1")

    def should_retry(self, attempt: int) -> bool:
        """
        Check whether another attempt is allowed after a failure.

        Args:
            attempt: Number of attempts made so far (1-based)

        Returns:
            True if the chunk should be sent again
        """
        return self.max_attempts is None or attempt < self.max_attempts

    def delay_for(self, attempt: int) -> float:
        """
        Delay before the next attempt.

        Args:
            attempt: Number of attempts made so far (1-based)

        Returns:
            Delay in seconds
        """
        if self.initial_delay <= 0:
            return 0.0
        return min(self.initial_delay * self.backoff_multiplier ** (attempt - 1), self.max_delay)
