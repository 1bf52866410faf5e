"""Retry policies for notification delivery, keyed by event type."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff.

    ``max_attempts`` counts the first attempt, so a policy with
    ``max_attempts=3`` retries at most twice.
    """

    max_attempts: int
    backoff_seconds: int
    backoff_factor: float = 2.0
    max_backoff_seconds: int = 3600

    def countdown(self, retries: int) -> int:
        """Seconds to wait before retry number ``retries + 1``."""
        delay = self.backoff_seconds * (self.backoff_factor ** max(retries, 0))
        return int(min(delay, self.max_backoff_seconds))

    def exhausted(self, retries: int) -> bool:
        return retries + 1 >= self.max_attempts


DEFAULT_RETRY_POLICY = RetryPolicy(max_attempts=5, backoff_seconds=10)

RETRY_POLICIES: dict[str, RetryPolicy] = {
    'booking_created': RetryPolicy(max_attempts=5, backoff_seconds=10),
    'booking_approved': RetryPolicy(max_attempts=5, backoff_seconds=10),
    'booking_rejected': RetryPolicy(max_attempts=5, backoff_seconds=10),
    'booking_counter_offered': RetryPolicy(max_attempts=5, backoff_seconds=10),
    'booking_modified': RetryPolicy(max_attempts=5, backoff_seconds=10),
    'booking_cancelled': RetryPolicy(max_attempts=5, backoff_seconds=10),
    'booking_reminder': RetryPolicy(max_attempts=3, backoff_seconds=60, max_backoff_seconds=900),
    'new_message': RetryPolicy(max_attempts=3, backoff_seconds=5),
}


def policy_for(event_type: str) -> RetryPolicy:
    return RETRY_POLICIES.get(event_type, DEFAULT_RETRY_POLICY)
