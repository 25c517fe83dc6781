from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from pos_sync.config import Settings


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Backoff schedule for failed pushes.

    ``delay_ms(n)`` is ``min(max_delay_ms, base_delay_ms * multiplier ** n)``
    where ``n`` is the retry count *after* the failure being scheduled, so the
    first failure waits ``base * multiplier``.
    """

    base_delay_ms: int = 5_000
    multiplier: int = 5
    max_delay_ms: int = 1_800_000
    auth_cooldown_ms: int = 600_000
    max_attempts: int | None = None

    @classmethod
    def from_settings(cls, s: Settings) -> RetryPolicy:
        return cls(
            base_delay_ms=s.SYNC_BASE_DELAY_MS,
            multiplier=s.SYNC_BACKOFF_MULTIPLIER,
            max_delay_ms=s.SYNC_MAX_DELAY_MS,
            auth_cooldown_ms=s.SYNC_AUTH_COOLDOWN_MS,
            max_attempts=s.SYNC_MAX_ATTEMPTS,
        )

    def delay_ms(self, retry_count: int) -> int:
        delay = self.base_delay_ms
        for _ in range(retry_count):
            delay *= self.multiplier
            if delay >= self.max_delay_ms:
                return self.max_delay_ms
        return min(delay, self.max_delay_ms)

    def next_retry_at(self, now: datetime, retry_count: int) -> datetime:
        return now + timedelta(milliseconds=self.delay_ms(retry_count))

    def auth_retry_at(self, now: datetime) -> datetime:
        return now + timedelta(milliseconds=self.auth_cooldown_ms)

    def exhausted(self, retry_count: int) -> bool:
        return self.max_attempts is not None and retry_count >= self.max_attempts
