# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import ClassVar

from authgate.domain.users.repositories import LoginAttemptRepository
from authgate.shared.errors.base import StorageError
from authgate.shared.logging import logger, mask_email
from authgate.shared.utils.clock import Clock, utc_now


@dataclass(slots=True, frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after: int = 0


class LoginRateLimiter:
    """Gate in front of login, driven by failed records in the attempt ledger.

    Failures are counted per (email, origin) pair over a trailing window;
    successes are never counted and never reset the window. The limiter only
    reads the ledger.
    """

    MAX_FAILURES: ClassVar[int] = 5
    WINDOW: ClassVar[timedelta] = timedelta(minutes=15)
    RETRY_AFTER: ClassVar[int] = 900

    def __init__(
        self,
        attempts: LoginAttemptRepository,
        *,
        max_failures: int | None = None,
        window: timedelta | None = None,
        retry_after: int | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._attempts = attempts
        self._max_failures = max_failures or self.MAX_FAILURES
        self._window = window or self.WINDOW
        self._retry_after = retry_after or self.RETRY_AFTER
        self._clock = clock

    def check(self, email: str | None, ip_address: str) -> RateLimitDecision:
        if not email:
            return RateLimitDecision(allowed=True)

        since = self._clock() - self._window
        try:
            failures = self._attempts.count_recent_failures(email, ip_address, since=since)
        except StorageError:
            logger.warning(
                f"rate_limit: ledger unavailable, allowing email={mask_email(email)} ip={ip_address}"
            )
            return RateLimitDecision(allowed=True)

        if failures >= self._max_failures:
            logger.warning(
                f"rate_limit: DENIED email={mask_email(email)} ip={ip_address} "
                f"failures={failures} window={int(self._window.total_seconds())}s"
            )
            return RateLimitDecision(allowed=False, retry_after=self._retry_after)

        return RateLimitDecision(allowed=True)


__all__ = ["LoginRateLimiter", "RateLimitDecision"]
