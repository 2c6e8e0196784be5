# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authgate.domain.users.entities import LoginAttempt, normalize_email
from authgate.domain.users.repositories import LoginAttemptRepository

DEFAULT_LIMIT = 20


class GetLoginHistoryUseCase:
    def __init__(self, *, attempts: LoginAttemptRepository) -> None:
        self._attempts = attempts

    def execute(self, email: str, limit: int = DEFAULT_LIMIT) -> list[LoginAttempt]:
        """Newest first."""
        return self._attempts.history_for_email(normalize_email(email), limit=max(limit, 1))


__all__ = ["GetLoginHistoryUseCase"]
