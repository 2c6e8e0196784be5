# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta

from authgate.domain.users.entities import AccountStats
from authgate.domain.users.repositories import AccountRepository
from authgate.shared.utils.clock import Clock, utc_now

RECENT_LOGIN_WINDOW = timedelta(days=7)


class GetAccountStatsUseCase:
    def __init__(self, *, accounts: AccountRepository, clock: Clock = utc_now) -> None:
        self._accounts = accounts
        self._clock = clock

    def execute(self) -> AccountStats:
        return self._accounts.count_stats(recent_since=self._clock() - RECENT_LOGIN_WINDOW)


__all__ = ["GetAccountStatsUseCase"]
