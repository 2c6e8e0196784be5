# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authgate.domain.users.exceptions import AccountNotFoundError
from authgate.domain.users.repositories import AccountRepository
from authgate.shared.logging import logger
from authgate.shared.utils.clock import Clock, utc_now


class DeactivateUserUseCase:
    def __init__(self, *, accounts: AccountRepository, clock: Clock = utc_now) -> None:
        self._accounts = accounts
        self._clock = clock

    def execute(self, account_id: int) -> None:
        # Soft delete: the row and its login history stay.
        if not self._accounts.deactivate(account_id, updated_at=self._clock()):
            raise AccountNotFoundError()
        logger.info(f"profile.deactivate: ok account_id={account_id}")


__all__ = ["DeactivateUserUseCase"]
