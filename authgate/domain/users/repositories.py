# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from .entities import (
    Account,
    AccountStats,
    IssuedToken,
    LoginAttempt,
    NewAccount,
    ProfileChanges,
    TokenClaims,
)


class AccountRepository(Protocol):
    def find_by_email(self, email: str) -> Account | None: ...
    def find_by_id(self, account_id: int) -> Account | None: ...
    def add(self, account: NewAccount) -> Account: ...
    def update_login_outcome(
        self,
        account_id: int,
        *,
        failed_attempts: int,
        locked_until: datetime | None,
        last_login_at: datetime | None,
    ) -> None: ...
    def update_profile(
        self, account_id: int, changes: ProfileChanges, *, updated_at: datetime
    ) -> bool: ...
    def deactivate(self, account_id: int, *, updated_at: datetime) -> bool: ...
    def count_stats(self, *, recent_since: datetime) -> AccountStats: ...


class LoginAttemptRepository(Protocol):
    def append(self, attempt: LoginAttempt) -> None: ...
    def count_recent_failures(
        self, email: str, ip_address: str, *, since: datetime
    ) -> int: ...
    def history_for_email(self, email: str, *, limit: int) -> list[LoginAttempt]: ...


class PasswordHasher(Protocol):
    dummy_hash: str  # digest of no real password, checked when an account is unknown

    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenService(Protocol):
    def issue(self, claims: TokenClaims, ttl: timedelta | None = None) -> IssuedToken: ...
    def verify(self, token: str) -> TokenClaims: ...
