# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from authgate.domain.exceptions import InvariantViolation


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountState(StrEnum):
    ACTIVE = "active"
    LOCKED = "locked"
    DEACTIVATED = "deactivated"


@dataclass(slots=True, frozen=True)
class Account:

    id: int
    email: str
    password_hash: str
    display_name: str
    created_at: datetime
    updated_at: datetime
    last_login_at: datetime | None = None
    failed_login_attempts: int = 0
    locked_until: datetime | None = None
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.failed_login_attempts < 0:
            raise InvariantViolation(
                "must be non-negative", field="failed_login_attempts"
            )

    def is_locked(self, now: datetime) -> bool:
        # Lockout expires lazily: a past timestamp is simply ignored.
        return self.locked_until is not None and self.locked_until > now

    def lockout_remaining(self, now: datetime) -> float:
        if self.locked_until is None or not self.is_locked(now):
            return 0.0
        return (self.locked_until - now).total_seconds()

    def state(self, now: datetime) -> AccountState:
        if self.is_locked(now):
            return AccountState.LOCKED
        if not self.is_active:
            return AccountState.DEACTIVATED
        return AccountState.ACTIVE


@dataclass(slots=True, frozen=True)
class NewAccount:

    email: str
    password_hash: str
    display_name: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class ProfileChanges:

    display_name: str | None = None
    password_hash: str | None = None


@dataclass(slots=True, frozen=True)
class LoginAttempt:
    """One login evaluation. Keyed by email, never by account id."""

    email: str
    ip_address: str
    success: bool
    attempted_at: datetime
    user_agent: str | None = None


@dataclass(slots=True, frozen=True)
class AccountStats:

    total: int
    active: int
    recent_logins_7d: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total_users": self.total,
            "active_users": self.active,
            "recent_logins": self.recent_logins_7d,
        }


@dataclass(slots=True, frozen=True)
class TokenClaims:

    account_id: int
    email: str


@dataclass(slots=True, frozen=True)
class IssuedToken:

    token: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class AuthenticatedAccount:

    id: int
    email: str
    display_name: str


@dataclass(slots=True, frozen=True)
class AuthResult:

    account: Account
    token: IssuedToken

    def to_dict(self) -> dict[str, object]:
        return {
            "user": {
                "id": self.account.id,
                "email": self.account.email,
                "display_name": self.account.display_name,
            },
            "token": self.token.token,
        }
