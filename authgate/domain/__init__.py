# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Domain layer for the authgate service."""

from .exceptions import InvariantViolation, InvariantViolationError
from .users.entities import (
    Account,
    AccountState,
    AccountStats,
    AuthenticatedAccount,
    AuthResult,
    IssuedToken,
    LoginAttempt,
    NewAccount,
    ProfileChanges,
    TokenClaims,
    normalize_email,
)

__all__ = [
    "Account",
    "AccountState",
    "AccountStats",
    "AuthResult",
    "AuthenticatedAccount",
    "InvariantViolation",
    "InvariantViolationError",
    "IssuedToken",
    "LoginAttempt",
    "NewAccount",
    "ProfileChanges",
    "TokenClaims",
    "normalize_email",
]
