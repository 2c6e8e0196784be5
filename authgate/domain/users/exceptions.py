# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from authgate.shared.errors.base import DomainError


class EmailAlreadyRegisteredError(DomainError):
    code = "conflict"
    status = HTTPStatus.CONFLICT
    message = "An account with this email already exists"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Email or password is incorrect"


class AccountLockedError(DomainError):
    code = "account_locked"
    status = HTTPStatus.LOCKED
    message = "Account is temporarily locked due to too many failed attempts"

    def __init__(self, lockout_remaining: float = 0) -> None:
        super().__init__(
            context={"lockout_remaining_seconds": round(max(lockout_remaining, 0.0), 1)}
        )


class AccountDeactivatedError(DomainError):
    code = "account_deactivated"
    status = HTTPStatus.UNAUTHORIZED
    message = "This account has been deactivated"


class RateLimitedError(DomainError):
    code = "rate_limited"
    status = HTTPStatus.TOO_MANY_REQUESTS
    message = "Too many login attempts. Please wait before trying again."

    def __init__(self, retry_after: int) -> None:
        super().__init__(context={"retry_after": retry_after})
        self.retry_after = retry_after


class TokenMissingError(DomainError):
    code = "token_required"
    status = HTTPStatus.UNAUTHORIZED
    message = "Please provide a valid authentication token"


class TokenExpiredError(DomainError):
    code = "token_expired"
    status = HTTPStatus.UNAUTHORIZED
    message = "Your session has expired. Please login again."


class TokenInvalidError(DomainError):
    code = "token_invalid"
    status = HTTPStatus.UNAUTHORIZED
    message = "The provided token is invalid."


class TokenRejectedError(DomainError):
    """Signed and unexpired, but the claims cannot be used."""

    code = "token_rejected"
    status = HTTPStatus.FORBIDDEN
    message = "Unable to verify your authentication token."


class AccountNotFoundError(DomainError):
    code = "not_found"
    status = HTTPStatus.NOT_FOUND
    message = "User not found"


__all__ = [
    "AccountDeactivatedError",
    "AccountLockedError",
    "AccountNotFoundError",
    "EmailAlreadyRegisteredError",
    "InvalidCredentialsError",
    "RateLimitedError",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenMissingError",
    "TokenRejectedError",
]
