# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import ClassVar

from authgate.application.services.rate_limiter import LoginRateLimiter
from authgate.domain.users.entities import (
    Account,
    AccountState,
    AuthResult,
    LoginAttempt,
    TokenClaims,
    normalize_email,
)
from authgate.domain.users.exceptions import (
    AccountDeactivatedError,
    AccountLockedError,
    InvalidCredentialsError,
    RateLimitedError,
)
from authgate.domain.users.repositories import (
    AccountRepository,
    LoginAttemptRepository,
    PasswordHasher,
    TokenService,
)
from authgate.shared.logging import logger, mask_email
from authgate.shared.utils.clock import Clock, utc_now


class LoginUserUseCase:
    """Evaluate one login attempt.

    Order of checks: rate limit, account lookup, lockout, deactivation,
    password. Unknown email and wrong password raise the same error. Locked
    and deactivated accounts are rejected without consulting the password
    and without writing an attempt record.

    The failure counter is read and written back without an atomic
    increment; two concurrent failures may count as one.
    """

    MAX_FAILED_ATTEMPTS: ClassVar[int] = 5
    LOCKOUT_DURATION: ClassVar[timedelta] = timedelta(minutes=15)

    def __init__(
        self,
        *,
        accounts: AccountRepository,
        attempts: LoginAttemptRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
        rate_limiter: LoginRateLimiter,
        max_failed_attempts: int | None = None,
        lockout_duration: timedelta | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._accounts = accounts
        self._attempts = attempts
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._rate_limiter = rate_limiter
        self._max_failed_attempts = max_failed_attempts or self.MAX_FAILED_ATTEMPTS
        self._lockout_duration = lockout_duration or self.LOCKOUT_DURATION
        self._clock = clock

    def execute(
        self,
        email: str,
        password: str,
        ip_address: str,
        user_agent: str | None = None,
    ) -> AuthResult:
        email = normalize_email(email)

        decision = self._rate_limiter.check(email, ip_address)
        if not decision.allowed:
            raise RateLimitedError(retry_after=decision.retry_after)

        account = self._accounts.find_by_email(email)
        now = self._clock()

        if account is None:
            # Same hashing cost as a wrong password on a real account.
            self._password_hasher.verify(password, self._password_hasher.dummy_hash)
            self._record(email, ip_address, user_agent, success=False, now=now)
            logger.info(f"auth.login: unknown email={mask_email(email)} ip={ip_address}")
            raise InvalidCredentialsError()

        state = account.state(now)
        if state is AccountState.LOCKED:
            logger.info(f"auth.login: rejected locked account_id={account.id}")
            raise AccountLockedError(lockout_remaining=account.lockout_remaining(now))
        if state is AccountState.DEACTIVATED:
            logger.info(f"auth.login: rejected deactivated account_id={account.id}")
            raise AccountDeactivatedError()

        if not self._password_hasher.verify(password, account.password_hash):
            self._register_failure(account, now)
            self._record(email, ip_address, user_agent, success=False, now=now)
            raise InvalidCredentialsError()

        self._accounts.update_login_outcome(
            account.id, failed_attempts=0, locked_until=None, last_login_at=now
        )
        self._record(email, ip_address, user_agent, success=True, now=now)

        token = self._tokens.issue(TokenClaims(account_id=account.id, email=account.email))
        logger.info(f"auth.login: ok account_id={account.id} ip={ip_address}")
        refreshed = replace(account, failed_login_attempts=0, locked_until=None, last_login_at=now)
        return AuthResult(account=refreshed, token=token)

    def _register_failure(self, account: Account, now: datetime) -> None:
        failed = account.failed_login_attempts + 1
        locked_until: datetime | None = None
        if failed >= self._max_failed_attempts:
            locked_until = now + self._lockout_duration
            logger.warning(
                f"auth.login: ACCOUNT LOCKED account_id={account.id} "
                f"failed_attempts={failed} "
                f"lockout_duration={int(self._lockout_duration.total_seconds())}s"
            )
        self._accounts.update_login_outcome(
            account.id,
            failed_attempts=failed,
            locked_until=locked_until,
            last_login_at=account.last_login_at,
        )
        logger.info(f"auth.login: bad password account_id={account.id} failed_attempts={failed}")

    def _record(
        self,
        email: str,
        ip_address: str,
        user_agent: str | None,
        *,
        success: bool,
        now: datetime,
    ) -> None:
        self._attempts.append(
            LoginAttempt(
                email=email,
                ip_address=ip_address,
                user_agent=user_agent,
                success=success,
                attempted_at=now,
            )
        )
