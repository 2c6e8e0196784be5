# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authgate.domain.users.entities import (
    AuthResult,
    NewAccount,
    TokenClaims,
    normalize_email,
)
from authgate.domain.users.exceptions import EmailAlreadyRegisteredError
from authgate.domain.users.repositories import (
    AccountRepository,
    PasswordHasher,
    TokenService,
)
from authgate.shared.logging import logger, mask_email
from authgate.shared.utils.clock import Clock, utc_now


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        accounts: AccountRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
        clock: Clock = utc_now,
    ) -> None:
        self._accounts = accounts
        self._tokens = tokens
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(self, email: str, password: str, display_name: str) -> AuthResult:
        email = normalize_email(email)

        # Fast path only; the unique constraint in the store is authoritative
        # and a racing insert surfaces as the same error from ``add``.
        if self._accounts.find_by_email(email) is not None:
            raise EmailAlreadyRegisteredError()

        hashed = self._password_hasher.hash(password)
        account = self._accounts.add(
            NewAccount(
                email=email,
                password_hash=hashed,
                display_name=display_name,
                created_at=self._clock(),
            )
        )
        token = self._tokens.issue(TokenClaims(account_id=account.id, email=account.email))

        logger.info(f"auth.register: ok account_id={account.id} email={mask_email(email)}")
        return AuthResult(account=account, token=token)
