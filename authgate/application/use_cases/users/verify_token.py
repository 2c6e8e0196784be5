# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authgate.domain.users.entities import AuthenticatedAccount
from authgate.domain.users.exceptions import TokenInvalidError
from authgate.domain.users.repositories import AccountRepository, TokenService
from authgate.shared.logging import logger


class VerifyTokenUseCase:
    """Reconstitute the caller's identity from a bearer token.

    Tokens are never revoked server-side, so the account is re-read on every
    call and a deleted or deactivated account invalidates its tokens.
    """

    def __init__(self, *, accounts: AccountRepository, tokens: TokenService) -> None:
        self._accounts = accounts
        self._tokens = tokens

    def execute(self, token: str) -> AuthenticatedAccount:
        claims = self._tokens.verify(token)

        account = self._accounts.find_by_id(claims.account_id)
        if account is None or not account.is_active:
            logger.info(f"auth.verify: account unavailable account_id={claims.account_id}")
            raise TokenInvalidError(
                "User account no longer exists or has been deactivated."
            )

        return AuthenticatedAccount(
            id=account.id, email=account.email, display_name=account.display_name
        )
