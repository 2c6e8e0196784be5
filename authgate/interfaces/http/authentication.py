# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

from flask import g, request

from authgate.application.use_cases.users.verify_token import VerifyTokenUseCase
from authgate.domain.users.entities import AuthenticatedAccount
from authgate.domain.users.exceptions import TokenMissingError
from authgate.shared.logging import logger
from authgate.shared.utils.http import bearer_token

F = TypeVar("F", bound=Callable[..., Any])


class TokenAuthenticator:
    """Builds the ``token_required`` decorator around the verify use case."""

    def __init__(self, verify_use_case: VerifyTokenUseCase) -> None:
        self._verify = verify_use_case

    def token_required(self, f: F) -> F:
        @wraps(f)
        def inner(*args, **kwargs):
            token = bearer_token()
            if not token:
                logger.warning(f"No bearer token on {request.method} {request.path}")
                raise TokenMissingError()

            g.account = self._verify.execute(token)
            g.token = token
            logger.debug(f"Auth OK: account={g.account.id} {request.method} {request.path}")
            return f(*args, **kwargs)

        return cast(F, inner)


def current_account() -> AuthenticatedAccount:
    return cast(AuthenticatedAccount, g.account)


def current_token() -> str:
    return cast(str, g.token)


__all__ = ["TokenAuthenticator", "current_account", "current_token"]
