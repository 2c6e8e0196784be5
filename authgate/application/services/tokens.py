# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed, self-contained session tokens."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

import jwt

from authgate.domain.users.entities import IssuedToken, TokenClaims
from authgate.domain.users.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
    TokenRejectedError,
)
from authgate.domain.users.repositories import TokenService
from authgate.shared.utils.clock import Clock, utc_now

ALGORITHM = "HS256"


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


class JwtTokenService(TokenService):
    """HS256 JWTs carrying ``id``, ``email``, ``iat`` and ``exp``.

    The signing key is fixed for the lifetime of the instance. There is no
    revocation list: a token stays valid until its ``exp``.

    Expiry is checked against the injected clock rather than by PyJWT, so a
    token is reported as expired only after its signature has been checked.
    """

    def __init__(
        self,
        secret: str,
        *,
        default_ttl: timedelta = timedelta(hours=24),
        clock: Clock = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self._default_ttl = default_ttl
        self._clock = clock

    def issue(self, claims: TokenClaims, ttl: timedelta | None = None) -> IssuedToken:
        issued_at = self._clock()
        expires_at = issued_at + (ttl if ttl is not None else self._default_ttl)
        payload = {
            "id": claims.account_id,
            "email": claims.email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=ALGORITHM)
        return IssuedToken(token=token, expires_at=expires_at)

    def verify(self, token: str) -> TokenClaims:
        payload = self._decode(token)

        exp = payload.get("exp")
        if not _is_timestamp(exp) or not _is_timestamp(payload.get("iat")):
            raise TokenRejectedError()
        if exp <= self._clock().timestamp():
            raise TokenExpiredError()

        account_id = payload.get("id")
        email = payload.get("email")
        if not isinstance(account_id, int) or isinstance(account_id, bool):
            raise TokenRejectedError()
        if not isinstance(email, str) or not email:
            raise TokenRejectedError()

        return TokenClaims(account_id=account_id, email=email)

    def _decode(self, token: str) -> dict[str, Any]:
        if not token:
            raise TokenInvalidError()
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False, "verify_iat": False, "verify_nbf": False},
            )
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError() from exc

