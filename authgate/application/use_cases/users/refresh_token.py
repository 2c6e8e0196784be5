"""Use-case for re-issuing a session token."""

from __future__ import annotations

from authgate.domain.users.entities import IssuedToken
from authgate.domain.users.repositories import TokenService


class RefreshTokenUseCase:
    def __init__(self, *, tokens: TokenService) -> None:
        self._tokens = tokens

    def execute(self, token: str) -> IssuedToken:
        # Same claims, fresh expiry. Lockout and active status are not
        # re-checked here.
        claims = self._tokens.verify(token)
        return self._tokens.issue(claims)
