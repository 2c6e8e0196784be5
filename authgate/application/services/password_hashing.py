"""Password hashing strategies."""

from __future__ import annotations

import secrets

from werkzeug.security import check_password_hash, generate_password_hash

from authgate.domain.users.repositories import PasswordHasher
from authgate.shared.errors.base import InfrastructureError
from authgate.shared.logging import logger

DEFAULT_METHOD = "scrypt:32768:8:1"


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted one-way hashing; the work factor is part of ``method``.

    ``method`` is any Werkzeug method string, for example ``scrypt:32768:8:1``
    or ``pbkdf2:sha256:600000``. Digests embed their own method and salt, so
    changing the configured method does not invalidate stored hashes.
    """

    def __init__(self, method: str = DEFAULT_METHOD, salt_length: int = 16) -> None:
        self._method = method
        self._salt_length = salt_length
        self.dummy_hash = self.hash(secrets.token_urlsafe(16))

    def hash(self, password: str) -> str:
        try:
            return str(
                generate_password_hash(
                    password, method=self._method, salt_length=self._salt_length
                )
            )
        except MemoryError as exc:
            logger.critical("password_hashing: out of memory while hashing")
            raise InfrastructureError() from exc

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError):
            # Unknown method or malformed parameters in the stored digest.
            logger.warning("password_hashing: malformed digest rejected")
            return False
