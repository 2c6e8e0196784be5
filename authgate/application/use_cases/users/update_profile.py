# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from authgate.domain.users.entities import ProfileChanges
from authgate.domain.users.exceptions import AccountNotFoundError, InvalidCredentialsError
from authgate.domain.users.repositories import AccountRepository, PasswordHasher
from authgate.shared.errors.base import field_validation_error
from authgate.shared.errors.validation_types import ValidationErrorType
from authgate.shared.logging import logger
from authgate.shared.utils.clock import Clock, utc_now


class UpdateProfileUseCase:
    """Change the display name and/or the password of an account.

    A password change requires the current password. Failure counter and
    lockout are left alone.
    """

    def __init__(
        self,
        *,
        accounts: AccountRepository,
        password_hasher: PasswordHasher,
        clock: Clock = utc_now,
    ) -> None:
        self._accounts = accounts
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(
        self,
        account_id: int,
        *,
        display_name: str | None = None,
        current_password: str | None = None,
        new_password: str | None = None,
    ) -> dict[str, str]:
        account = self._accounts.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError()

        new_hash: str | None = None
        if new_password:
            if not current_password:
                raise field_validation_error(
                    "current_password",
                    ValidationErrorType.CURRENT_PASSWORD_REQUIRED,
                    "Current password is required to change password",
                )
            if not self._password_hasher.verify(current_password, account.password_hash):
                logger.info(f"profile.update: wrong current password account_id={account_id}")
                raise InvalidCredentialsError("Current password is incorrect")
            new_hash = self._password_hasher.hash(new_password)

        changes = ProfileChanges(display_name=display_name or None, password_hash=new_hash)
        if not self._accounts.update_profile(account_id, changes, updated_at=self._clock()):
            raise AccountNotFoundError()

        updated: dict[str, str] = {}
        if changes.display_name:
            updated["display_name"] = changes.display_name
        if new_hash:
            updated["password"] = "changed"

        logger.info(f"profile.update: ok account_id={account_id} fields={sorted(updated)}")
        return updated
