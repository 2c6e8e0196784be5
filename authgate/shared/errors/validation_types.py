# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import StrEnum


class ValidationErrorType(StrEnum):
    MISSING = "missing"
    EMAIL_INVALID = "email_invalid"
    DISPLAY_NAME_INVALID_CHARS = "display_name_invalid_chars"
    PASSWORD_TOO_SHORT = "password_too_short"
    PASSWORD_TOO_LONG = "password_too_long"
    PASSWORD_NO_UPPERCASE = "password_no_uppercase"
    PASSWORD_NO_LOWERCASE = "password_no_lowercase"
    PASSWORD_NO_DIGIT = "password_no_digit"
    PASSWORD_NO_SPECIAL = "password_no_special"
    CURRENT_PASSWORD_REQUIRED = "current_password_required"


__all__ = ["ValidationErrorType"]
