from __future__ import annotations

import re

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from authgate.shared.errors.validation_types import ValidationErrorType

EMAIL_MIN_LENGTH = 5
EMAIL_MAX_LENGTH = 254
DISPLAY_NAME_RE = re.compile(r"^[A-Za-z\s]+$")
PASSWORD_SPECIALS = "@$!%*?&"


def sanitize(value: object) -> object:
    """Strip angle brackets and surrounding whitespace from string input."""
    if isinstance(value, str):
        return value.replace("<", "").replace(">", "").strip()
    return value


def validate_email(value: object, handler: ValidatorFunctionWrapHandler) -> str:
    """Length bounds first, then ``EmailStr`` syntax; the result is lower-cased."""
    value = sanitize(value)
    if isinstance(value, str) and len(value) < EMAIL_MIN_LENGTH:
        raise PydanticCustomError(
            "string_too_short",
            "String should have at least {min_length} characters",
            {"min_length": EMAIL_MIN_LENGTH},
        )
    if isinstance(value, str) and len(value) > EMAIL_MAX_LENGTH:
        raise PydanticCustomError(
            "string_too_long",
            "String should have at most {max_length} characters",
            {"max_length": EMAIL_MAX_LENGTH},
        )
    try:
        email = handler(value)
    except PydanticValidationError as exc:
        raise PydanticCustomError(
            ValidationErrorType.EMAIL_INVALID,
            "Please provide a valid email address",
            {},
        ) from exc
    return email.lower()


def validate_display_name(value: str) -> str:
    if not DISPLAY_NAME_RE.match(value):
        raise PydanticCustomError(
            ValidationErrorType.DISPLAY_NAME_INVALID_CHARS,
            "Display name can only contain letters and spaces",
            {"pattern": DISPLAY_NAME_RE.pattern},
        )
    return value


def validate_password_strength(value: str) -> str:
    if len(value) < 8:
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_TOO_SHORT,
            "Password must be at least 8 characters long",
            {"min_length": 8},
        )

    if len(value) > 128:
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_TOO_LONG,
            "Password must not exceed 128 characters",
            {"max_length": 128},
        )

    if not re.search(r"[a-z]", value):
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_NO_LOWERCASE,
            "Password must contain at least one lowercase letter",
            {},
        )

    if not re.search(r"[A-Z]", value):
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_NO_UPPERCASE,
            "Password must contain at least one uppercase letter",
            {},
        )

    if not re.search(r"\d", value):
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_NO_DIGIT,
            "Password must contain at least one digit",
            {},
        )

    if not any(char in PASSWORD_SPECIALS for char in value):
        raise PydanticCustomError(
            ValidationErrorType.PASSWORD_NO_SPECIAL,
            "Password must contain at least one special character (@$!%*?&)",
            {"allowed": PASSWORD_SPECIALS},
        )

    return value


class _SanitizedModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("*", mode="before")
    @classmethod
    def _sanitize(cls, value: object) -> object:
        return sanitize(value)


class RegisterRequestDTO(_SanitizedModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=256)
    display_name: str = Field(min_length=2, max_length=100)

    @field_validator("email", mode="wrap")
    @classmethod
    def _check_email(cls, value: object, handler: ValidatorFunctionWrapHandler) -> str:
        return validate_email(value, handler)

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        return validate_password_strength(value)

    @field_validator("display_name")
    @classmethod
    def _check_display_name(cls, value: str) -> str:
        return validate_display_name(value)


class LoginRequestDTO(_SanitizedModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)  # No strength check on login

    @field_validator("email", mode="wrap")
    @classmethod
    def _check_email(cls, value: object, handler: ValidatorFunctionWrapHandler) -> str:
        return validate_email(value, handler)


class UserDTO(BaseModel):
    id: int
    email: str
    display_name: str


class AuthSuccessDTO(BaseModel):
    message: str
    user: UserDTO
    token: str


class TokenRefreshDTO(BaseModel):
    message: str = "Token refreshed successfully"
    token: str
