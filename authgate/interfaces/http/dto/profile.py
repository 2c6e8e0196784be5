from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .auth import _SanitizedModel, validate_display_name, validate_password_strength


class ProfileUpdateRequestDTO(_SanitizedModel):
    display_name: str | None = Field(None, min_length=2, max_length=100)
    current_password: str | None = Field(None, min_length=1, max_length=128)
    new_password: str | None = None

    @field_validator("display_name")
    @classmethod
    def _check_display_name(cls, value: str | None) -> str | None:
        return validate_display_name(value) if value is not None else None

    @field_validator("new_password")
    @classmethod
    def _check_new_password(cls, value: str | None) -> str | None:
        return validate_password_strength(value) if value is not None else None


class LoginHistoryQueryDTO(BaseModel):
    limit: int = Field(20, ge=1, le=100)


class ProfileDTO(BaseModel):
    id: int
    email: str
    display_name: str
    created_at: datetime
    last_login_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class LoginAttemptDTO(BaseModel):
    ip_address: str
    user_agent: str | None
    success: bool
    attempted_at: datetime

    model_config = ConfigDict(from_attributes=True)
