# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    """Base application exception carrying structured metadata."""

    code: str
    status: HTTPStatus
    message: str = ""
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    """Business outcome; subclasses declare ``code``, ``status`` and ``message``."""

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        resolved_message = message or cast(str, getattr(self, "message", ""))
        super().__init__(
            code=resolved_code,
            status=resolved_status,
            message=resolved_message,
            context=context,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "internal_error",
        *,
        message: str = "Internal server error",
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, message=message, context=context)


class StorageError(InfrastructureError):
    """Raised when the backing store fails; never carries driver details."""


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        message: str = "Validation failed",
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            context=context,
        )


def field_validation_error(field: str, error_type: str, message: str) -> ValidationError:
    return ValidationError(
        message=message,
        context={
            "fields": [field],
            "errors": [{"field": field, "type": error_type, "message": message}],
        },
    )


__all__ = [
    "AppError",
    "DomainError",
    "InfrastructureError",
    "StorageError",
    "ValidationError",
    "field_validation_error",
]
