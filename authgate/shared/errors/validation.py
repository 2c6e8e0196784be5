# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError
from .validation_types import ValidationErrorType


def _field_label(field_path: str) -> str:
    return field_path.replace("_", " ").capitalize()


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Flatten pydantic errors into ``{"fields": [...], "errors": [...]}``."""
    errors_list = []
    fields_set = set()

    for error in exc.errors(include_url=False, include_input=False):
        field_path = ".".join(str(part) for part in error.get("loc", ()) if part is not None)
        if field_path:
            fields_set.add(field_path)

        error_type = error.get("type", "value_error")
        message = error.get("msg", "")
        if error_type == "missing":
            # Missing and empty fields read the same to API clients.
            error_type = ValidationErrorType.MISSING.value
            message = f"{_field_label(field_path or 'value')} is required"

        error_entry: dict[str, Any] = {
            "field": field_path or "unknown",
            "type": error_type,
            "message": message,
        }
        ctx = error.get("ctx")
        if ctx:
            error_entry["ctx"] = {key: str(value) for key, value in ctx.items()}

        errors_list.append(error_entry)

    return {
        "fields": sorted(fields_set),
        "errors": errors_list,
    }


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    context = format_pydantic_errors(exc)
    errors = context["errors"]
    message = errors[0]["message"] if len(errors) == 1 else "Validation failed"
    raise ValidationError(message=message, context=context) from exc


__all__ = [
    "format_pydantic_errors",
    "raise_validation_error",
]
