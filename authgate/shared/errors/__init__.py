from .base import (
    AppError,
    DomainError,
    InfrastructureError,
    StorageError,
    ValidationError,
    field_validation_error,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "InfrastructureError",
    "StorageError",
    "ValidationError",
    "field_validation_error",
    "handle_app_error",
    "register_error_handler",
]
