from .base import AppError, DomainError, RateLimitedError, ValidationError
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "RateLimitedError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
