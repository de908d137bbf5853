"""API middleware for error handling and cross-cutting concerns."""

from interfaces.api.middleware.error_handler import (
    envelope_http_exception_handler,
    envelope_unhandled_exception_handler,
    envelope_validation_exception_handler,
    handle_use_case_errors,
)

__all__ = [
    "envelope_http_exception_handler",
    "envelope_unhandled_exception_handler",
    "envelope_validation_exception_handler",
    "handle_use_case_errors",
]
