"""
Core middleware package.

- Error handling with workflow error mapping and sanitization
- Structured logging with PII masking
- Role and ownership checks
"""

from core.middleware.error_handling import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    sanitize_error_message,
)

from core.middleware.logging import (
    StructuredLoggingMiddleware,
    setup_logging,
    get_logger,
)

from core.middleware.authorization import (
    ensure_role,
    ensure_owner,
    has_role,
)

__all__ = [
    # Error handling
    "ErrorHandlingMiddleware",
    "setup_error_handlers",
    "sanitize_error_message",
    # Logging
    "StructuredLoggingMiddleware",
    "setup_logging",
    "get_logger",
    # Authorization
    "ensure_role",
    "ensure_owner",
    "has_role",
]
