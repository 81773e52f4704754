"""Error Hierarchy — typed, categorized exceptions for all Logbook failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; store errors (503) are fatal to the request
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with LogbookError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ConflictError is raised by IdentityStore.create but never escapes get_or_create
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_name: str | None = None
    category: str | None = None
    page: int | None = None
    debug_info: dict[str, Any] | None = None


class LogbookError(Exception):
    """Base exception for all Logbook errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_name": self.context.user_name,
                    "category": self.context.category,
                    "page": self.context.page,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidArgumentError(LogbookError):
    """Paging or filter input outside the accepted range."""
    def __init__(self, message: str, argument: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_ARGUMENT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.argument = argument


class ResourceNotFoundError(LogbookError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class ConflictError(LogbookError):
    """Unique constraint would be violated (duplicate user name)."""
    def __init__(self, resource_type: str, key: str, context: ErrorContext | None = None):
        super().__init__(
            f"{resource_type} '{key}' already exists",
            "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.key = key


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StoreUnavailableError(LogbookError):
    """Underlying persistence failed. Fatal to the request, never retried."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
