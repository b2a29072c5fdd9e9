"""Error Hierarchy — typed, categorized exceptions for every rejected transition.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error is raised before any registry mutation (rejected call = unchanged state)
    - All domain errors are recoverable by the caller (different identity or id)
    - to_response() produces a JSON-safe envelope for any consumer

Design Decisions:
    - Single hierarchy with LedgerError base: callers catch one type for all rejections
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability. Every ledger rejection is caller-recoverable."""
    ERROR = "error"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    registry: str | None = None
    record_id: int | None = None
    caller: str | None = None
    debug_info: dict[str, Any] | None = None


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Convert to standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "registry": self.context.registry,
                    "record_id": self.context.record_id,
                    "caller": self.context.caller,
                },
            }
        }


# ─── Domain Errors ──────────────────────────────────────────────

class NotFoundError(LedgerError):
    """Operation referenced an identifier with no corresponding record."""
    def __init__(
        self, resource_type: str, resource_id: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class UnauthorizedError(LedgerError):
    """Caller identity failed the operation's authorization predicate."""
    def __init__(
        self, caller: str, required_role: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Not authorized: '{caller}' is not the {required_role}",
            "UNAUTHORIZED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context,
        )
        self.caller = caller
        self.required_role = required_role


class CapacityExceededError(LedgerError):
    """A bounded collection would exceed its fixed limit."""
    def __init__(self, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Maximum collaborators reached ({limit}/{limit})",
            "CAPACITY_EXCEEDED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context,
        )
        self.limit = limit


class UncertifiedAlgorithmError(LedgerError):
    """Certified mint requested for an algorithm that is not currently certified."""
    def __init__(self, algorithm_id: int, status: str, context: ErrorContext | None = None):
        super().__init__(
            f"Algorithm '{algorithm_id}' is not certified (status: {status})",
            "ALGORITHM_NOT_CERTIFIED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context,
        )
        self.algorithm_id = algorithm_id
        self.status = status


class FieldValidationError(LedgerError):
    """A transition argument has the wrong shape (e.g. a missing timestamp)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context,
        )
        self.field = field


class DuplicateRecordError(LedgerError):
    """Two records with the same id were handed to one registry."""
    def __init__(self, registry: str, record_id: object):
        super().__init__(
            f"Duplicate {registry} record id {record_id!r}",
            "DUPLICATE_RECORD", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ErrorContext(registry=registry),
        )
        self.record_id = record_id


class SnapshotError(LedgerError):
    """Snapshot payload failed validation on restore."""
    def __init__(self, message: str, registry: str, details: list | None = None):
        super().__init__(
            f"Invalid {registry} snapshot: {message}",
            "INVALID_SNAPSHOT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR,
            ErrorContext(registry=registry, debug_info={"details": details or []}),
        )
