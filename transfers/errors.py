"""
Typed errors for every failure the registry can report.

Domain errors (InvalidPayload, NotFound, DomainError) are recoverable by
the caller: resubmit with corrected input or after the state changes.
StorageFault is fatal: the operation is aborted and the fault is treated
as a defect, never shown as an ordinary user-facing failure.
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"


class TransferRegistryError(Exception):
    """Base exception for all registry errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the JSON error envelope returned by the API."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
            }
        }


class InvalidPayload(TransferRegistryError):
    """A required field is empty, or zero where a positive value is required."""

    def __init__(self, message: str):
        super().__init__(
            message,
            code="INVALID_PAYLOAD",
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.WARNING,
            http_status=400,
        )


class NotFound(TransferRegistryError):
    """An id lookup failed, or a list query found nothing."""

    def __init__(self, message: str):
        super().__init__(
            message,
            code="NOT_FOUND",
            category=ErrorCategory.RESOURCE_NOT_FOUND,
            severity=ErrorSeverity.WARNING,
            http_status=404,
        )


class DomainError(TransferRegistryError):
    """A business rule rejected the operation."""

    def __init__(self, message: str, code: str):
        super().__init__(
            message,
            code=code,
            category=ErrorCategory.CONFLICT,
            http_status=409,
        )


class StorageFault(TransferRegistryError):
    """Encoding, decoding or persistence failed. Not recoverable by the caller."""

    def __init__(self, message: str, code: str = "STORAGE_FAULT"):
        super().__init__(
            message,
            code=code,
            category=ErrorCategory.STORAGE,
            severity=ErrorSeverity.CRITICAL,
            http_status=500,
        )


# DomainError codes
SAME_CLUB_TRANSFER = "SAME_CLUB_TRANSFER"
PLAYER_UNAVAILABLE = "PLAYER_UNAVAILABLE"
BID_NOT_PENDING = "BID_NOT_PENDING"
CONTRACT_EXPIRED = "CONTRACT_EXPIRED"

# StorageFault codes
RECORD_TOO_LARGE = "RECORD_TOO_LARGE"
RECORD_CORRUPT = "RECORD_CORRUPT"
COUNTER_OVERFLOW = "COUNTER_OVERFLOW"
