"""
Error types for Pagemark

Centralized exception taxonomy:
- Record validation failures
- Persistence write and load failures
- OCR engine failures
- Capture session misuse

Lookups that find nothing return None instead of raising.
"""

from typing import Optional


class PagemarkError(Exception):
    """Base exception for Pagemark errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        detail: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.detail = detail
        super().__init__(message)


class RecordValidationError(PagemarkError):
    """A required field was empty when building a Book or Note."""

    def __init__(self, field: str, record: str):
        self.field = field
        self.record = record
        super().__init__(
            message=f"{record} {field} cannot be empty",
            code="VALIDATION_ERROR",
            detail=f"Provide a non-blank value for '{field}'",
        )


class PersistenceError(PagemarkError):
    """Writing to the key-value store failed."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(
            message=message,
            code="PERSISTENCE_ERROR",
            detail=detail,
        )


class PersistenceCorruptionError(PagemarkError):
    """A stored collection could not be deserialized."""

    def __init__(self, key: str, detail: Optional[str] = None):
        self.key = key
        super().__init__(
            message=f"Stored collection '{key}' is corrupt",
            code="PERSISTENCE_CORRUPTION",
            detail=detail,
        )


class OCREngineError(PagemarkError):
    """The OCR engine could not process an image."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(
            message=message,
            code="ENGINE_FAILURE",
            detail=detail,
        )


class CaptureStateError(PagemarkError):
    """A capture operation was called in the wrong state."""

    def __init__(self, operation: str, state: str):
        super().__init__(
            message=f"Cannot {operation} while capture is {state}",
            code="INVALID_CAPTURE_STATE",
        )
