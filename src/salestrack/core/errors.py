"""Custom exceptions and error response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standardized error response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """Base exception for all app-level errors."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> ErrorDetail:
        """Convert to API response schema."""
        return ErrorDetail(
            code=self.code,
            message=self.message,
            details=self.details if self.details else None,
        )


class ValidationError(AppError):
    """Raised when request validation fails."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=422,
            details=details,
        )


class NotFoundError(AppError):
    """Raised when resource doesn't exist."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            code="NOT_FOUND",
            message=f"{resource} with ID {resource_id} not found",
            status_code=404,
            details={"resource": resource, "resource_id": resource_id},
        )


class DecodeError(AppError):
    """Raised when an uploaded file is not a readable spreadsheet.

    Fatal to the whole import: no partial result is produced.
    """

    def __init__(
        self,
        message: str = "Failed to parse Excel file. Please check the format.",
        details: Optional[dict] = None,
    ):
        super().__init__(
            code="DECODE_ERROR",
            message=message,
            status_code=422,
            details=details,
        )


class SizeLimitError(AppError):
    """Raised before parsing when an upload exceeds the size guard."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            code="FILE_TOO_LARGE",
            message=f"Maximum file size is {limit // (1024 * 1024)}MB.",
            status_code=413,
            details={"size": size, "limit": limit},
        )


class ImportInProgressError(AppError):
    """Raised when an import starts while another one is still running."""

    def __init__(self, progress: int):
        super().__init__(
            code="IMPORT_IN_PROGRESS",
            message="Another import is already running. Wait for it to finish.",
            status_code=409,
            details={"progress": progress},
        )


class StoreCommitError(AppError):
    """Raised when a batch fails to persist.

    Batches committed before the failure stay in the store, so the
    message tells the user to review and retry instead of assuming
    nothing was saved.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="STORE_COMMIT_ERROR",
            message=message,
            status_code=500,
            details=details,
        )


class DatabaseError(AppError):
    """Raised on database operation failures."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="DATABASE_ERROR",
            message=message,
            status_code=500,
            details=details,
        )
