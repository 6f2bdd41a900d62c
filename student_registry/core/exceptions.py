"""Custom exception classes and error handling."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception.

    Rendered as an HTML error page by the handler registered in
    ``student_registry.main``; ``message`` becomes the page heading.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(
            status_code=status_code,
            detail={
                "success": False,
                "error": {
                    "code": code,
                    "message": message,
                    "details": details or {},
                },
            },
        )


class ValidationError(AppException):
    """Submitted data failed validation."""

    def __init__(
        self,
        message: str = "Validation error",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="VALIDATION_ERROR",
            message=message,
            details=details,
        )


class MissingFieldError(ValidationError):
    """A required field is missing or empty."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            message=f"Missing required field: {field}",
            details={
                "field": field,
                "hint": "All fields marked with * are required.",
            },
        )


class InvalidNumberError(ValidationError):
    """A numeric field holds text that is not a number."""

    def __init__(self, field: str, value: Any):
        self.field = field
        super().__init__(
            message=f"Invalid numeric value for field: {field}",
            details={"field": field, "value": str(value)},
        )


class StorageError(AppException):
    """The database was unreachable or rejected an operation."""

    def __init__(
        self,
        message: str = "Storage error",
        reason: str | None = None,
    ):
        details = {}
        if reason:
            details["reason"] = reason
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="STORAGE_ERROR",
            message=message,
            details=details,
        )
