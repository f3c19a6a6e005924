"""Library error hierarchy.

Every error carries a machine-readable ``code`` and the HTTP status the API
layer answers with, so the same exception can surface from the service, the
CLI and the HTTP handlers.
"""

from typing import Any

from fastapi import status


class LibraryError(Exception):
    """Base library error with structured payload."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "LIBRARY_ERROR"

    def __init__(self, message: str, details: Any = None, code: str | None = None):
        self.message = message
        self.details = details
        if code:
            self.code = code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class ValidationError(LibraryError):
    """Validation error (422)."""

    status_code = 422
    code = "VALIDATION_ERROR"


class ProtectedResourceError(ValidationError):
    """Attempt to delete a system list (403)."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "PROTECTED_RESOURCE"

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            f"{resource} '{resource_id}' is a system resource and cannot be deleted",
            details={"resource": resource, "id": resource_id},
        )


class MalformedDocumentError(ValidationError):
    """Backup document is not valid JSON."""

    code = "MALFORMED_DOCUMENT"


class UnsupportedVersionError(ValidationError):
    """Backup document version is missing or newer than supported."""

    code = "UNSUPPORTED_VERSION"

    def __init__(self, version: Any, supported: int):
        super().__init__(
            "Unsupported backup version",
            details={"version": version, "supported": supported},
        )


class InvalidDocumentShapeError(ValidationError):
    """Backup document is missing sections or has malformed records."""

    code = "INVALID_DOCUMENT_SHAPE"


class NotFoundError(LibraryError):
    """Resource not found error (404)."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: str | None = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"

        super().__init__(message, details={"resource": resource, "id": resource_id})


class StorageError(LibraryError):
    """Underlying store failed inside a transaction (500)."""

    code = "STORAGE_ERROR"
