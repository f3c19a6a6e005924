"""Common schemas used across the API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(description="Error code")
    message: str = Field(description="Human-readable error message")
    details: Any | None = Field(default=None, description="Additional error details")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: ErrorDetail

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "code": "PROTECTED_RESOURCE",
                    "message": "Reading list 'system:read' is a system resource and cannot be deleted",
                    "details": {"resource": "Reading list", "id": "system:read"},
                }
            }
        }
    )
