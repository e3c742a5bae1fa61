"""
Shared response schemas.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class APIError(BaseModel):
    """Schema for API error responses."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "InvalidArgument",
                "message": "Rating must be between 1 and 5",
                "request_id": "7d0f3c1e-2a4b-4c4e-9f0a-1b2c3d4e5f60",
            }
        }
    )

    error: str = Field(..., description="Stable error kind")
    message: str = Field(..., description="Error message")
    request_id: Optional[str] = Field(None, description="Request correlation id")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class SuccessResponse(BaseModel):
    success: bool = True


ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": APIError, "description": "Invalid argument"},
    401: {"model": APIError, "description": "Authentication required"},
    403: {"model": APIError, "description": "Permission denied"},
    404: {"model": APIError, "description": "Resource not found"},
}
