"""
Error response schemas for API documentation and consistent error formatting.
Provides standardized error response models for OpenAPI documentation.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(
        None,
        description="Field name that caused the error",
        examples=["agent -> email"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Invalid email format"]
    )

    type: Optional[str] = Field(
        None,
        description="Error type identifier",
        examples=["value_error"]
    )

    input: Optional[Any] = Field(
        None,
        description="Input value that caused the error"
    )


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["NOT_FOUND"])
    message: str = Field(..., description="Human-readable error message", examples=["Listing not found"])
    timestamp: str = Field(..., description="Error timestamp in ISO format")
    request_id: Optional[str] = Field(None, description="Unique request identifier for tracking")
    details: Optional[List[ErrorDetail]] = Field(
        None,
        description="Detailed error information for validation errors"
    )


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse = Field(
        ...,
        description="Error information"
    )


def _example(code: str, message: str, details: Optional[list] = None) -> Dict[str, Any]:
    error = {
        "code": code,
        "message": message,
        "timestamp": "2025-01-01T00:00:00Z",
        "request_id": "abc12345",
    }
    if details:
        error["details"] = details
    return {"application/json": {"example": {"error": error}}}


# Common error response examples for documentation
COMMON_ERROR_RESPONSES = {
    400: {
        "description": "Bad Request - Malformed listing id",
        "model": APIErrorResponse,
        "content": _example("BAD_REQUEST", "Invalid listing id"),
    },
    404: {
        "description": "Not Found - Listing does not exist",
        "model": APIErrorResponse,
        "content": _example("NOT_FOUND", "Listing not found"),
    },
    422: {
        "description": "Unprocessable Entity - Validation error",
        "model": APIErrorResponse,
        "content": _example(
            "VALIDATION_ERROR",
            "Request validation failed",
            [{"field": "body -> price", "message": "Input should be greater than or equal to 0",
              "type": "greater_than_equal", "input": -100}],
        ),
    },
    500: {
        "description": "Internal Server Error - Store or unexpected failure",
        "model": APIErrorResponse,
        "content": _example("DATABASE_ERROR", "Database operation failed"),
    },
    503: {
        "description": "Service Unavailable - Database unreachable",
        "model": APIErrorResponse,
        "content": _example("SERVICE_UNAVAILABLE", "Database connection failed"),
    },
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_item_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for endpoints addressing one listing by id."""
    return get_error_responses(400, 404, 500)


def get_write_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for endpoints that write a listing body."""
    return get_error_responses(400, 404, 422, 500)
