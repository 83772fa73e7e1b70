"""Response models for API endpoints."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Unified error response format."""

    id: str  # Exception type (e.g., "OINOIdError") or HTTP status of a failed request
    message: str  # User-friendly error message
    details: dict[str, Any]  # Structured details for frontend processing


class ResourceListResponse(BaseModel):
    """Response for resource list endpoint."""

    resources: list[str]


class ResourceDescriptionResponse(BaseModel):
    """Response for resource description endpoint."""

    name: str
    table: str
    fields: list[str]
