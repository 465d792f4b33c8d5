"""
Error response models.

Standardized error responses for the API.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body returned for every BBTapError."""

    error: str = Field(..., description="Stable error code, e.g. LIMIT_EXCEEDED")
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


# OpenAPI entries for the statuses module exceptions map to
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status: {"model": ErrorResponse}
    for status in (400, 401, 403, 404, 409, 502)
}
