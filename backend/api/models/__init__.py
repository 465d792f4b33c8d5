"""API models package."""

from .user import AppMetadata, TokenPayload
from .errors import ERROR_RESPONSES, ErrorResponse

__all__ = [
    "AppMetadata",
    "TokenPayload",
    "ERROR_RESPONSES",
    "ErrorResponse",
]
