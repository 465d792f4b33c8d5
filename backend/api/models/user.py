"""
Token models for authentication.

The authenticated principal itself lives in shared.models so services can
depend on it without importing the API layer.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class AppMetadata(BaseModel):
    """Server-controlled claims set by Supabase admin APIs."""

    model_config = ConfigDict(extra="ignore")

    role: Optional[str] = None
    organization_id: Optional[str] = None


class TokenPayload(BaseModel):
    """JWT token payload structure."""

    model_config = ConfigDict(extra="ignore")

    sub: str  # User ID
    email: str
    email_confirmed_at: Optional[str] = None
    aud: str  # Audience
    exp: int  # Expiration timestamp
    iat: int  # Issued at timestamp
    app_metadata: AppMetadata = AppMetadata()
