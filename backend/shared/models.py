"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


PLATFORM_ADMIN_ROLES = frozenset({"admin", "super_admin"})
ORG_ADMIN_ROLE = "org_admin"


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated user in the system.

    This model is populated from JWT claims and made available
    to route handlers via dependency injection. It is the principal
    handed to every entitlement check; the services trust it as-is.
    """

    id: str = Field(..., description="User ID (UUID from Supabase)")
    email: EmailStr = Field(..., description="User's email address")
    email_verified: bool = Field(default=False, description="Whether email is verified")

    # Timestamps (optional for backward compatibility)
    created_at: Optional[datetime] = Field(None, description="Account creation time")
    last_sign_in: Optional[datetime] = Field(None, description="Last sign-in time")

    role: str = Field(default="user", description="User role (user, org_admin, admin, super_admin)")
    organization_id: Optional[str] = Field(
        None,
        description="Organization the user belongs to, if any",
    )

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",  # Ignore extra fields from JWT
    }

    @property
    def is_admin(self) -> bool:
        """Whether the user may act on any tenant's resources."""
        return self.role in PLATFORM_ADMIN_ROLES

    @property
    def is_super_admin(self) -> bool:
        return self.role == "super_admin"

    def can_manage(self, owner_id: str, organization_id: Optional[str] = None) -> bool:
        """
        Whether the user may act on a resource owned by `owner_id`.

        Org admins reach resources of their own organization only.
        """
        if owner_id == self.id or self.is_admin:
            return True
        return (
            self.role == ORG_ADMIN_ROLE
            and self.organization_id is not None
            and organization_id == self.organization_id
        )
