"""
User-related endpoints.

Exposes the principal the API acts on behalf of.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from shared.models import AuthenticatedUser
from ..middleware.auth import get_current_user

router = APIRouter()


class CurrentUserResponse(BaseModel):
    """The authenticated user as seen by entitlement checks."""

    id: str
    email: EmailStr
    email_verified: bool
    role: str
    organization_id: Optional[str] = None
    is_admin: bool


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(
    user: AuthenticatedUser = Depends(get_current_user),
) -> CurrentUserResponse:
    """
    Get the current user.

    Role and organization come from the token's app_metadata.
    """
    return CurrentUserResponse(
        id=user.id,
        email=user.email,
        email_verified=user.email_verified,
        role=user.role,
        organization_id=user.organization_id,
        is_admin=user.is_admin,
    )
