"""
Profiles module interface.
"""

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    CreateProfileRequest,
    EffectiveView,
    Profile,
    ProfileListResponse,
    Template,
    UpdateProfileRequest,
)

if TYPE_CHECKING:
    from modules.analytics.models import RecordEventRequest, RecordEventResponse


@runtime_checkable
class IProfileService(Protocol):
    """
    Interface for profile management and public rendering.

    Owner operations verify that the user owns the profile. Public
    operations look profiles up by slug and record visitor analytics.
    """

    async def list_profiles(self, user: AuthenticatedUser) -> ProfileListResponse:
        """List the user's profiles, oldest first."""
        ...

    async def get_profile(self, user: AuthenticatedUser, profile_id: str) -> Profile:
        """
        Get one of the user's profiles.

        Raises:
            ProfileNotFoundError: If the profile does not exist
            ProfileAccessDeniedError: If the user does not own it
        """
        ...

    async def create_profile(self, user: AuthenticatedUser, request: CreateProfileRequest) -> Profile:
        """
        Create a profile with a unique slug.

        Raises:
            LimitExceededError: If the plan's profile quota is used up
            InvalidTemplateError: If the requested template is unknown
        """
        ...

    async def update_profile(
        self,
        user: AuthenticatedUser,
        profile_id: str,
        request: UpdateProfileRequest,
    ) -> Profile:
        """Apply a partial update. The slug never changes."""
        ...

    async def delete_profile(self, user: AuthenticatedUser, profile_id: str) -> None:
        """Delete a profile and release its quota."""
        ...

    async def preview_profile(self, user: AuthenticatedUser, profile_id: str) -> EffectiveView:
        """Resolve the owner's profile without recording analytics."""
        ...

    async def get_public_view(
        self,
        slug: str,
        *,
        source: Optional[str] = None,
        user_agent: Optional[str] = None,
        session_id: Optional[str] = None,
        referrer: Optional[str] = None,
    ) -> EffectiveView:
        """
        Resolve a published profile for a visitor and record the view.

        Raises:
            ProfileNotFoundError: If no active profile has this slug
        """
        ...

    async def get_public_profile(self, slug: str) -> Profile:
        """Look up an active profile by slug or ID."""
        ...

    async def record_public_event(
        self,
        slug: str,
        request: "RecordEventRequest",
        *,
        user_agent: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> "RecordEventResponse":
        """
        Record an event reported by a public profile page.

        Raises:
            ProfileNotFoundError: If no active profile has this slug
        """
        ...

    async def get_vcard(
        self,
        slug: str,
        *,
        user_agent: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> tuple[str, str]:
        """
        Export a published profile as a vCard and record the download.

        Returns:
            (filename, vCard text)
        """
        ...

    async def list_templates(self) -> list[Template]:
        """List active templates."""
        ...

    async def get_template(self, slug: str) -> Template:
        """Get a template by slug."""
        ...
