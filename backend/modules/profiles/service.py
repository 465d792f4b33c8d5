"""
Profile service implementation.

Owner CRUD gated by the profile entitlement, public rendering through the
pure `resolve`, and vCard export. Visitor analytics are recorded through
the analytics service; a failure to record never fails a public page.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from shared.config import get_settings
from shared.models import AuthenticatedUser
from modules.analytics.models import (
    EventSource,
    EventType,
    RecordEventRequest,
    RecordEventResponse,
)
from modules.entitlements.models import ResourceKind

from .exceptions import (
    InvalidTemplateError,
    ProfileAccessDeniedError,
    ProfileNotFoundError,
    TemplateNotFoundError,
)
from .interfaces import IProfileService
from .models import (
    CreateProfileRequest,
    EffectiveView,
    Profile,
    ProfileAnalytics,
    ProfileListResponse,
    Template,
    UpdateProfileRequest,
)
from .rendering import resolve
from .repository import ProfileRepository, TemplateRepository
from .slugs import generate_unique_slug
from .vcard import generate_vcard, vcard_filename

if TYPE_CHECKING:
    from modules.analytics.interfaces import IAnalyticsService
    from modules.entitlements.interfaces import IEntitlementService

logger = logging.getLogger(__name__)


class ProfileService(IProfileService):
    """Profile service with Supabase backend."""

    def __init__(
        self,
        repository: ProfileRepository,
        template_repository: TemplateRepository,
        entitlements: "IEntitlementService",
        analytics: Optional["IAnalyticsService"] = None,
        default_template_slug: Optional[str] = None,
    ):
        self._repository = repository
        self._templates = template_repository
        self._entitlements = entitlements
        self._analytics = analytics
        self._default_template_slug = (
            default_template_slug or get_settings().default_template_slug
        )

    # -------------------------------------------------------------------------
    # Owner operations
    # -------------------------------------------------------------------------

    async def list_profiles(self, user: AuthenticatedUser) -> ProfileListResponse:
        profiles = self._repository.list_by_user(user.id)
        return ProfileListResponse(profiles=profiles, total=len(profiles))

    async def get_profile(self, user: AuthenticatedUser, profile_id: str) -> Profile:
        return self._get_owned(user, profile_id)

    async def create_profile(self, user: AuthenticatedUser, request: CreateProfileRequest) -> Profile:
        """
        Create a profile for the user.

        The quota check runs before anything is written. Users without an
        organization are counted against the free plan by their own
        profiles.
        """
        personal_usage = None
        if user.organization_id is None:
            personal_usage = {ResourceKind.PROFILES: self._repository.count_by_user(user.id)}
        await self._entitlements.check_can_create(
            user, ResourceKind.PROFILES, personal_usage=personal_usage
        )

        template = self._select_template(request.template_id)
        slug = generate_unique_slug(
            request.personal_info.first_name,
            request.personal_info.last_name,
            self._repository.slug_exists,
        )

        data = request.model_dump(mode="json")
        data.update({
            "user_id": user.id,
            "organization_id": user.organization_id,
            "slug": slug,
            "template_id": template.id if template else None,
            "analytics": ProfileAnalytics().model_dump(),
        })
        profile = self._repository.create_profile(data)

        await self._entitlements.increment_usage(user.organization_id, ResourceKind.PROFILES)
        if template is not None:
            self._templates.increment_usage_count(template.id)

        logger.info(f"Created profile {profile.id} ({profile.slug}) for user {user.id}")
        return profile

    async def update_profile(
        self,
        user: AuthenticatedUser,
        profile_id: str,
        request: UpdateProfileRequest,
    ) -> Profile:
        """Apply the fields present in the request. The slug never changes."""
        profile = self._get_owned(user, profile_id)

        if request.template_id is not None and request.template_id != profile.template_id:
            self._select_template(request.template_id)

        data: dict[str, Any] = {
            field: value
            for field, value in request.model_dump(mode="json").items()
            if field in request.model_fields_set and value is not None
        }
        if not data:
            return profile

        updated = self._repository.update_profile(profile.id, data)
        if updated is None:
            raise ProfileNotFoundError(profile_id)
        return updated

    async def delete_profile(self, user: AuthenticatedUser, profile_id: str) -> None:
        profile = self._get_owned(user, profile_id)
        self._repository.delete(profile.id)
        await self._entitlements.decrement_usage(profile.organization_id, ResourceKind.PROFILES)
        logger.info(f"Deleted profile {profile.id} for user {user.id}")

    async def preview_profile(self, user: AuthenticatedUser, profile_id: str) -> EffectiveView:
        profile = self._get_owned(user, profile_id)
        return resolve(self._template_for(profile), profile)

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    async def get_public_profile(self, slug: str) -> Profile:
        profile = self._repository.get_by_slug(slug)
        if profile is None or not profile.is_active:
            raise ProfileNotFoundError(slug)
        return profile

    async def get_public_view(
        self,
        slug: str,
        *,
        source: Optional[str] = None,
        user_agent: Optional[str] = None,
        session_id: Optional[str] = None,
        referrer: Optional[str] = None,
    ) -> EffectiveView:
        profile = await self.get_public_profile(slug)
        view = resolve(self._template_for(profile), profile)
        await self._record_quietly(
            profile,
            EventType.VIEW,
            source=EventSource.parse(source),
            user_agent=user_agent,
            session_id=session_id,
            referrer=referrer,
        )
        return view

    async def record_public_event(
        self,
        slug: str,
        request: RecordEventRequest,
        *,
        user_agent: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> RecordEventResponse:
        profile = await self.get_public_profile(slug)
        if self._analytics is None:
            return RecordEventResponse(recorded=False)

        event = await self._analytics.record_event(
            profile,
            request.type,
            source=EventSource.parse(request.source),
            user_agent=user_agent,
            session_id=request.session_id or session_id,
            element_clicked=request.element_clicked,
            referrer=request.referrer,
        )
        if event is None:
            return RecordEventResponse(recorded=False)
        return RecordEventResponse(recorded=True, event_id=event.id)

    async def get_vcard(
        self,
        slug: str,
        *,
        user_agent: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> tuple[str, str]:
        profile = await self.get_public_profile(slug)
        content = generate_vcard(profile)
        await self._record_quietly(
            profile,
            EventType.DOWNLOAD,
            user_agent=user_agent,
            session_id=session_id,
        )
        return vcard_filename(profile), content

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------

    async def list_templates(self) -> list[Template]:
        return self._templates.list_active()

    async def get_template(self, slug: str) -> Template:
        template = self._templates.get_by_slug(slug)
        if template is None or not template.is_active:
            raise TemplateNotFoundError(slug)
        return template

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _get_owned(self, user: AuthenticatedUser, profile_id: str) -> Profile:
        profile = self._repository.get_by_id(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        if not user.can_manage(profile.user_id, profile.organization_id):
            raise ProfileAccessDeniedError(profile_id, user.id)
        return profile

    def _select_template(self, template_id: Optional[str]) -> Optional[Template]:
        """
        Pick the template for a new or edited profile.

        An explicit ID must name an active template. Otherwise the
        configured default is used, then the most used active template.
        None means no template exists and the default layout applies.
        """
        if template_id:
            template = self._templates.get_by_id(template_id)
            if template is None or not template.is_active:
                raise InvalidTemplateError(template_id)
            return template

        template = self._templates.get_by_slug(self._default_template_slug)
        if template is not None and template.is_active:
            return template

        active = self._templates.list_active()
        if not active:
            logger.warning("No active templates; profile will use the default layout")
            return None
        return active[0]

    def _template_for(self, profile: Profile) -> Optional[Template]:
        if not profile.template_id:
            return None
        template = self._templates.get_by_id(profile.template_id)
        if template is None:
            logger.warning(
                f"Template {profile.template_id} for profile {profile.id} not found; "
                "using default layout"
            )
        return template

    async def _record_quietly(self, profile: Profile, event_type: EventType, **kwargs: Any) -> None:
        if self._analytics is None:
            return
        try:
            await self._analytics.record_event(profile, event_type, **kwargs)
        except Exception as e:
            logger.warning(f"Failed to record {event_type.value} for profile {profile.id}: {e}")
