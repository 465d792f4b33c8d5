"""
Profile and template repositories.

Nested profile parts (personal info, contact info, sections, analytics,
...) are stored as JSON columns on the `profiles` table.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from shared.repository import BaseRepository
from .models import (
    CallToAction,
    ContactInfo,
    Customization,
    PersonalInfo,
    Profile,
    ProfileAnalytics,
    SectionVisibility,
    SocialLinks,
    Template,
    TemplateStructure,
    DefaultColors,
    DefaultFonts,
)

JSON_COLUMNS = (
    "personal_info",
    "contact_info",
    "social_links",
    "business_hours",
    "customization",
    "sections",
    "gallery",
    "services",
    "testimonials",
    "call_to_action",
)


class ProfileRepository(BaseRepository[Profile]):
    """
    Repository for profile data access.

    Note: This repository does NOT perform authorization checks.
    The service layer is responsible for verifying ownership.
    """

    table_name = "profiles"

    def list_by_user(self, user_id: str) -> list[Profile]:
        """A user's profiles, oldest first."""
        result = (
            self._table()
            .select("*")
            .eq("user_id", user_id)
            .order("created_at")
            .execute()
        )
        return [self._map_row(row) for row in result.data or []]

    def count_by_user(self, user_id: str) -> int:
        result = (
            self._table()
            .select("id", count="exact")
            .eq("user_id", user_id)
            .execute()
        )
        if result.count is not None:
            return result.count
        return len(result.data or [])

    def get_by_slug(self, slug: str) -> Optional[Profile]:
        return self.find_one("slug", slug)

    def slug_exists(self, slug: str) -> bool:
        result = self._table().select("id").eq("slug", slug).limit(1).execute()
        return bool(result.data)

    def create_profile(self, data: dict[str, Any]) -> Profile:
        return self.insert(data)

    def update_profile(self, profile_id: str, data: dict[str, Any]) -> Optional[Profile]:
        data = {**data, "updated_at": datetime.now(timezone.utc).isoformat()}
        return self.update(profile_id, data)

    def increment_analytics(
        self,
        profile_id: str,
        counters: dict[str, int],
        link: Optional[str] = None,
    ) -> Optional[ProfileAnalytics]:
        """
        Add to a profile's analytics counters.

        Args:
            profile_id: Profile to update
            counters: Counter name to increment, e.g. {"views": 1}
            link: Element name whose link_clicks entry is incremented

        Returns:
            The updated counters, or None if the profile does not exist
        """
        result = self._table().select("analytics").eq("id", profile_id).execute()
        if not result.data:
            return None

        analytics = ProfileAnalytics(**(result.data[0].get("analytics") or {}))
        updates = {
            name: getattr(analytics, name) + max(amount, 0)
            for name, amount in counters.items()
        }
        if link:
            clicks = dict(analytics.link_clicks)
            clicks[link] = clicks.get(link, 0) + 1
            updates["link_clicks"] = clicks

        analytics = analytics.model_copy(update=updates)
        self._table().update({"analytics": analytics.model_dump()}).eq("id", profile_id).execute()
        return analytics

    def _map_row(self, data: dict[str, Any]) -> Profile:
        """Map database row to Profile model, tolerating null JSON columns."""
        return Profile(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            organization_id=data.get("organization_id"),
            slug=data["slug"],
            personal_info=PersonalInfo(**(data.get("personal_info") or {})),
            contact_info=ContactInfo(**(data.get("contact_info") or {})),
            social_links=SocialLinks(**(data.get("social_links") or {})),
            business_hours=data.get("business_hours") or [],
            template_id=data.get("template_id"),
            customization=Customization(**(data.get("customization") or {})),
            sections=SectionVisibility(**(data.get("sections") or {})),
            gallery=data.get("gallery") or [],
            services=data.get("services") or [],
            testimonials=data.get("testimonials") or [],
            call_to_action=CallToAction(**(data.get("call_to_action") or {})),
            analytics=ProfileAnalytics(**(data.get("analytics") or {})),
            is_active=data.get("is_active", True),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


class TemplateRepository(BaseRepository[Template]):
    """Repository for template data access."""

    table_name = "templates"

    def list_active(self) -> list[Template]:
        """Active templates, most used first."""
        result = (
            self._table()
            .select("*")
            .eq("is_active", True)
            .order("usage_count", desc=True)
            .execute()
        )
        return [self._map_row(row) for row in result.data or []]

    def get_by_slug(self, slug: str) -> Optional[Template]:
        return self.find_one("slug", slug)

    def increment_usage_count(self, template_id: str) -> None:
        template = self.get_by_id(template_id)
        if template is None:
            return
        self._table().update({"usage_count": template.usage_count + 1}).eq("id", template_id).execute()

    def _map_row(self, data: dict[str, Any]) -> Template:
        return Template(
            id=str(data["id"]),
            name=data.get("name", ""),
            slug=data["slug"],
            description=data.get("description"),
            category=data.get("category") or "other",
            thumbnail=data.get("thumbnail"),
            structure=TemplateStructure(**(data.get("structure") or {})),
            default_colors=DefaultColors(**(data.get("default_colors") or {})),
            default_fonts=DefaultFonts(**(data.get("default_fonts") or {})),
            features=data.get("features") or [],
            is_premium=data.get("is_premium", False),
            is_active=data.get("is_active", True),
            usage_count=data.get("usage_count") or 0,
        )
