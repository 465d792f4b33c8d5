"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

Repositories share one Supabase client; services receive the
repositories and the other services they call.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.analytics.interfaces import IAnalyticsService
    from modules.analytics.repository import AnalyticsRepository
    from modules.cards.interfaces import ICardService
    from modules.cards.repository import CardRepository
    from modules.entitlements.interfaces import IEntitlementService
    from modules.entitlements.repository import OrganizationRepository
    from modules.profiles.interfaces import IProfileService
    from modules.profiles.repository import ProfileRepository, TemplateRepository


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._organization_repository: "OrganizationRepository | None" = None
        self._profile_repository: "ProfileRepository | None" = None
        self._template_repository: "TemplateRepository | None" = None
        self._analytics_repository: "AnalyticsRepository | None" = None
        self._card_repository: "CardRepository | None" = None
        self._entitlement_service: "IEntitlementService | None" = None
        self._analytics_service: "IAnalyticsService | None" = None
        self._profile_service: "IProfileService | None" = None
        self._card_service: "ICardService | None" = None

    # -------------------------------------------------------------------------
    # Repositories
    # -------------------------------------------------------------------------

    @property
    def organization_repository(self) -> "OrganizationRepository":
        """Get the organization repository instance."""
        if self._organization_repository is None:
            from modules.entitlements.repository import OrganizationRepository
            from shared.database import get_supabase_client
            self._organization_repository = OrganizationRepository(get_supabase_client())
        return self._organization_repository

    @property
    def profile_repository(self) -> "ProfileRepository":
        """Get the profile repository instance."""
        if self._profile_repository is None:
            from modules.profiles.repository import ProfileRepository
            from shared.database import get_supabase_client
            self._profile_repository = ProfileRepository(get_supabase_client())
        return self._profile_repository

    @property
    def template_repository(self) -> "TemplateRepository":
        """Get the template repository instance."""
        if self._template_repository is None:
            from modules.profiles.repository import TemplateRepository
            from shared.database import get_supabase_client
            self._template_repository = TemplateRepository(get_supabase_client())
        return self._template_repository

    @property
    def analytics_repository(self) -> "AnalyticsRepository":
        """Get the analytics event repository instance."""
        if self._analytics_repository is None:
            from modules.analytics.repository import AnalyticsRepository
            from shared.database import get_supabase_client
            self._analytics_repository = AnalyticsRepository(get_supabase_client())
        return self._analytics_repository

    @property
    def card_repository(self) -> "CardRepository":
        """Get the card repository instance."""
        if self._card_repository is None:
            from modules.cards.repository import CardRepository
            from shared.database import get_supabase_client
            self._card_repository = CardRepository(get_supabase_client())
        return self._card_repository

    # -------------------------------------------------------------------------
    # Services
    # -------------------------------------------------------------------------

    @property
    def entitlements(self) -> "IEntitlementService":
        """Get the entitlement service instance."""
        if self._entitlement_service is None:
            from modules.entitlements.service import EntitlementService
            self._entitlement_service = EntitlementService(self.organization_repository)
        return self._entitlement_service

    @property
    def analytics(self) -> "IAnalyticsService":
        """Get the analytics service instance."""
        if self._analytics_service is None:
            from modules.analytics.service import AnalyticsService
            self._analytics_service = AnalyticsService(
                repository=self.analytics_repository,
                profile_repository=self.profile_repository,
            )
        return self._analytics_service

    @property
    def profiles(self) -> "IProfileService":
        """Get the profile service instance."""
        if self._profile_service is None:
            from modules.profiles.service import ProfileService
            self._profile_service = ProfileService(
                repository=self.profile_repository,
                template_repository=self.template_repository,
                entitlements=self.entitlements,
                analytics=self.analytics,
            )
        return self._profile_service

    @property
    def cards(self) -> "ICardService":
        """Get the card service instance."""
        if self._card_service is None:
            from modules.cards.service import CardService
            self._card_service = CardService(
                repository=self.card_repository,
                profile_repository=self.profile_repository,
                entitlements=self.entitlements,
                analytics=self.analytics,
            )
        return self._card_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._organization_repository = None
        self._profile_repository = None
        self._template_repository = None
        self._analytics_repository = None
        self._card_repository = None
        self._entitlement_service = None
        self._analytics_service = None
        self._profile_service = None
        self._card_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_entitlement_service() -> "IEntitlementService":
    """FastAPI dependency for entitlement service."""
    return get_container().entitlements


def get_analytics_service() -> "IAnalyticsService":
    """FastAPI dependency for analytics service."""
    return get_container().analytics


def get_profile_service() -> "IProfileService":
    """FastAPI dependency for profile service."""
    return get_container().profiles


def get_card_service() -> "ICardService":
    """FastAPI dependency for card service."""
    return get_container().cards
