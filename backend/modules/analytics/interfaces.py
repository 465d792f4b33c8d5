"""
Analytics module interface.

The profile and card services record visitor events through
IAnalyticsService; the dashboard routes read reports from it.
"""

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    AnalyticsEvent,
    AnalyticsReport,
    EventSource,
    EventType,
    ProfileAnalyticsSummary,
)

if TYPE_CHECKING:
    from modules.profiles.models import Profile


@runtime_checkable
class IAnalyticsService(Protocol):
    """Interface for recording events and building reports."""

    async def record_event(
        self,
        profile: "Profile",
        event_type: EventType,
        *,
        source: EventSource = EventSource.DIRECT,
        user_agent: Optional[str] = None,
        session_id: Optional[str] = None,
        element_clicked: Optional[str] = None,
        card_id: Optional[str] = None,
        referrer: Optional[str] = None,
        count: bool = True,
    ) -> Optional[AnalyticsEvent]:
        """
        Record a visitor event and bump the matching profile counter.

        A view from a session already seen within the dedupe window is
        not recorded. With `count=False` the event is stored but the
        caller has already updated the profile counters.

        Returns:
            The stored event, or None if it was deduplicated
        """
        ...

    async def get_dashboard(
        self,
        user: AuthenticatedUser,
        window_days: Optional[int] = None,
    ) -> AnalyticsReport:
        """
        Build the dashboard report over all of a user's profiles.

        Raises:
            AnalyticsSourceError: If any data could not be fetched
        """
        ...

    async def get_profile_summary(
        self,
        user: AuthenticatedUser,
        profile_id: str,
        time_range: Optional[str] = None,
    ) -> ProfileAnalyticsSummary:
        """
        Summarize one profile's events over a named period.

        Raises:
            ProfileNotFoundError: If the profile does not exist
            ProfileAccessDeniedError: If the user does not own it
            InvalidTimeRangeError: If the period is not recognised
            AnalyticsSourceError: If events could not be fetched
        """
        ...

    async def list_card_events(self, card_id: str, limit: int = 1000) -> list[AnalyticsEvent]:
        """
        Recent events recorded through one NFC card, oldest first.

        Raises:
            AnalyticsSourceError: If events could not be fetched
        """
        ...
