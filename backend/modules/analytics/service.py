"""
Analytics service implementation.

Records visitor events with their profile counters and builds reports by
fetching a consistent set of profiles and events, then folding them with
the pure aggregator.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional

from shared.config import get_settings
from shared.exceptions import BBTapError
from shared.models import AuthenticatedUser
from modules.profiles.exceptions import ProfileAccessDeniedError, ProfileNotFoundError

from .aggregator import aggregate, summarize
from .device import detect_device
from .exceptions import AnalyticsSourceError
from .interfaces import IAnalyticsService
from .models import (
    AnalyticsEvent,
    AnalyticsReport,
    EventSource,
    EventType,
    ProfileAnalyticsSummary,
    ProfileRef,
)
from .periods import parse_time_range, window_days_for
from .repository import AnalyticsRepository

if TYPE_CHECKING:
    from modules.profiles.models import Profile
    from modules.profiles.repository import ProfileRepository

logger = logging.getLogger(__name__)

COUNTER_FOR_EVENT = {
    EventType.VIEW: "views",
    EventType.TAP: "card_taps",
    EventType.DOWNLOAD: "contact_downloads",
}


class AnalyticsService(IAnalyticsService):
    """Analytics backed by the analytics_events and profiles tables."""

    def __init__(
        self,
        repository: AnalyticsRepository,
        profile_repository: "ProfileRepository",
        dedupe_minutes: Optional[int] = None,
        window_days: Optional[int] = None,
    ):
        settings = get_settings()
        self._repository = repository
        self._profiles = profile_repository
        self._dedupe_minutes = (
            dedupe_minutes if dedupe_minutes is not None else settings.view_dedupe_minutes
        )
        self._window_days = window_days or settings.analytics_window_days

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
        """Record a visitor event and bump the matching profile counter."""
        now = datetime.now(timezone.utc)
        first_visit = False

        if event_type == EventType.VIEW and session_id:
            since = now - timedelta(minutes=self._dedupe_minutes)
            if self._dedupe_minutes and self._repository.has_recent_view(profile.id, session_id, since):
                logger.debug(f"Skipping repeat view of {profile.id} from session {session_id}")
                return None
            first_visit = not self._repository.has_session(profile.id, session_id)

        event = AnalyticsEvent(
            type=event_type,
            profile_id=profile.id,
            timestamp=now,
            user_agent=user_agent,
            device=detect_device(user_agent),
            source=source,
            session_id=session_id,
            element_clicked=element_clicked,
            card_id=card_id,
            referrer=referrer,
        )
        stored = self._repository.insert_event(event)

        if not count:
            logger.debug(f"Recorded {event_type.value} event for profile {profile.id} without counters")
            return stored

        counters: dict[str, int] = {}
        if event_type in COUNTER_FOR_EVENT:
            counters[COUNTER_FOR_EVENT[event_type]] = 1
        if first_visit:
            counters["unique_views"] = 1
        link = (element_clicked or "unknown") if event_type == EventType.CLICK else None
        if counters or link:
            self._profiles.increment_analytics(profile.id, counters, link=link)

        logger.debug(f"Recorded {event_type.value} event for profile {profile.id} ({source.value})")
        return stored

    async def get_dashboard(
        self,
        user: AuthenticatedUser,
        window_days: Optional[int] = None,
    ) -> AnalyticsReport:
        """Build the dashboard report over all of a user's profiles."""
        days = window_days or self._window_days
        now = datetime.now(timezone.utc)
        start = datetime.combine(
            (now - timedelta(days=days - 1)).date(),
            datetime.min.time(),
            tzinfo=timezone.utc,
        )

        try:
            profiles = self._profiles.list_by_user(user.id)
            events = self._repository.list_events([p.id for p in profiles], start, now)
        except BBTapError:
            raise
        except Exception as e:
            logger.error(f"Failed to load analytics for user {user.id}: {e}")
            raise AnalyticsSourceError(reason=str(e)) from e

        refs = [ProfileRef(id=p.id, name=p.display_name, created_at=p.created_at) for p in profiles]
        return aggregate(events, days, profiles=refs, now=now)

    async def get_profile_summary(
        self,
        user: AuthenticatedUser,
        profile_id: str,
        time_range: Optional[str] = None,
    ) -> ProfileAnalyticsSummary:
        """Summarize one profile's events over a named period."""
        now = datetime.now(timezone.utc)
        start, end = parse_time_range(time_range, now)

        try:
            profile = self._profiles.get_by_id(profile_id)
        except Exception as e:
            logger.error(f"Failed to load profile {profile_id}: {e}")
            raise AnalyticsSourceError(reason=str(e)) from e
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        if not user.can_manage(profile.user_id, profile.organization_id):
            raise ProfileAccessDeniedError(profile_id, user.id)

        try:
            events = self._repository.list_events([profile.id], start, end)
        except Exception as e:
            logger.error(f"Failed to load events for profile {profile_id}: {e}")
            raise AnalyticsSourceError(reason=str(e)) from e

        ref = ProfileRef(id=profile.id, name=profile.display_name, created_at=profile.created_at)
        return ProfileAnalyticsSummary(
            profile_id=profile.id,
            time_range=(time_range or "30d").lower(),
            start=start,
            end=end,
            summary=summarize(events),
            report=aggregate(events, window_days_for(start, end), profiles=[ref], now=end),
        )

    async def list_card_events(self, card_id: str, limit: int = 1000) -> list[AnalyticsEvent]:
        """Recent events recorded through one NFC card."""
        try:
            return self._repository.list_card_events(card_id, limit)
        except Exception as e:
            logger.error(f"Failed to load events for card {card_id}: {e}")
            raise AnalyticsSourceError(reason=str(e)) from e
