"""
Analytics event repository.

Events are append-only rows in `analytics_events`.
"""

from datetime import datetime
from typing import Any, Optional, Sequence

from shared.repository import BaseRepository
from .models import AnalyticsEvent, DeviceClass, EventSource, EventType


class AnalyticsRepository(BaseRepository[AnalyticsEvent]):
    """Repository for analytics events."""

    table_name = "analytics_events"

    def insert_event(self, event: AnalyticsEvent) -> AnalyticsEvent:
        data = event.model_dump(mode="json", exclude={"id"}, exclude_none=True)
        return self.insert(data)

    def list_events(
        self,
        profile_ids: Sequence[str],
        start: datetime,
        end: Optional[datetime] = None,
    ) -> list[AnalyticsEvent]:
        """Events for the given profiles from `start` onwards, oldest first."""
        if not profile_ids:
            return []
        query = (
            self._table()
            .select("*")
            .in_("profile_id", list(profile_ids))
            .gte("timestamp", start.isoformat())
        )
        if end is not None:
            query = query.lte("timestamp", end.isoformat())
        result = query.order("timestamp").execute()
        return [self._map_row(row) for row in result.data or []]

    def list_card_events(self, card_id: str, limit: int = 1000) -> list[AnalyticsEvent]:
        """The most recent events recorded through a card, oldest first."""
        result = (
            self._table()
            .select("*")
            .eq("card_id", card_id)
            .order("timestamp", desc=True)
            .limit(limit)
            .execute()
        )
        return [self._map_row(row) for row in reversed(result.data or [])]

    def has_recent_view(self, profile_id: str, session_id: str, since: datetime) -> bool:
        """Whether the session already viewed the profile since `since`."""
        result = (
            self._table()
            .select("id")
            .eq("profile_id", profile_id)
            .eq("session_id", session_id)
            .eq("type", EventType.VIEW.value)
            .gte("timestamp", since.isoformat())
            .limit(1)
            .execute()
        )
        return bool(result.data)

    def has_session(self, profile_id: str, session_id: str) -> bool:
        """Whether the session ever viewed the profile."""
        result = (
            self._table()
            .select("id")
            .eq("profile_id", profile_id)
            .eq("session_id", session_id)
            .eq("type", EventType.VIEW.value)
            .limit(1)
            .execute()
        )
        return bool(result.data)

    def _map_row(self, data: dict[str, Any]) -> AnalyticsEvent:
        device = data.get("device")
        try:
            source = EventSource(data.get("source") or EventSource.DIRECT.value)
        except ValueError:
            source = EventSource.OTHER
        return AnalyticsEvent(
            id=str(data["id"]) if data.get("id") is not None else None,
            type=EventType(data["type"]),
            profile_id=str(data["profile_id"]),
            timestamp=data["timestamp"],
            user_agent=data.get("user_agent"),
            device=DeviceClass(device) if device in DeviceClass._value2member_map_ else None,
            source=source,
            session_id=data.get("session_id"),
            element_clicked=data.get("element_clicked"),
            card_id=data.get("card_id"),
            referrer=data.get("referrer"),
        )
