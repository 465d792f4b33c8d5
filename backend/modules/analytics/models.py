"""
Analytics module data models.

Events are immutable once recorded. Reports are derived from events on read
and are never stored.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EventType(str, Enum):
    VIEW = "view"
    TAP = "tap"
    CLICK = "click"
    DOWNLOAD = "download"
    SHARE = "share"
    SCAN = "scan"
    FORM_SUBMIT = "form_submit"


class EventSource(str, Enum):
    """How the visitor reached the profile."""

    NFC = "nfc"
    QR = "qr"
    DIRECT = "direct"
    SOCIAL = "social"
    SEARCH = "search"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "EventSource":
        """Lenient parse for query strings; unknown values become OTHER."""
        if not value:
            return cls.DIRECT
        try:
            return cls(value.lower())
        except ValueError:
            return cls.OTHER


class DeviceClass(str, Enum):
    MOBILE = "mobile"
    DESKTOP = "desktop"
    TABLET = "tablet"
    UNCLASSIFIED = "unclassified"


class AnalyticsEvent(BaseModel):
    """A single recorded visitor interaction."""

    model_config = {"frozen": True}

    id: Optional[str] = None
    type: EventType
    profile_id: str
    timestamp: datetime
    user_agent: Optional[str] = None
    device: Optional[DeviceClass] = None
    source: EventSource = EventSource.DIRECT
    session_id: Optional[str] = None
    element_clicked: Optional[str] = None
    card_id: Optional[str] = None
    referrer: Optional[str] = None


class RecordEventRequest(BaseModel):
    """Event reported by the public profile page."""

    type: EventType
    source: Optional[str] = None
    element_clicked: Optional[str] = Field(None, max_length=100)
    session_id: Optional[str] = Field(None, max_length=200)
    referrer: Optional[str] = None


class RecordEventResponse(BaseModel):
    recorded: bool
    event_id: Optional[str] = None


class ProfileRef(BaseModel):
    """Minimal profile identity used to label and order report rows."""

    id: str
    name: str
    created_at: Optional[datetime] = None


# =============================================================================
# Report
# =============================================================================


class TrendBucket(BaseModel):
    """Views and taps on one UTC calendar day."""

    day: date
    label: str
    views: int = 0
    taps: int = 0


class DeviceBreakdown(BaseModel):
    """
    Event counts by device class.

    `total` counts every event including unclassified ones; percentages
    are computed over classified events only.
    """

    mobile: int = 0
    desktop: int = 0
    tablet: int = 0
    unclassified: int = 0
    total: int = 0
    percentages: dict[str, float] = Field(default_factory=dict)


class ProfilePerformanceEntry(BaseModel):
    profile_id: Optional[str] = None
    name: str
    views: int = 0
    share: float = 0.0
    placeholder: bool = False


class EngagementRates(BaseModel):
    """Engagement ratios as percentages of views."""

    click_through_rate: float = 0.0
    contact_saves: float = 0.0
    social_clicks: float = 0.0
    qr_scans: float = 0.0


class EngagementMetrics(EngagementRates):
    """
    Clamped engagement ratios for display, in [0, 100].

    `raw` carries the unclamped ratios, which can exceed 100 when
    interactions outnumber views.
    """

    raw: EngagementRates = Field(default_factory=EngagementRates)


class AnalyticsReport(BaseModel):
    window_days: int
    start_date: date
    end_date: date
    views_trend: list[TrendBucket]
    device_breakdown: DeviceBreakdown
    profile_performance: list[ProfilePerformanceEntry]
    engagement_metrics: EngagementMetrics


class EventSummary(BaseModel):
    """Totals for a set of events."""

    total_events: int = 0
    views: int = 0
    unique_visitors: int = 0
    taps: int = 0
    clicks: int = 0
    downloads: int = 0
    shares: int = 0
    scans: int = 0
    form_submits: int = 0
    sources: dict[str, int] = Field(default_factory=dict)
    clicked_elements: dict[str, int] = Field(default_factory=dict)


class ProfileAnalyticsSummary(BaseModel):
    """Per-profile analytics for a time range."""

    profile_id: str
    time_range: str
    start: datetime
    end: datetime
    summary: EventSummary
    report: AnalyticsReport
