"""
Analytics aggregation.

`aggregate` folds raw events into the dashboard report: a daily views
trend, a device breakdown, a profile ranking and engagement ratios. It is
a pure function of its arguments; the caller fetches events and supplies
`now`, so identical inputs always give identical reports.
"""

from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence

from .device import detect_device
from .models import (
    AnalyticsEvent,
    AnalyticsReport,
    DeviceBreakdown,
    DeviceClass,
    EngagementMetrics,
    EngagementRates,
    EventSource,
    EventSummary,
    EventType,
    ProfilePerformanceEntry,
    ProfileRef,
    TrendBucket,
)

NO_PROFILES_LABEL = "No profiles yet"

SOCIAL_ELEMENTS = frozenset({
    "linkedin", "twitter", "x", "facebook", "instagram",
    "youtube", "github", "tiktok", "social",
})

CLASSIFIED_DEVICES = (DeviceClass.MOBILE, DeviceClass.DESKTOP, DeviceClass.TABLET)


def utc_day(moment: datetime) -> date:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).date()


def _percent(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 2)


def _clamp(value: float) -> float:
    return min(100.0, max(0.0, value))


def device_of(event: AnalyticsEvent) -> DeviceClass:
    """Stored device class, or one detected from the user agent."""
    if event.device is not None:
        return event.device
    return detect_device(event.user_agent)


def is_social_click(event: AnalyticsEvent) -> bool:
    if event.type != EventType.CLICK or not event.element_clicked:
        return False
    element = event.element_clicked.lower()
    return element in SOCIAL_ELEMENTS or element.startswith("social:")


def is_qr_scan(event: AnalyticsEvent) -> bool:
    if event.type == EventType.SCAN:
        return True
    return event.type == EventType.VIEW and event.source == EventSource.QR


def build_trend(
    events: Iterable[AnalyticsEvent],
    window_days: int,
    end_day: date,
) -> list[TrendBucket]:
    """One bucket per day ending on `end_day`, oldest first, zero-filled."""
    start_day = end_day - timedelta(days=window_days - 1)
    buckets = {
        start_day + timedelta(days=offset): TrendBucket(
            day=start_day + timedelta(days=offset),
            label=(start_day + timedelta(days=offset)).strftime("%a"),
        )
        for offset in range(window_days)
    }
    for event in events:
        bucket = buckets.get(utc_day(event.timestamp))
        if bucket is None:
            continue
        if event.type == EventType.VIEW:
            bucket.views += 1
        elif event.type == EventType.TAP:
            bucket.taps += 1
    return [buckets[day] for day in sorted(buckets)]


def build_device_breakdown(events: Iterable[AnalyticsEvent]) -> DeviceBreakdown:
    counts = Counter(device_of(event) for event in events)
    classified = sum(counts[device] for device in CLASSIFIED_DEVICES)
    return DeviceBreakdown(
        mobile=counts[DeviceClass.MOBILE],
        desktop=counts[DeviceClass.DESKTOP],
        tablet=counts[DeviceClass.TABLET],
        unclassified=counts[DeviceClass.UNCLASSIFIED],
        total=sum(counts.values()),
        percentages={
            device.value: _percent(counts[device], classified)
            for device in CLASSIFIED_DEVICES
        },
    )


def build_profile_performance(
    events: Iterable[AnalyticsEvent],
    profiles: Optional[Sequence[ProfileRef]] = None,
) -> list[ProfilePerformanceEntry]:
    """
    Rank profiles by views, most viewed first.

    `profiles` is expected in creation order. Ties keep that order;
    profiles only known from events follow in order of first appearance.
    """
    views: dict[str, int] = {}
    names: dict[str, str] = {}
    for profile in profiles or ():
        views.setdefault(profile.id, 0)
        names[profile.id] = profile.name
    for event in events:
        views.setdefault(event.profile_id, 0)
        if event.type == EventType.VIEW:
            views[event.profile_id] += 1

    if not views:
        return [ProfilePerformanceEntry(name=NO_PROFILES_LABEL, placeholder=True)]

    total_views = sum(views.values())
    ranked = sorted(views.items(), key=lambda item: -item[1])
    return [
        ProfilePerformanceEntry(
            profile_id=profile_id,
            name=names.get(profile_id, profile_id),
            views=count,
            share=_percent(count, total_views),
        )
        for profile_id, count in ranked
    ]


def build_engagement(events: Iterable[AnalyticsEvent]) -> EngagementMetrics:
    """
    Engagement as percentages of views.

    With no views every ratio is 0. The clamped values are capped to
    [0, 100]; `raw` keeps the uncapped ratios.
    """
    views = clicks = downloads = social = qr = 0
    for event in events:
        if event.type == EventType.VIEW:
            views += 1
        elif event.type == EventType.CLICK:
            clicks += 1
        elif event.type == EventType.DOWNLOAD:
            downloads += 1
        if is_social_click(event):
            social += 1
        if is_qr_scan(event):
            qr += 1

    raw = EngagementRates(
        click_through_rate=_percent(clicks, views),
        contact_saves=_percent(downloads, views),
        social_clicks=_percent(social, views),
        qr_scans=_percent(qr, views),
    )
    return EngagementMetrics(
        click_through_rate=_clamp(raw.click_through_rate),
        contact_saves=_clamp(raw.contact_saves),
        social_clicks=_clamp(raw.social_clicks),
        qr_scans=_clamp(raw.qr_scans),
        raw=raw,
    )


def aggregate(
    events: Iterable[AnalyticsEvent],
    window_days: int = 7,
    *,
    profiles: Optional[Sequence[ProfileRef]] = None,
    now: Optional[datetime] = None,
) -> AnalyticsReport:
    """
    Build the dashboard report for a set of events.

    The trend covers the `window_days` UTC days ending on `now`'s date;
    the breakdown, ranking and engagement use every event supplied, so
    callers pass events already restricted to the period they want.

    Args:
        events: Raw events, any order
        window_days: Number of daily trend buckets, at least 1
        profiles: The owner's profiles in creation order, used for names
            and to list profiles that have no events yet
        now: Reference time, defaults to the current UTC time

    Raises:
        ValueError: If window_days is less than 1
    """
    if window_days < 1:
        raise ValueError(f"window_days must be at least 1, got {window_days}")

    events = list(events)
    end_day = utc_day(now or datetime.now(timezone.utc))
    trend = build_trend(events, window_days, end_day)

    return AnalyticsReport(
        window_days=window_days,
        start_date=trend[0].day,
        end_date=trend[-1].day,
        views_trend=trend,
        device_breakdown=build_device_breakdown(events),
        profile_performance=build_profile_performance(events, profiles),
        engagement_metrics=build_engagement(events),
    )


def summarize(events: Iterable[AnalyticsEvent]) -> EventSummary:
    """Totals, unique visitors and traffic sources for a set of events."""
    summary = EventSummary()
    sessions: set[str] = set()
    sources: Counter = Counter()
    elements: Counter = Counter()
    type_fields = {
        EventType.VIEW: "views",
        EventType.TAP: "taps",
        EventType.CLICK: "clicks",
        EventType.DOWNLOAD: "downloads",
        EventType.SHARE: "shares",
        EventType.SCAN: "scans",
        EventType.FORM_SUBMIT: "form_submits",
    }

    for event in events:
        summary.total_events += 1
        field = type_fields[event.type]
        setattr(summary, field, getattr(summary, field) + 1)
        sources[event.source.value] += 1
        if event.session_id:
            sessions.add(event.session_id)
        if event.type == EventType.CLICK and event.element_clicked:
            elements[event.element_clicked] += 1

    summary.unique_visitors = len(sessions)
    summary.sources = dict(sources)
    summary.clicked_elements = dict(elements)
    return summary
