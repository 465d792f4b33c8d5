"""
Analytics module.

Records visitor events on public profiles and turns them into dashboard
reports.

Public API:
- IAnalyticsService: Interface for recording and reporting
- aggregate / summarize: Pure event folds
- detect_device: User agent classification
- AnalyticsReport: Dashboard report
"""

from .interfaces import IAnalyticsService
from .models import (
    EventType,
    EventSource,
    DeviceClass,
    AnalyticsEvent,
    RecordEventRequest,
    RecordEventResponse,
    ProfileRef,
    TrendBucket,
    DeviceBreakdown,
    ProfilePerformanceEntry,
    EngagementRates,
    EngagementMetrics,
    AnalyticsReport,
    EventSummary,
    ProfileAnalyticsSummary,
)
from .aggregator import aggregate, summarize, NO_PROFILES_LABEL
from .device import detect_device
from .periods import parse_time_range
from .exceptions import (
    AnalyticsError,
    AnalyticsSourceError,
    InvalidTimeRangeError,
)

__all__ = [
    # Interface
    "IAnalyticsService",
    # Models
    "EventType",
    "EventSource",
    "DeviceClass",
    "AnalyticsEvent",
    "RecordEventRequest",
    "RecordEventResponse",
    "ProfileRef",
    "TrendBucket",
    "DeviceBreakdown",
    "ProfilePerformanceEntry",
    "EngagementRates",
    "EngagementMetrics",
    "AnalyticsReport",
    "EventSummary",
    "ProfileAnalyticsSummary",
    # Aggregation
    "aggregate",
    "summarize",
    "NO_PROFILES_LABEL",
    "detect_device",
    "parse_time_range",
    # Exceptions
    "AnalyticsError",
    "AnalyticsSourceError",
    "InvalidTimeRangeError",
]
