"""
Analytics module exceptions.
"""

from typing import Optional

from shared.exceptions import BBTapError, ExternalServiceError, ValidationError


class AnalyticsError(BBTapError):
    """Base exception for analytics-related errors."""

    pass


class AnalyticsSourceError(ExternalServiceError):
    """
    Raised when events or profiles could not be fetched for a report.

    Reports are all-or-nothing: a failed fetch yields this error, never a
    partial report.
    """

    def __init__(self, message: str = "Analytics data is unavailable", reason: Optional[str] = None):
        super().__init__(
            message,
            service="analytics_store",
            code="ANALYTICS_SOURCE_ERROR",
            details={"reason": reason} if reason else None,
        )


class InvalidTimeRangeError(ValidationError):
    """Raised for an unrecognised reporting period."""

    def __init__(self, time_range: str, allowed: list[str]):
        super().__init__(
            f"Invalid time range: {time_range}",
            code="INVALID_TIME_RANGE",
            details={"time_range": time_range, "allowed": allowed},
        )
